from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .models import Contact

class ContactRepository:
    @staticmethod
    async def create(db: AsyncSession, contact: Contact):
        db.add(contact)
        await db.commit()
        await db.refresh(contact)
        return contact

    @staticmethod
    async def get(db: AsyncSession, contact_id: int):
        result = await db.execute(select(Contact).where(Contact.id == contact_id))
        return result.scalars().first()

    @staticmethod
    async def latest(db: AsyncSession, limit: int):
        result = await db.execute(
            select(Contact).order_by(Contact.created_at.desc(), Contact.id.desc()).limit(limit)
        )
        return result.scalars().all()

    @staticmethod
    async def delete(db: AsyncSession, contact: Contact):
        await db.delete(contact)
        await db.commit()
