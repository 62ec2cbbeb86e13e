from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .models import Subscription

class SubscriptionRepository:
    @staticmethod
    async def create(db: AsyncSession, subscription: Subscription):
        db.add(subscription)
        await db.commit()
        await db.refresh(subscription)
        return subscription

    @staticmethod
    async def get(db: AsyncSession, subscription_id: int):
        result = await db.execute(select(Subscription).where(Subscription.id == subscription_id))
        return result.scalars().first()

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: int):
        result = await db.execute(
            select(Subscription)
            .where(Subscription.user_id == user_id)
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def latest(db: AsyncSession, limit: int = 10):
        result = await db.execute(
            select(Subscription)
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
            .limit(limit)
        )
        return result.scalars().all()

    @staticmethod
    async def delete(db: AsyncSession, subscription: Subscription):
        await db.delete(subscription)
        await db.commit()
