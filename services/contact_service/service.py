import structlog
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheClient
from shared.cache.keys import CONTACTS_TTL, contacts_latest_key
from shared.observability.metrics import ecomm_contacts_created_total
from shared.realtime import EventPublisher, NotificationEvent

from .models import Contact
from .repository import ContactRepository
from .schemas import ContactCreate, ContactResponse

logger = structlog.get_logger(__name__)

LATEST_LIMIT = 200


def contact_created_event(contact: Contact) -> NotificationEvent:
    full_name = " ".join(part for part in (contact.first_name, contact.last_name) if part)
    return NotificationEvent(
        type="contact",
        title="New Contact Form Submission",
        message=f"New message from {full_name}",
        data={
            "id": contact.id,
            "email": contact.email,
            "first_name": contact.first_name,
            "last_name": contact.last_name,
        },
    )


class ContactService:
    @staticmethod
    async def create_contact(
        db: AsyncSession, cache: CacheClient, events: EventPublisher, data: ContactCreate
    ) -> Contact:
        contact = Contact(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            message=data.message,
        )
        contact = await ContactRepository.create(db, contact)
        await cache.delete(contacts_latest_key())

        ecomm_contacts_created_total.inc()
        logger.info("contact_saved", contact_id=contact.id)

        # Only after the commit: a failed write never notifies anyone
        events.publish(contact_created_event(contact))
        return contact

    @staticmethod
    async def list_latest(db: AsyncSession, cache: CacheClient) -> list:
        key = contacts_latest_key()
        cached = await cache.get(key)
        if isinstance(cached, list):
            return cached

        contacts = await ContactRepository.latest(db, LATEST_LIMIT)
        payload = [ContactResponse.model_validate(c).model_dump(mode="json") for c in contacts]
        await cache.set(key, payload, CONTACTS_TTL)
        return payload

    @staticmethod
    async def get_contact(db: AsyncSession, contact_id: int) -> Contact:
        contact = await ContactRepository.get(db, contact_id)
        if not contact:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
        return contact

    @staticmethod
    async def delete_contact(db: AsyncSession, cache: CacheClient, contact_id: int) -> None:
        contact = await ContactService.get_contact(db, contact_id)
        await ContactRepository.delete(db, contact)
        await cache.delete(contacts_latest_key())
        logger.info("contact_deleted", contact_id=contact_id)
