from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheClient, get_cache
from shared.config.database import get_db
from shared.realtime import EventPublisher, get_event_publisher
from shared.security import get_current_user, limiter

from .schemas import ContactCreate, ContactCreated, ContactList, ContactResponse
from .service import ContactService

router = APIRouter(prefix="/api/contacts", tags=["Contacts"])


@router.post("", response_model=ContactCreated, status_code=status.HTTP_201_CREATED)
@limiter.limit("20/minute")
async def create_contact(
    request: Request,
    payload: ContactCreate,
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
    events: EventPublisher = Depends(get_event_publisher),
):
    contact = await ContactService.create_contact(db, cache, events, payload)
    return ContactCreated(id=contact.id)


@router.get("", response_model=ContactList)
async def list_contacts(
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    return {"contacts": await ContactService.list_latest(db, cache)}


@router.get(
    "/{contact_id}",
    response_model=ContactResponse,
    dependencies=[Depends(get_current_user)],
)
async def get_contact(contact_id: int, db: AsyncSession = Depends(get_db)):
    return await ContactService.get_contact(db, contact_id)


@router.delete(
    "/{contact_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(get_current_user)],
)
async def delete_contact(
    contact_id: int,
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    await ContactService.delete_contact(db, cache, contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
