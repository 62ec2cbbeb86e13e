from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheClient, get_cache
from shared.config.database import get_db
from shared.security import AuthenticatedUser, get_current_user, verify_internal_api_key

from .schemas import (
    PlanList,
    SubscriptionCreate,
    SubscriptionCreated,
    SubscriptionList,
    SubscriptionResponse,
)
from .service import SubscriptionService

router = APIRouter(prefix="/api/subscriptions", tags=["Subscriptions"])


@router.get("/plans", response_model=PlanList)
async def list_plans(cache: CacheClient = Depends(get_cache)):
    return {"plans": await SubscriptionService.list_plans(cache)}


@router.post("", response_model=SubscriptionCreated, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    payload: SubscriptionCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    subscription = await SubscriptionService.create_subscription(db, cache, user.id, payload)
    return SubscriptionCreated(subscription_id=subscription.id)


@router.get("/mine", response_model=SubscriptionList)
async def list_my_subscriptions(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    return {"subscriptions": await SubscriptionService.list_for_user(db, cache, user.id)}


@router.get(
    "/debug/latest",
    response_model=List[SubscriptionResponse],
    dependencies=[Depends(verify_internal_api_key)],
    include_in_schema=False,
)
async def debug_latest(db: AsyncSession = Depends(get_db)):
    return await SubscriptionService.latest(db)


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_subscription(
    subscription_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    await SubscriptionService.cancel(db, cache, user.id, subscription_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
