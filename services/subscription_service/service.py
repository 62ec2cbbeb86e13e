import structlog
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheClient
from shared.cache.keys import PLANS_TTL, SUBSCRIPTIONS_TTL, plans_key, user_subscriptions_key
from shared.observability.metrics import ecomm_subscriptions_created_total

from .models import Subscription
from .repository import SubscriptionRepository
from .schemas import SubscriptionCreate, SubscriptionResponse

logger = structlog.get_logger(__name__)

PLANS = [
    {"name": "Basic", "price": 6500, "description": "Standard workouts"},
    {"name": "Premium", "price": 7500, "description": "Personal training"},
    {"name": "Ultimate", "price": 8500, "description": "All access"},
]

DEBUG_LATEST_LIMIT = 10


class SubscriptionService:
    @staticmethod
    async def list_plans(cache: CacheClient) -> list:
        cached = await cache.get(plans_key())
        if isinstance(cached, list):
            return cached

        plans = [dict(plan) for plan in PLANS]
        await cache.set(plans_key(), plans, PLANS_TTL)
        return plans

    @staticmethod
    async def create_subscription(
        db: AsyncSession, cache: CacheClient, user_id: int, data: SubscriptionCreate
    ) -> Subscription:
        subscription = Subscription(
            user_id=user_id,
            plan_name=data.plan_name,
            price=data.price,
            first_name=data.first_name,
            last_name=data.last_name,
            address=data.address,
            city=data.city,
            state=data.state,
            zip=data.zip,
            payment_method=data.payment_method,
        )
        subscription = await SubscriptionRepository.create(db, subscription)
        await cache.delete(user_subscriptions_key(user_id))

        ecomm_subscriptions_created_total.labels(plan_name=data.plan_name).inc()
        logger.info("subscription_created", subscription_id=subscription.id, user_id=user_id)
        return subscription

    @staticmethod
    async def list_for_user(db: AsyncSession, cache: CacheClient, user_id: int) -> list:
        key = user_subscriptions_key(user_id)
        cached = await cache.get(key)
        if isinstance(cached, list):
            return cached

        subscriptions = await SubscriptionRepository.list_for_user(db, user_id)
        payload = [SubscriptionResponse.model_validate(s).model_dump(mode="json") for s in subscriptions]
        await cache.set(key, payload, SUBSCRIPTIONS_TTL)
        return payload

    @staticmethod
    async def cancel(db: AsyncSession, cache: CacheClient, user_id: int, subscription_id: int) -> None:
        subscription = await SubscriptionRepository.get(db, subscription_id)
        if not subscription or subscription.user_id != user_id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscription not found")

        await SubscriptionRepository.delete(db, subscription)
        await cache.delete(user_subscriptions_key(user_id))
        logger.info("subscription_cancelled", subscription_id=subscription_id, user_id=user_id)

    @staticmethod
    async def latest(db: AsyncSession):
        return await SubscriptionRepository.latest(db, DEBUG_LATEST_LIMIT)
