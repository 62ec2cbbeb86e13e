from typing import List, Optional

import structlog
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheClient
from shared.cache.keys import ORDERS_TTL, user_orders_key
from shared.observability.metrics import ecomm_orders_created_total
from shared.security import AuthenticatedUser

from .models import Order, OrderItem
from .repository import OrderRepository
from .schemas import CARD_PAYMENT_METHOD, LineItem, OrderCreate, OrderResponse

logger = structlog.get_logger(__name__)


def compute_total(products: List[LineItem]) -> float:
    """Order total is always derived server side from the line items."""
    return sum(item.price * item.quantity for item in products)


class OrderService:
    @staticmethod
    async def create_order(
        db: AsyncSession,
        cache: CacheClient,
        data: OrderCreate,
        user: Optional[AuthenticatedUser] = None,
    ) -> Order:
        card_last4 = card_expiry = card_brand = None
        if data.payment_method == CARD_PAYMENT_METHOD:
            if data.card is None:
                raise ValueError("Card details required for card payments")
            card_last4 = data.card.last4
            card_expiry = data.card.expiry
            card_brand = data.card.brand

        order = Order(
            user_id=user.id if user else None,
            first_name=data.first_name,
            last_name=data.last_name,
            address=data.address,
            city=data.city,
            state=data.state,
            zip=data.zip,
            payment_method=data.payment_method,
            card_last4=card_last4,
            card_expiry=card_expiry,
            card_brand=card_brand,
            products=[
                OrderItem(name=item.name, price=item.price, quantity=item.quantity)
                for item in data.products
            ],
            total_price=compute_total(data.products),
            status="pending",
        )
        order = await OrderRepository.create_order(db, order)

        if order.user_id is not None:
            await cache.delete(user_orders_key(order.user_id))

        ecomm_orders_created_total.labels(payment_method=data.payment_method or "unknown").inc()
        logger.info("order_created", order_id=order.id, user_id=order.user_id, total=order.total_price)
        return order

    @staticmethod
    async def list_orders_for_user(db: AsyncSession, cache: CacheClient, user_id: int) -> list:
        key = user_orders_key(user_id)
        cached = await cache.get(key)
        if isinstance(cached, list):
            return cached

        orders = await OrderRepository.list_for_user(db, user_id)
        payload = [OrderResponse.model_validate(o).model_dump(mode="json") for o in orders]
        await cache.set(key, payload, ORDERS_TTL)
        return payload

    @staticmethod
    async def get_order_for_user(db: AsyncSession, order_id: int, user_id: int) -> Order:
        order = await OrderRepository.get_order(db, order_id)
        # Someone else's order looks exactly like a missing one
        if not order or order.user_id != user_id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
        return order
