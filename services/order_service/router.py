from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheClient, get_cache
from shared.config.database import get_db
from shared.security import AuthenticatedUser, get_current_user, get_optional_user

from .schemas import OrderCreate, OrderCreated, OrderList, OrderResponse
from .service import OrderService

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
async def create_order(
    order: OrderCreate,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    try:
        created = await OrderService.create_order(db, cache, order, user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return OrderCreated(order_id=created.id)


@router.get("/mine", response_model=OrderList)
async def list_my_orders(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    return {"orders": await OrderService.list_orders_for_user(db, cache, user.id)}


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.get_order_for_user(db, order_id, user.id)
