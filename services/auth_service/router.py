from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheClient, get_cache
from shared.config.database import get_db
from shared.security import AuthenticatedUser, get_current_user, limiter

from .schemas import TokenResponse, UserCreate, UserLogin, UserResponse, UserUpdate
from .service import AuthService

router = APIRouter(prefix="/api", tags=["Users"])


@router.post(
    "/users/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    return await AuthService.register(db, payload)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Exchange credentials for a bearer token",
)
@limiter.limit("10/minute")
async def login(request: Request, payload: UserLogin, db: AsyncSession = Depends(get_db)):
    return await AuthService.login(db, payload)


@router.get("/users/me", response_model=UserResponse)
async def get_me(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    return await AuthService.get_profile(db, cache, user.id)


@router.put("/users/me", response_model=UserResponse)
async def update_me(
    payload: UserUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    return await AuthService.update_profile(db, cache, user.id, payload)


@router.delete("/users/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    await AuthService.delete_account(db, cache, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    _: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
):
    return await AuthService.get_profile(db, cache, user_id)
