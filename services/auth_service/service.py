import structlog
from fastapi import HTTPException, status
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheClient
from shared.cache.keys import PROFILE_TTL, user_profile_key
from shared.config import settings
from shared.security import issue_access_token

from .models import User
from .repository import UserRepository
from .schemas import TokenResponse, UserCreate, UserLogin, UserResponse, UserUpdate

logger = structlog.get_logger(__name__)

_pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


class AuthService:

    @staticmethod
    def _hash_password(password: str) -> str:
        return _pwd_context.hash(password)

    @staticmethod
    def _verify_password(plain: str, hashed: str) -> bool:
        return _pwd_context.verify(plain, hashed)

    @staticmethod
    def _profile(user: User) -> dict:
        return UserResponse.model_validate(user).model_dump(mode="json")

    @staticmethod
    async def register(db: AsyncSession, data: UserCreate) -> User:
        existing = await UserRepository.get_by_email(db, data.email)
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered",
            )
        user = User(
            name=data.name,
            email=data.email,
            hashed_password=AuthService._hash_password(data.password),
        )
        user = await UserRepository.create(db, user)
        logger.info("user_registered", user_id=user.id)
        return user

    @staticmethod
    async def login(db: AsyncSession, data: UserLogin) -> TokenResponse:
        user = await UserRepository.get_by_email(db, data.email)
        if not user or not AuthService._verify_password(data.password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is disabled",
            )
        token = issue_access_token(user.id, user.email)
        return TokenResponse(access_token=token)

    @staticmethod
    async def get_profile(db: AsyncSession, cache: CacheClient, user_id: int) -> dict:
        key = user_profile_key(user_id)
        cached = await cache.get(key)
        if isinstance(cached, dict):
            return cached

        user = await UserRepository.get_by_id(db, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        profile = AuthService._profile(user)
        await cache.set(key, profile, PROFILE_TTL)
        return profile

    @staticmethod
    async def update_profile(db: AsyncSession, cache: CacheClient, user_id: int, data: UserUpdate) -> dict:
        user = await UserRepository.get_by_id(db, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        if data.name is not None:
            user.name = data.name
        if data.password is not None:
            user.hashed_password = AuthService._hash_password(data.password)
        user = await UserRepository.update(db, user)

        # Invalidate, then re-cache the fresh copy
        key = user_profile_key(user_id)
        profile = AuthService._profile(user)
        await cache.delete(key)
        await cache.set(key, profile, PROFILE_TTL)
        return profile

    @staticmethod
    async def delete_account(db: AsyncSession, cache: CacheClient, user_id: int) -> None:
        user = await UserRepository.get_by_id(db, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        await UserRepository.delete(db, user)
        await cache.delete(user_profile_key(user_id))
        logger.info("user_deleted", user_id=user_id)
