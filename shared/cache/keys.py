"""
Cache key builders and TTLs.

Every read path and every invalidation path builds its key here, so a write
can never miss the key its matching read populated.
"""
from typing import Union

PROFILE_TTL = 3600
SUBSCRIPTIONS_TTL = 1800
ORDERS_TTL = 300
PLANS_TTL = 86400
CONTACTS_TTL = 60


def cache_key(resource: str, resource_id: Union[int, str], view: str) -> str:
    """Builds ``<resource>:<id>:<view>``, e.g. ``user:42:profile``."""
    return f"{resource}:{resource_id}:{view}"


def user_profile_key(user_id: int) -> str:
    return cache_key("user", user_id, "profile")


def user_orders_key(user_id: int) -> str:
    return cache_key("user", user_id, "orders")


def user_subscriptions_key(user_id: int) -> str:
    return cache_key("user", user_id, "subscriptions")


def plans_key() -> str:
    return cache_key("plans", "all", "list")


def contacts_latest_key() -> str:
    return cache_key("contacts", "all", "latest")
