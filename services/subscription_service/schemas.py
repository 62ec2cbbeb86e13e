from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, model_validator


class Plan(BaseModel):
    name: str
    price: float
    description: str


class PlanList(BaseModel):
    plans: List[Plan]


class SubscriptionCreate(BaseModel):
    plan_name: Optional[str] = None
    price: Optional[float] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    payment_method: Optional[str] = None

    @model_validator(mode="after")
    def plan_and_price_required(self):
        if not self.plan_name or not self.price or self.price <= 0:
            raise ValueError("Missing data")
        return self


class SubscriptionCreated(BaseModel):
    message: str = "Subscription created"
    subscription_id: int


class SubscriptionResponse(BaseModel):
    id: int
    user_id: int
    plan_name: str
    price: float
    first_name: Optional[str]
    last_name: Optional[str]
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip: Optional[str]
    payment_method: Optional[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubscriptionList(BaseModel):
    subscriptions: List[SubscriptionResponse]
