from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

CARD_PAYMENT_METHOD = "card"


class LineItem(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)


class CardDetails(BaseModel):
    # Accepted on the wire, reduced to last4/expiry/brand before persistence
    number: str
    expiry: Optional[str] = Field(default=None, max_length=7)
    brand: Optional[str] = Field(default=None, max_length=40)
    cvv: Optional[str] = None

    @field_validator("number")
    @classmethod
    def digits_only(cls, value: str) -> str:
        digits = "".join(ch for ch in value if ch not in " -")
        if not digits.isdigit() or len(digits) < 4:
            raise ValueError("Card number must contain at least 4 digits")
        return digits

    @property
    def last4(self) -> str:
        return self.number[-4:]


class OrderCreate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    payment_method: Optional[str] = None
    products: List[LineItem] = Field(default_factory=list, validate_default=True)
    card: Optional[CardDetails] = None
    # Any client-side total in the body is ignored: unknown fields are dropped

    @model_validator(mode="before")
    @classmethod
    def drop_card_for_other_methods(cls, data):
        # Card details are validated only for card payments
        if isinstance(data, dict) and "card" in data:
            method = data.get("payment_method")
            if not isinstance(method, str) or method.strip().lower() != CARD_PAYMENT_METHOD:
                data = {k: v for k, v in data.items() if k != "card"}
        return data

    @field_validator("products")
    @classmethod
    def products_required(cls, value: List[LineItem]) -> List[LineItem]:
        if not value:
            raise ValueError("Products required")
        return value

    @field_validator("payment_method")
    @classmethod
    def normalize_payment_method(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value else value


class OrderCreated(BaseModel):
    message: str = "Order created successfully"
    order_id: int


class LineItemResponse(BaseModel):
    name: str
    price: float
    quantity: int

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    user_id: Optional[int]
    first_name: Optional[str]
    last_name: Optional[str]
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip: Optional[str]
    payment_method: Optional[str]
    card_last4: Optional[str]
    card_expiry: Optional[str]
    card_brand: Optional[str]
    products: List[LineItemResponse] = []
    total_price: float
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderList(BaseModel):
    orders: List[OrderResponse]
