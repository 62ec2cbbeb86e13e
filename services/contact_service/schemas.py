from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class ContactCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=120)
    last_name: Optional[str] = Field(default=None, max_length=120)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=40)
    message: str = Field(min_length=1)


class ContactCreated(BaseModel):
    message: str = "Contact saved"
    id: int


class ContactResponse(BaseModel):
    id: int
    first_name: str
    last_name: Optional[str]
    email: str
    phone: Optional[str]
    message: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ContactList(BaseModel):
    contacts: List[ContactResponse]
