from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.sql import func

from shared.config.database import Base


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    plan_name = Column(String(60), nullable=False)
    price = Column(Float, nullable=False)

    # Billing
    first_name = Column(String(120))
    last_name = Column(String(120))
    address = Column(String(255))
    city = Column(String(120))
    state = Column(String(120))
    zip = Column(String(20))
    payment_method = Column(String(40))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
