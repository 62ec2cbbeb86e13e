from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shared.config.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=True, index=True) # anonymous checkout allowed

    # Shipping
    first_name = Column(String(120))
    last_name = Column(String(120))
    address = Column(String(255))
    city = Column(String(120))
    state = Column(String(120))
    zip = Column(String(20))

    payment_method = Column(String(40))
    # Card metadata only. The full number and the CVV are never stored.
    card_last4 = Column(String(4), nullable=True)
    card_expiry = Column(String(7), nullable=True)
    card_brand = Column(String(40), nullable=True)

    total_price = Column(Float, nullable=False) # calculated at creation
    status = Column(String(20), default="pending") # pending, paid, shipped
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    products = relationship(
        "OrderItem",
        back_populates="order",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    order = relationship("Order", back_populates="products")
