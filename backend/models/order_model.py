# backend/models/order_model.py
from datetime import datetime
from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey
from sqlalchemy.types import Unicode
from sqlalchemy.orm import relationship
from database.session import Base

class Order(Base):
    __tablename__ = "orders"
    id           = Column(Integer, primary_key=True, index=True)
    customer_id  = Column(Integer, ForeignKey("users.id"), nullable=False)
    producer_id  = Column(Integer, ForeignKey("producer_profiles.id"), nullable=False)
    status       = Column(Unicode(20), nullable=False, default="pending", index=True)
    total_amount = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    created_at   = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at   = Column(DateTime, onupdate=datetime.utcnow)

    customer = relationship("User")
    producer = relationship("ProducerProfile")
    items    = relationship("OrderItem", cascade="all, delete-orphan", back_populates="order")
    payments = relationship("Payment", back_populates="order")
