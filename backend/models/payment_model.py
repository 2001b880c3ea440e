# backend/models/payment_model.py
from datetime import datetime
from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey
from sqlalchemy.types import Unicode
from sqlalchemy.orm import relationship
from database.session import Base

class Payment(Base):
    __tablename__ = "payments"
    id         = Column(Integer, primary_key=True, index=True)
    order_id   = Column(Integer, ForeignKey("orders.id"), nullable=False)
    amount     = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    status     = Column(Unicode(20), nullable=False, default="pending")  # 'pending' / 'completed' / 'failed'
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    order = relationship("Order", back_populates="payments")
