# backend/models/product_model.py
from datetime import datetime
from sqlalchemy import Column, Integer, Numeric, Boolean, DateTime, ForeignKey
from sqlalchemy.types import Unicode, UnicodeText
from sqlalchemy.orm import relationship

from database.session import Base

class Product(Base):
    __tablename__ = "products"

    id             = Column(Integer, primary_key=True, index=True)
    producer_id    = Column(Integer, ForeignKey("producer_profiles.id"), nullable=False, index=True)
    category_id    = Column(Integer, ForeignKey("categories.id"), nullable=True)
    name           = Column(Unicode(255), nullable=False)
    description    = Column(UnicodeText)
    price          = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    is_available   = Column(Boolean, nullable=False, default=True)
    # approval only; visibility to customers also needs is_available
    is_approved    = Column(Boolean, nullable=False, default=False, index=True)
    created_at     = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at     = Column(DateTime, onupdate=datetime.utcnow)

    producer = relationship("ProducerProfile", back_populates="products")
    category = relationship("Category")
