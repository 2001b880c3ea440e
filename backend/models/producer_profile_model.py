# backend/models/producer_profile_model.py
from datetime import datetime
from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.types import Unicode, UnicodeText
from sqlalchemy.orm import relationship
from database.session import Base

class ProducerProfile(Base):
    __tablename__ = "producer_profiles"
    id            = Column(Integer, primary_key=True, index=True)
    user_id       = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    business_name = Column(Unicode(255), nullable=False)
    description   = Column(UnicodeText)
    is_approved   = Column(Boolean, nullable=False, default=False, index=True)
    created_at    = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at    = Column(DateTime, onupdate=datetime.utcnow)

    user     = relationship("User", back_populates="producer_profile")
    products = relationship("Product", back_populates="producer")
