# backend/models/user_model.py
from datetime import datetime
from sqlalchemy import Column, Integer, Boolean, DateTime
from sqlalchemy.types import Unicode
from sqlalchemy.orm import relationship
from database.session import Base

class User(Base):
    __tablename__ = "users"
    id            = Column(Integer, primary_key=True, index=True)
    first_name    = Column(Unicode(100), nullable=False)
    last_name     = Column(Unicode(100), nullable=False)
    email         = Column(Unicode(255), unique=True, nullable=False, index=True)
    phone         = Column(Unicode(20))
    password_hash = Column("password", Unicode(255), nullable=False)  # bcrypt hash
    role          = Column(Unicode(20), nullable=False, default="customer")  # 'customer' / 'producer' / 'admin'
    is_verified   = Column(Boolean, nullable=False, default=False)
    last_login    = Column(DateTime)
    created_at    = Column(DateTime, nullable=False, default=datetime.utcnow)

    producer_profile = relationship("ProducerProfile", back_populates="user", uselist=False)
