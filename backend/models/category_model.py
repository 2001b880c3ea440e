# backend/models/category_model.py
from sqlalchemy import Column, Integer
from sqlalchemy.types import Unicode, UnicodeText
from database.session import Base

class Category(Base):
    __tablename__ = "categories"
    id          = Column(Integer, primary_key=True, index=True)
    name        = Column(Unicode(100), unique=True, nullable=False)
    description = Column(UnicodeText)
