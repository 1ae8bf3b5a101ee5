from sqlalchemy import (
    Column, Integer, String, Text, Float,
    Boolean, DateTime, JSON
)
from sqlalchemy.dialects.postgresql import JSONB
from db.database import Base
from datetime import datetime


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    category = Column(String(120), nullable=True, index=True)  # Example: "handicrafts"

    price_amount = Column(Float, nullable=False, default=0.0)
    price_currency = Column(String(3), nullable=False, default="INR")

    # Images as array of objects
    images = Column(JSON().with_variant(JSONB, "postgresql"), default=list)
    # Example:
    # [
    #   {"url": "image1.png", "is_primary": True},
    #   {"url": "image2.png", "is_primary": False}
    # ]

    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
