from sqlalchemy import Column, Integer, String, Text, Float, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from db.database import Base
from datetime import datetime


class Guide(Base):
    __tablename__ = "guides"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    bio = Column(Text, nullable=False, default="")

    specializations = Column(JSON().with_variant(JSONB, "postgresql"), default=list)  # Example: ["trekking", "birding"]

    district = Column(String(120), nullable=True, index=True)
    state = Column(String(120), nullable=True)

    full_day_price = Column(Float, nullable=True)
    half_day_price = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
