from sqlalchemy import Column, Integer, String, Text, Float, DateTime, Enum, Index, JSON
from sqlalchemy.dialects.postgresql import JSONB
from db.database import Base
from datetime import datetime
import enum


class HomestayStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class Homestay(Base):
    __tablename__ = "homestays"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    # Location
    district = Column(String(120), nullable=True, index=True)
    state = Column(String(120), nullable=True)
    address = Column(String(255), nullable=True)

    base_price = Column(Float, nullable=False, default=0.0)

    # Images as array of objects
    images = Column(JSON().with_variant(JSONB, "postgresql"), default=list)
    # Example:
    # [
    #   {"url": "front.png", "is_primary": True},
    #   {"url": "room.png", "is_primary": False}
    # ]

    status = Column(
        Enum(HomestayStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=HomestayStatus.ACTIVE,
    )

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_homestay_status", "status"),
    )
