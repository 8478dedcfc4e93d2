from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Index, Integer, String

from inventory_tracker.database.base import Base, new_record_id


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_record_id)
    user_id = Column(String, nullable=False)

    name = Column(String, nullable=False)
    unit = Column(String, nullable=False)
    min_stock = Column(Integer, nullable=False, default=0)
    price = Column(Float, nullable=False, default=0)

    consumption_unit = Column(String)
    consumption_rate = Column(Float)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_products_user_name", "user_id", "name"),
    )


__all__ = ["Product"]
