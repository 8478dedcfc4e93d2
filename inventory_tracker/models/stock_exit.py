from sqlalchemy import Column, Date, Index, Integer, String

from inventory_tracker.database.base import Base, new_record_id


class StockExit(Base):
    __tablename__ = "exits"

    id = Column(String(32), primary_key=True, default=new_record_id)
    user_id = Column(String, nullable=False)

    product_id = Column(String(32), nullable=False)
    date = Column(Date, nullable=False)
    quantity = Column(Integer, nullable=False)

    __table_args__ = (
        Index("idx_exits_user_date", "user_id", "date"),
        Index("idx_exits_user_product", "user_id", "product_id"),
    )


__all__ = ["StockExit"]
