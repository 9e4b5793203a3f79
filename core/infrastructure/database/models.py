"""
SQLAlchemy ORM Models.

Maps the Order aggregate to a single `orders` table. Items are stored as a
JSON document on the row; there is no separate items table because items
are never edited after creation.
"""
from sqlalchemy import JSON, Column, DateTime, Index, String, Text
from sqlalchemy.orm import declarative_base


Base = declarative_base()


# =============================================================================
# ORDER MODEL
# =============================================================================

class OrderModel(Base):
    """
    Order database model.

    One row per order, keyed by `id`. The (status, created_at, id) index is
    the status secondary index used by filtered listings.
    """

    __tablename__ = "orders"

    # Primary key (UUID string)
    id = Column(String(36), primary_key=True)

    customer_name = Column(String(255), nullable=False)
    items = Column(JSON, nullable=False)

    status = Column(String(32), nullable=False)
    processing_notes = Column(Text, nullable=True)

    # Timestamps (always UTC)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_orders_status_created_at", "status", "created_at", "id"),
    )

    def __repr__(self):
        return f"<OrderModel(id={self.id}, status={self.status})>"
