"""SQLAlchemy ORM model for the CustomerRecord entity."""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from flourmill.infrastructure.database.base import Base


class CustomerRecordModel(Base):
    """ORM model — maps to the 'customer_records' table.

    ``customer_id`` is deliberately not unique: every transaction of the same
    customer carries the same value.
    """

    __tablename__ = "customer_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # normalize_name(customer_name); SQL lower() only folds ASCII on SQLite.
    customer_name_key: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_type: Mapped[str] = mapped_column(String(20), nullable=False)
    wheat_weight: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False, default=0)
    flour_type: Mapped[str] = mapped_column(String(20), nullable=False)
    rate_per_kg: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(14, 3), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(10), nullable=False)
    payment_status: Mapped[str] = mapped_column(String(10), nullable=False)
    is_ready: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_customer_records_customer_id", "customer_id"),
        Index("ix_customer_records_created_at", "created_at"),
        Index("ix_customer_records_customer_name_key", "customer_name_key"),
    )

    def __repr__(self) -> str:
        return (
            f"<CustomerRecordModel(id={self.id}, "
            f"customer_id={self.customer_id}, name='{self.customer_name}')>"
        )
