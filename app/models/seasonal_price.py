"""Seasonal price model: percentage adjustments over date ranges."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, UUIDPrimaryKeyMixin


class SeasonalPrice(UUIDPrimaryKeyMixin, Base):
    """A nightly-rate adjustment applied to a property between two days (inclusive)."""

    __tablename__ = "seasonal_prices"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    percentage: Mapped[Decimal] = mapped_column(Numeric(7, 2), nullable=False)  # 0..1000
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    property: Mapped["Property"] = relationship(back_populates="seasonal_prices", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (Index("ix_seasonal_prices_property_dates", "property_id", "start_date", "end_date"),)

    def is_date_in_range(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def __repr__(self) -> str:
        return (
            f"<SeasonalPrice(id={self.id}, property_id={self.property_id}, "
            f"{self.start_date}..{self.end_date}, percentage={self.percentage})>"
        )
