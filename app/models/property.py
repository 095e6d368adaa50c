"""Property model: listings, including temporary (short-stay) rentals."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, UUIDPrimaryKeyMixin


class Property(UUIDPrimaryKeyMixin, Base):
    """A listed property owned by the user who created it.

    ``availability`` embeds the property's date-range ledger as a JSON array
    and ``status`` holds the aggregate status derived from it. Both are only
    ever written together by the availability service.
    """

    __tablename__ = "properties"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    address: Mapped[str | None] = mapped_column(String(255), default=None)
    neighborhood: Mapped[str | None] = mapped_column(String(255), default=None)
    locality: Mapped[str | None] = mapped_column(String(255), default=None)
    province: Mapped[str | None] = mapped_column(String(255), default=None)
    property_type: Mapped[str] = mapped_column(String(50), nullable=False)  # casa, departamento, ph, ...
    transaction_type: Mapped[str] = mapped_column(String(50), nullable=False, default="alquiler_temporario")
    bedrooms: Mapped[int | None] = mapped_column(Integer, default=None)
    bathrooms: Mapped[int | None] = mapped_column(Integer, default=None)
    max_guests: Mapped[int | None] = mapped_column(Integer, default=None)
    base_price_per_night: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    amenities: Mapped[list | None] = mapped_column(JSON, default=list)
    rules: Mapped[list | None] = mapped_column(JSON, default=list)
    availability: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    status: Mapped[str] = mapped_column(String(50), default="disponible", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)  # soft-delete flag
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="properties", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    seasonal_prices: Mapped[list["SeasonalPrice"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="property", lazy="selectin", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title!r}, status={self.status!r})>"
