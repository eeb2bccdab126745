from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class SeatModel(Base):
    __tablename__ = 'seat'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trip_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('trip.id', ondelete='CASCADE'), nullable=False, index=True
    )
    position: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_booking: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_booked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    booked_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    paid_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    booking_code: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    hold_started_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    hold_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    reminders_sent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (UniqueConstraint('trip_id', 'position', name='uq_seat_trip_position'),)

    def __repr__(self):
        return (
            f'<SeatModel(id={self.id}, trip_id={self.trip_id}, position={self.position}, '
            f'booking={self.is_booking}, booked={self.is_booked}, paid={self.is_paid})>'
        )
