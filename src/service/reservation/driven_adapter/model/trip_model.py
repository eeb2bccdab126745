from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class TripModel(Base):
    __tablename__ = 'trip'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trip_code: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    trip_name: Mapped[str] = mapped_column(String(255), nullable=False)
    bus: Mapped[str] = mapped_column(String(100), nullable=False)
    pickup_city: Mapped[str] = mapped_column(String(100), nullable=False)
    pickup_location: Mapped[str] = mapped_column(String(255), nullable=False)
    dropoff_city: Mapped[str] = mapped_column(String(100), nullable=False)
    dropoff_location: Mapped[str] = mapped_column(String(255), nullable=False)
    takeoff_date: Mapped[date] = mapped_column(Date, nullable=False)
    takeoff_time: Mapped[str] = mapped_column(String(20), nullable=False)
    arrival_time: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    price_minor: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    seat_count: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='scheduled', nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self):
        return f'<TripModel(id={self.id}, trip_code={self.trip_code}, seat_count={self.seat_count})>'
