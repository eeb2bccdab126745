#!/usr/bin/env python3
"""
Database Seed Script
Populate demo data

Features:
1. Create Users - passengers that can hold seats and pay
2. Create Trip - one trip with SEATS seats (default 40) in shuffled order
"""

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta
import os

from sqlalchemy import select

from src.platform.config.di import container
from src.platform.database.orm_db_setting import (
    create_db_and_tables,
    engine_manager,
    get_session_maker,
)
from src.service.reservation.app.command.create_trip_with_seats_use_case import (
    CreateTripWithSeatsUseCase,
)
from src.service.reservation.app.dto.trip_dto import CreateTripRequest
from src.service.shared_kernel.driven_adapter.model.user_model import UserModel


@dataclass
class UserConfig:
    """User seed configuration"""

    email: str
    name: str
    phone: str


TEST_USERS = [
    UserConfig(email='ada@example.com', name='Ada Obi', phone='+2348000000001'),
    UserConfig(email='tunde@example.com', name='Tunde Bello', phone='+2348000000002'),
]


async def create_users() -> None:
    async with get_session_maker()() as session:
        for user in TEST_USERS:
            existing = await session.execute(select(UserModel).where(UserModel.email == user.email))
            if existing.scalar_one_or_none() is not None:
                print(f'   ⏭️  {user.email} already exists')
                continue
            session.add(UserModel(email=user.email, name=user.name, phone=user.phone))
            print(f'   ✅ {user.email} created')
        await session.commit()


async def create_trip() -> None:
    seat_count = int(os.getenv('SEATS', '40'))
    use_case = CreateTripWithSeatsUseCase(trip_command_repo=container.trip_command_repo())
    trip = await use_case.execute(
        CreateTripRequest(
            trip_name='Morning Express',
            bus='Toyota Coaster ABC-123',
            pickup_city='Lagos',
            pickup_location='Jibowu Park',
            dropoff_city='Ibadan',
            dropoff_location='Challenge Terminal',
            takeoff_date=date.today() + timedelta(days=7),
            takeoff_time='08:30',
            arrival_time='11:00',
            seat_count=seat_count,
            price_minor=900000,
        )
    )
    print(f'   ✅ Trip {trip.id} ({trip.trip_code}) with {trip.seat_count} seats')


async def main() -> None:
    print('🌱 Seeding demo data...')
    try:
        await create_db_and_tables()
        print('👤 Users')
        await create_users()
        print('🚌 Trip')
        await create_trip()
        print('✅ Seeding completed!')
    finally:
        await engine_manager.dispose()


if __name__ == '__main__':
    asyncio.run(main())
