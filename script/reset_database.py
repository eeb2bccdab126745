#!/usr/bin/env python3
"""
Database Reset Script
Drop and recreate every table from the ORM metadata

Notes:
- This script only resets structure, does not seed data
- To seed demo data, run `python -m script.seed_data`
"""

import asyncio

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import (
    Base,
    create_db_and_tables,
    engine_manager,
    get_engine,
)


async def drop_all_tables() -> None:
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def main() -> None:
    print('🔄 Starting database reset...')
    print(f'Database URL: {settings.DATABASE_URL}')
    print('=' * 50)

    try:
        # Import models so drop_all sees every table
        await create_db_and_tables()
        print('🗑️  Dropping tables...')
        await drop_all_tables()
        print('🏗️  Creating tables...')
        await create_db_and_tables()
        print('=' * 50)
        print('✅ Database reset completed!')
        print('💡 To seed demo data, run: python -m script.seed_data')
    except Exception as e:
        print(f'❌ Reset failed: {e}')
        raise SystemExit(1) from e
    finally:
        await engine_manager.dispose()


if __name__ == '__main__':
    asyncio.run(main())
