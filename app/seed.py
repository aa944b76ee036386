"""
Create the tables and load demo data.

    python -m app.seed [--database-url URL]

Safe to run repeatedly: existing users are kept and bookings are only
inserted into an empty table.
"""
import argparse
import asyncio
import logging
from datetime import date, time

from sqlalchemy import func, select

from .config import DATABASE_URL
from .db import Database
from .models import Booking, BookingStatus, Role, User
from .security import hash_password
from .users import find_by_email

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "Password123"

DEMO_CUSTOMER = {
    "name": "Test User",
    "email": "testuser@example.com",
    "phone": "9876543210",
    "role": Role.CUSTOMER.value,
}

DEMO_PROVIDERS = [
    {
        "name": "Ramesh Electrician",
        "email": "ramesh@example.com",
        "phone": "9876500001",
        "role": Role.PROVIDER.value,
    },
    {
        "name": "Suresh Plumber",
        "email": "suresh@example.com",
        "phone": "9876500002",
        "role": Role.PROVIDER.value,
    },
]

DEMO_BOOKINGS = [
    ("Electrician", "Ramesh Electrician", date(2026, 2, 20), time(10, 0), "123 Main St, City", "Fix ceiling fan", BookingStatus.PENDING),
    ("Plumber", "Suresh Plumber", date(2026, 2, 21), time(14, 0), "456 Oak Ave, Town", "Leaky tap repair", BookingStatus.ACCEPTED),
    ("Electrician", "Ramesh Electrician", date(2026, 2, 22), time(9, 0), "789 Pine Rd, Village", "Install new lights", BookingStatus.COMPLETED),
]


async def _ensure_user(db, data: dict) -> User:
    user = await find_by_email(db, data["email"])
    if user:
        logger.info("user %s already exists", data["email"])
        return user

    user = User(password=hash_password(DEMO_PASSWORD), **data)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("created %s %s (password: %s)", data["role"], data["email"], DEMO_PASSWORD)
    return user


async def seed(database: Database) -> dict:
    """Load demo users and bookings; returns counts of what was inserted."""
    inserted = {"bookings": 0}

    async with database.session() as db:
        customer = await _ensure_user(db, DEMO_CUSTOMER)
        providers = {}
        for p in DEMO_PROVIDERS:
            providers[p["name"]] = await _ensure_user(db, p)

        count = (await db.execute(select(func.count()).select_from(Booking))).scalar_one()
        if count:
            logger.info("bookings already exist (%s rows)", count)
            return inserted

        for service, provider, day, at, address, notes, status in DEMO_BOOKINGS:
            db.add(
                Booking(
                    customer_id=customer.id,
                    customer_name=customer.name,
                    service=service,
                    provider=provider,
                    provider_id=providers[provider].id,
                    booking_date=day,
                    booking_time=at,
                    address=address,
                    notes=notes,
                    status=status.value,
                )
            )
        await db.commit()
        inserted["bookings"] = len(DEMO_BOOKINGS)
        logger.info("created %s demo bookings", len(DEMO_BOOKINGS))

    return inserted


async def run(database_url: str) -> dict:
    database = Database(database_url)
    await database.connect()
    try:
        return await seed(database)
    finally:
        await database.dispose()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create tables and load demo data.")
    parser.add_argument("--database-url", default=DATABASE_URL)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(run(args.database_url))
    logger.info("database setup completed")


if __name__ == "__main__":
    main()
