import asyncio

from sqlalchemy import select

from app.db import Database
from app.models import Booking
from app.seed import DEMO_PASSWORD, run


def _bookings(database_url):
    async def fetch():
        database = Database(database_url)
        await database.connect()
        try:
            async with database.session() as db:
                return (await db.execute(select(Booking).order_by(Booking.id))).scalars().all()
        finally:
            await database.dispose()

    return asyncio.run(fetch())


class TestSeed:
    def test_seed_is_idempotent(self, database_url):
        first = asyncio.run(run(database_url))
        second = asyncio.run(run(database_url))

        assert first == {"bookings": 3}
        assert second == {"bookings": 0}
        assert len(_bookings(database_url)) == 3

    def test_seeded_bookings_are_linked_to_providers(self, database_url):
        asyncio.run(run(database_url))

        rows = _bookings(database_url)
        assert [b.status for b in rows] == ["Pending", "Accepted", "Completed"]
        assert all(b.provider_id is not None for b in rows)

    def test_demo_accounts_can_log_in(self, database_url):
        asyncio.run(run(database_url))

        from fastapi.testclient import TestClient

        from app.main import create_app

        with TestClient(create_app(database_url=database_url)) as client:
            resp = client.post("/login", json={"email": "testuser@example.com", "password": DEMO_PASSWORD})
            assert resp.status_code == 200
            headers = {"Authorization": f"Bearer {resp.json()['token']}"}
            assert len(client.get("/bookings", headers=headers).json()["bookings"]) == 3

            resp = client.post("/login", json={"email": "ramesh@example.com", "password": DEMO_PASSWORD})
            headers = {"Authorization": f"Bearer {resp.json()['token']}"}
            assert len(client.get("/provider-bookings", headers=headers).json()["bookings"]) == 2
