"""Seed the database with sample temporary-rental listings.

Creates a demo owner and an admin, three properties on the Atlantic coast and
in Patagonia, a few calendar ranges relative to today and one high season per
property. Calendar ranges go through the availability service, so the same
overlap and status rules apply as for API clients.

Run from the project root:
    python -m scripts.seed_data
"""

import asyncio
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.passwords import hash_password
from app.availability.locks import PropertyLockRegistry
from app.availability.service import AvailabilityService, Requester
from app.availability.store import SqlAlchemyPropertyStore
from app.database import async_session_factory, create_tables, engine
from app.models.property import Property
from app.models.seasonal_price import SeasonalPrice
from app.models.user import User
from app.services import pricing_service

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_OWNER = {
    "email": "demo@alquileres.example.com",
    "password": "demo1234",
    "name": "Demo Propietaria",
}

DEMO_ADMIN = {
    "email": "admin@alquileres.example.com",
    "password": "admin1234",
    "name": "Demo Admin",
}

PROPERTIES = [
    {
        "title": "Casa con pileta en Mar de las Pampas",
        "description": "Casa de tres dormitorios a dos cuadras del mar, rodeada de pinos.",
        "address": "Santos Vega 850",
        "locality": "Mar de las Pampas",
        "province": "Buenos Aires",
        "property_type": "casa",
        "bedrooms": 3,
        "bathrooms": 2,
        "max_guests": 6,
        "base_price_per_night": Decimal("120.00"),
        "amenities": ["pileta", "parrilla", "wifi", "cochera"],
        "rules": ["no fumar", "mascotas a consultar"],
    },
    {
        "title": "Departamento frente al mar en Pinamar",
        "description": "Dos ambientes con balcon al mar y cochera cubierta.",
        "address": "Av. del Mar 1200, piso 4",
        "locality": "Pinamar",
        "province": "Buenos Aires",
        "property_type": "departamento",
        "bedrooms": 1,
        "bathrooms": 1,
        "max_guests": 3,
        "base_price_per_night": Decimal("75.00"),
        "amenities": ["wifi", "aire acondicionado"],
        "rules": ["no fiestas"],
    },
    {
        "title": "Cabana de troncos en Villa La Angostura",
        "description": "Cabana para cuatro personas con vista al lago Nahuel Huapi.",
        "address": "Ruta 231 km 60",
        "locality": "Villa La Angostura",
        "province": "Neuquen",
        "property_type": "cabana",
        "bedrooms": 2,
        "bathrooms": 1,
        "max_guests": 4,
        "base_price_per_night": Decimal("95.00"),
        "amenities": ["hogar a lena", "wifi", "parrilla"],
        "rules": ["no fumar"],
    },
]


def build_calendar(today: date) -> list[list[dict]]:
    """Calendar ranges for each entry of ``PROPERTIES``, relative to ``today``."""

    def day(offset: int) -> str:
        return (today + timedelta(days=offset)).isoformat()

    return [
        [
            {"startDate": day(1), "endDate": day(30), "status": "disponible"},
            {
                "startDate": day(35),
                "endDate": day(42),
                "status": "reservado_temp",
                "clientName": "Lucia Fernandez",
                "deposit": "300",
                "guests": 4,
            },
        ],
        [
            {
                "startDate": day(-2),
                "endDate": day(5),
                "status": "ocupado_temp",
                "clientName": "Martin Gomez",
                "deposit": "150",
                "guests": 2,
                "notes": "Llegan en auto, usan la cochera",
            },
            {"startDate": day(6), "endDate": day(60), "status": "disponible"},
        ],
        [
            {"startDate": day(10), "endDate": day(90), "status": "disponible"},
        ],
    ]


def build_seasons(today: date) -> list[dict]:
    """One high season per property, starting two weeks from ``today``."""
    start = today + timedelta(days=14)
    return [
        {"start_date": start, "end_date": start + timedelta(days=20), "percentage": Decimal("30")},
        {"start_date": start, "end_date": start + timedelta(days=10), "percentage": Decimal("15")},
        {"start_date": start, "end_date": start + timedelta(days=45), "percentage": Decimal("50")},
    ]


# ---------------------------------------------------------------------------
# Seed function
# ---------------------------------------------------------------------------


async def _replace_user(session: AsyncSession, data: dict, role: str) -> User:
    """Delete a demo user (and their listings) if present, then create it again."""
    result = await session.execute(select(User).where(User.email == data["email"]))
    existing = result.scalar_one_or_none()
    if existing is not None:
        result = await session.execute(select(Property.id).where(Property.owner_id == existing.id))
        property_ids = list(result.scalars().all())
        if property_ids:
            await session.execute(delete(SeasonalPrice).where(SeasonalPrice.property_id.in_(property_ids)))
            await session.execute(delete(Property).where(Property.id.in_(property_ids)))
        await session.execute(delete(User).where(User.id == existing.id))
        await session.flush()

    user = User(
        email=data["email"],
        hashed_password=hash_password(data["password"]),
        name=data["name"],
        role=role,
    )
    session.add(user)
    await session.flush()
    return user


async def seed(session: AsyncSession, today: date | None = None) -> dict[str, int]:
    """Populate the database with the demo data. Safe to run repeatedly.

    Returns counts of what was created.
    """
    today = today or date.today()

    owner = await _replace_user(session, DEMO_OWNER, "owner")
    await _replace_user(session, DEMO_ADMIN, "admin")

    properties: list[Property] = []
    for data in PROPERTIES:
        prop = Property(owner_id=owner.id, availability=[], **data)
        session.add(prop)
        await session.flush()
        properties.append(prop)
        print(f"   {prop.title} ({prop.locality}, ${prop.base_price_per_night}/noche)")

    seasons = 0
    for prop, season in zip(properties, build_seasons(today)):
        await pricing_service.add_seasonal_price(session, prop, **season)
        seasons += 1
    await session.commit()

    service = AvailabilityService(SqlAlchemyPropertyStore(session), locks=PropertyLockRegistry())
    requester = Requester(user_id=owner.id)
    ranges = 0
    for prop, calendar in zip(properties, build_calendar(today)):
        for range_input in calendar:
            snapshot = await service.add_range(prop.id, requester, range_input)
            ranges += 1
        print(f"   {prop.title}: {len(calendar)} rangos, estado {snapshot.status}")

    return {"users": 2, "properties": len(properties), "ranges": ranges, "seasons": seasons}


async def main() -> None:
    await create_tables()
    async with async_session_factory() as session:
        counts = await seed(session)
    await engine.dispose()

    print()
    print("=" * 60)
    print("Seed summary")
    print("=" * 60)
    print(f"   Users:      {counts['users']} ({DEMO_OWNER['email']} / {DEMO_OWNER['password']})")
    print(f"   Properties: {counts['properties']}")
    print(f"   Ranges:     {counts['ranges']}")
    print(f"   Seasons:    {counts['seasons']}")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
