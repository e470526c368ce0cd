"""Seed script for the withme development database."""

import asyncio
import uuid
from datetime import date, time, timedelta

from passlib.context import CryptContext
from sqlalchemy import select

from app.constants import GROUP_ROLE_ADMIN, GROUP_ROLE_MEMBER, MEMBER_ACTIVE, ROLE_ADMIN, ROLE_CONTRIBUTOR, ROLE_EDITOR
from app.database import async_session_factory
from app.models.group import Group, GroupMember, GroupPlan, GroupPlanIdea
from app.models.itinerary import ItineraryItem, ItinerarySection
from app.models.poll import TripVoteOption, TripVotePoll
from app.models.profile import Profile
from app.models.trip import City, Trip, TripMember
from app.utils import unique_slug

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# ── Profiles ───────────────────────────────────────────────────────────────────

USERS = [
    {"email": "maya@withme.travel", "password": "password123", "name": "Maya Chen", "username": "maya"},
    {"email": "leo@withme.travel", "password": "password123", "name": "Leo Martins", "username": "leo"},
    {"email": "priya@withme.travel", "password": "password123", "name": "Priya Shah", "username": "priya"},
    {"email": "admin@withme.travel", "password": "password123", "name": "Site Admin", "username": "admin", "is_admin": True},
]

# ── Cities ─────────────────────────────────────────────────────────────────────

CITIES = [
    ("Lisbon", "Portugal"),
    ("Kyoto", "Japan"),
    ("Mexico City", "Mexico"),
    ("Barcelona", "Spain"),
    ("Cape Town", "South Africa"),
]

# ── Demo trip itinerary: (day, title, category, start hour) ───────────────────

LISBON_ITEMS = [
    (1, "Check in at Alfama guesthouse", "Accommodations", 15),
    (1, "Sunset at Miradouro da Senhora do Monte", "Iconic Landmarks", 19),
    (2, "Tram 28 across the old town", "Transportation", 9),
    (2, "Pasteis de nata in Belem", "Food & Drink", 11),
    (3, "Day trip to Sintra", "Day Excursions", 8),
    (4, "Fado night in Mouraria", "Nightlife", 21),
]

GROUP_IDEAS = [
    ("destination", "Lisbon", None),
    ("destination", "Porto", None),
    ("date", "Long weekend in May", {"start_offset": 60, "days": 4}),
    ("activity", "Surf lesson in Ericeira", {"address": "Ericeira, Portugal"}),
    ("place", "LX Factory", {"address": "R. Rodrigues de Faria 103, Lisboa"}),
    ("question", "Rent a car or rely on trains?", None),
]


async def seed():
    async with async_session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(Profile).where(Profile.is_guest == False).limit(1))
        if result.scalar_one_or_none():
            print("Database already seeded. Skipping.")
            return

        # ── Profiles ──
        profiles = []
        for u in USERS:
            profile = Profile(
                id=uuid.uuid4(),
                email=u["email"],
                password_hash=pwd_context.hash(u["password"]),
                name=u["name"],
                username=u["username"],
                is_admin=u.get("is_admin", False),
            )
            db.add(profile)
            profiles.append(profile)
        maya, leo, priya, _ = profiles
        print(f"Created {len(profiles)} profiles (password: password123)")

        # ── Cities ──
        cities = {}
        for name, country in CITIES:
            city = City(id=uuid.uuid4(), name=name, country=country)
            db.add(city)
            cities[name] = city
        print(f"Created {len(CITIES)} cities")

        # ── Trip ──
        start = date.today() + timedelta(days=30)
        trip = Trip(
            id=uuid.uuid4(),
            name="Lisbon long weekend",
            description="Tiles, trams and too many pastries with the crew.",
            created_by=maya.id,
            city_id=cities["Lisbon"].id,
            destination_name="Lisbon",
            start_date=start,
            end_date=start + timedelta(days=3),
            duration_days=4,
            budget=2400,
            currency="EUR",
            privacy_setting="public",
            public_slug=unique_slug("Lisbon long weekend"),
        )
        db.add(trip)
        await db.flush()

        db.add_all([
            TripMember(trip_id=trip.id, user_id=maya.id, role=ROLE_ADMIN),
            TripMember(trip_id=trip.id, user_id=leo.id, role=ROLE_EDITOR, invited_by=maya.id),
            TripMember(trip_id=trip.id, user_id=priya.id, role=ROLE_CONTRIBUTOR, invited_by=maya.id),
        ])

        sections = {}
        for day in range(1, 5):
            section = ItinerarySection(
                id=uuid.uuid4(),
                trip_id=trip.id,
                day_number=day,
                date=start + timedelta(days=day - 1),
                title=f"Day {day}",
                position=day,
            )
            db.add(section)
            sections[day] = section
        await db.flush()

        positions: dict[int, int] = {}
        for day, title, category, hour in LISBON_ITEMS:
            position = positions.get(day, 0)
            positions[day] = position + 1
            db.add(ItineraryItem(
                trip_id=trip.id,
                section_id=sections[day].id,
                day_number=day,
                position=position,
                title=title,
                category=category,
                status="confirmed",
                start_time=time(hour),
                created_by=maya.id,
            ))
        print(f"Created trip '{trip.name}' with {len(LISBON_ITEMS)} itinerary items")

        # ── Poll ──
        poll = TripVotePoll(
            trip_id=trip.id,
            title="Where should we have the farewell dinner?",
            created_by=leo.id,
            is_active=True,
        )
        poll.options = [
            TripVoteOption(title=title, position=i)
            for i, title in enumerate(["Cervejaria Ramiro", "Taberna da Rua das Flores", "Time Out Market"])
        ]
        db.add(poll)

        # ── Group ──
        group = Group(
            id=uuid.uuid4(),
            name="Uni friends",
            description="Annual reunion trip",
            emoji="🌍",
            slug=unique_slug("Uni friends"),
            created_by=leo.id,
        )
        db.add(group)
        db.add_all([
            GroupMember(group_id=group.id, user_id=leo.id, role=GROUP_ROLE_ADMIN, status=MEMBER_ACTIVE),
            GroupMember(group_id=group.id, user_id=maya.id, role=GROUP_ROLE_MEMBER, status=MEMBER_ACTIVE),
            GroupMember(group_id=group.id, user_id=priya.id, role=GROUP_ROLE_MEMBER, status=MEMBER_ACTIVE),
        ])
        plan = GroupPlan(
            id=uuid.uuid4(),
            group_id=group.id,
            name="Spring reunion",
            slug="spring-reunion",
            created_by=leo.id,
        )
        db.add(plan)
        await db.flush()

        for i, (idea_type, title, meta) in enumerate(GROUP_IDEAS):
            idea = GroupPlanIdea(
                group_id=group.id,
                plan_id=plan.id,
                title=title,
                type=idea_type,
                created_by=profiles[i % 3].id,
                position={"x": (i % 3) * 4, "y": (i // 3) * 3, "w": 3, "h": 2},
            )
            if meta and "start_offset" in meta:
                idea.start_date = date.today() + timedelta(days=meta["start_offset"])
                idea.end_date = idea.start_date + timedelta(days=meta["days"] - 1)
            elif meta:
                idea.meta = meta
            db.add(idea)
        print(f"Created group '{group.name}' with plan '{plan.name}' and {len(GROUP_IDEAS)} ideas")

        await db.commit()
        print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
