"""
Seed demo data for local testing
Admin, students, clubs, upcoming events and buses
"""

import sys
import asyncio
from datetime import timedelta
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.database import database, connect_db, disconnect_db
from app.schemas.bus import CreateBusRequest
from app.schemas.club import CreateClubRequest
from app.schemas.event import CreateEventRequest
from app.services.bus_service import bus_service
from app.services.club_service import club_service
from app.services.event_service import event_service
from app.services.user_service import user_service
from app.utils.datetime_utils import now_local, as_datetime

ADMIN = {
    "email": "admin@unievents.local",
    "password": "AdminPass123",
    "first_name": "Site",
    "last_name": "Administrator",
    "university_id": "ADMIN001",
}

STUDENTS = [
    ("sara@unievents.local", "Sara", "Ali", "20230001", "Computer Science"),
    ("omar@unievents.local", "Omar", "Hassan", "20230002", "Engineering"),
    ("lina@unievents.local", "Lina", "Khaled", "20230003", "Business"),
]
STUDENT_PASSWORD = "StudentPass123"

CLUBS = [
    ("Computer Science Club", "Talks, hackathons and study groups"),
    ("Volunteering Society", "Community service around the city"),
    ("Photography Club", "Weekly photo walks and exhibitions"),
]

EVENTS = [
    ("Beach Clean-up", "Volunteer clean-up at the north beach", "North Beach", "Volunteering", 40, 3, 7),
    ("Intro to Machine Learning", "Hands-on workshop with Python", "Lab 2.14", "Workshop", 30, 2, 10),
    ("Career Fair", "Meet employers from across the region", "Main Hall", "Seminar", 300, 0, 21),
]


async def seed():
    await connect_db()

    try:
        admin = await user_service.find_by_email(ADMIN["email"])
        if admin:
            print("Demo data already present, nothing to do.")
            return

        admin = await user_service.create_user(user_type="Admin", email_confirmed=True, **ADMIN)
        print(f"Admin: {admin['email']} / {ADMIN['password']}")

        for email, first_name, last_name, university_id, department in STUDENTS:
            await user_service.create_user(
                email=email,
                password=STUDENT_PASSWORD,
                first_name=first_name,
                last_name=last_name,
                university_id=university_id,
                department=department,
                email_confirmed=True
            )
            print(f"Student: {email} / {STUDENT_PASSWORD}")

        for name, description in CLUBS:
            await club_service.create_club(
                CreateClubRequest(name=name, description=description),
                str(admin["id"])
            )
            print(f"Club: {name}")

        start = now_local().replace(hour=9, minute=0, second=0)
        for title, description, venue, event_type, capacity, hours, days_ahead in EVENTS:
            event = await event_service.create_event(
                CreateEventRequest(
                    title=title,
                    description=description,
                    event_date=start + timedelta(days=days_ahead),
                    venue=venue,
                    event_type=event_type,
                    max_capacity=capacity,
                    volunteer_hours=hours
                ),
                str(admin["id"])
            )
            print(f"Event: {title}")

            if event_type == "Volunteering":
                await bus_service.create_bus(
                    CreateBusRequest(
                        event_id=event["id"],
                        bus_number="BUS-01",
                        capacity=45,
                        departure_time=as_datetime(event["event_date"]) - timedelta(hours=1),
                        departure_location="Main Gate",
                        destination=venue
                    )
                )
                print("   Bus: BUS-01")

        users = await database.fetch_val("SELECT COUNT(*) FROM users")
        print(f"\nSeed complete ({users} users)")

    finally:
        await disconnect_db()


if __name__ == "__main__":
    asyncio.run(seed())
