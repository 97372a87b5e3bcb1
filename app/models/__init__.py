"""
Database Models
Import all models here for Alembic migrations
"""

from app.models.user import User
from app.models.event import Event, Registration, Attendance, Feedback
from app.models.certificate import Certificate
from app.models.club import Club, ClubMember
from app.models.notification import Notification
from app.models.bus import Bus, BusReservation
from app.models.contact import Contact
from app.models.activity_log import ActivityLog

__all__ = [
    "User",
    "Event",
    "Registration",
    "Attendance",
    "Feedback",
    "Certificate",
    "Club",
    "ClubMember",
    "Notification",
    "Bus",
    "BusReservation",
    "Contact",
    "ActivityLog",
]
