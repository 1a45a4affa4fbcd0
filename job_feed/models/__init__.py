"""ORM models for the job feed store."""

from .base import Base, create_session_factory
from .job import Job
from .profile import Profile
from .swipe import Swipe

__all__ = [
    "Base",
    "create_session_factory",
    "Job",
    "Profile",
    "Swipe",
]
