"""User profile model: onboarding answers used to build the query vector."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from job_feed.jobs.models import UserProfile

from .base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), default="")
    name: Mapped[str] = mapped_column(String(255), default="")
    school: Mapped[str] = mapped_column(String(255), default="")
    major: Mapped[str] = mapped_column(String(255), default="")
    class_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    graduation_month: Mapped[str] = mapped_column(String(20), default="")
    onboarding_completed: Mapped[bool] = mapped_column(Boolean, default=False)

    def to_user_profile(self) -> UserProfile:
        """Convert DB row to the UserProfile dataclass."""
        return UserProfile(
            id=self.id,
            email=self.email or "",
            name=self.name or "",
            school=self.school or "",
            major=self.major or "",
            class_year=self.class_year,
            graduation_month=self.graduation_month or "",
            onboarding_completed=bool(self.onboarding_completed),
        )
