"""Relational store for canonical jobs, swipe events and user profiles."""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from job_feed.errors import StoreError
from job_feed.jobs.models import SWIPE_ACTIONS, JobRecord, SwipeEvent, UserProfile
from job_feed.models import Job, Profile, Swipe

logger = logging.getLogger("job_feed.storage")


class JobStore(ABC):
    """CRUD boundary to the canonical job, swipe and profile tables."""

    @abstractmethod
    def upsert_jobs(self, records: list[JobRecord]) -> int:
        """Insert or replace records by canonical key. Returns the count written."""

    @abstractmethod
    def get_job(self, job_id: str) -> Optional[JobRecord]:
        ...

    @abstractmethod
    def get_jobs(self, job_ids: list[str], active_only: bool = True) -> list[JobRecord]:
        ...

    @abstractmethod
    def recent_active_jobs(self, limit: int) -> list[JobRecord]:
        ...

    @abstractmethod
    def jobs_with_embeddings(self) -> list[JobRecord]:
        ...

    @abstractmethod
    def deactivate_job(self, job_id: str) -> bool:
        ...

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        ...

    @abstractmethod
    def save_profile(self, profile: UserProfile) -> None:
        ...

    @abstractmethod
    def record_swipe(
        self,
        user_id: str,
        job_id: str,
        action: str,
        session_id: Optional[str] = None,
    ) -> SwipeEvent:
        ...

    @abstractmethod
    def swipe_history(self, user_id: str, limit: int = 100) -> list[SwipeEvent]:
        """Most recent `limit` events for the user, oldest first."""

    @abstractmethod
    def get_stats(self) -> dict:
        ...


class SqlJobStore(JobStore):
    """SQLAlchemy-backed store. Each call runs in its own session."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def upsert_jobs(self, records: list[JobRecord]) -> int:
        if not records:
            return 0
        now = datetime.now(timezone.utc)
        try:
            with self.session_factory() as session, session.begin():
                for record in records:
                    # Primary key is derived from the canonical key, so merge replaces in place
                    session.merge(Job.from_record(record, updated_at=now))
        except SQLAlchemyError as e:
            logger.error("Batch upsert of %d jobs failed: %s", len(records), e)
            raise StoreError(f"Batch upsert failed: {e}") from e

        logger.info("Upserted %d jobs", len(records))
        return len(records)

    def get_job(self, job_id: str) -> Optional[JobRecord]:
        with self._read() as session:
            row = session.get(Job, job_id)
            return row.to_record() if row else None

    def get_jobs(self, job_ids: list[str], active_only: bool = True) -> list[JobRecord]:
        if not job_ids:
            return []
        stmt = select(Job).where(Job.id.in_(job_ids))
        if active_only:
            stmt = stmt.where(Job.active.is_(True))
        with self._read() as session:
            return [row.to_record() for row in session.scalars(stmt)]

    def recent_active_jobs(self, limit: int) -> list[JobRecord]:
        stmt = (
            select(Job)
            .where(Job.active.is_(True))
            .order_by(Job.updated_at.desc(), Job.id)
            .limit(limit)
        )
        with self._read() as session:
            return [row.to_record() for row in session.scalars(stmt)]

    def jobs_with_embeddings(self) -> list[JobRecord]:
        stmt = select(Job).where(Job.active.is_(True), Job.embedding.is_not(None))
        with self._read() as session:
            return [row.to_record() for row in session.scalars(stmt) if row.embedding]

    def deactivate_job(self, job_id: str) -> bool:
        try:
            with self.session_factory() as session, session.begin():
                row = session.get(Job, job_id)
                if row is None:
                    return False
                row.active = False
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to deactivate job {job_id}: {e}") from e
        return True

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        with self._read() as session:
            row = session.get(Profile, user_id)
            return row.to_user_profile() if row else None

    def save_profile(self, profile: UserProfile) -> None:
        try:
            with self.session_factory() as session, session.begin():
                session.merge(Profile(
                    id=profile.id,
                    email=profile.email,
                    name=profile.name,
                    school=profile.school,
                    major=profile.major,
                    class_year=profile.class_year,
                    graduation_month=profile.graduation_month,
                    onboarding_completed=profile.onboarding_completed,
                ))
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save profile {profile.id}: {e}") from e

    def record_swipe(
        self,
        user_id: str,
        job_id: str,
        action: str,
        session_id: Optional[str] = None,
    ) -> SwipeEvent:
        if action not in SWIPE_ACTIONS:
            raise ValueError(f"Unsupported swipe action: {action!r}")

        row = Swipe(
            user_id=user_id,
            job_id=job_id,
            action=action,
            session_id=session_id,
            created_at=datetime.now(timezone.utc),
        )
        try:
            with self.session_factory() as session, session.begin():
                session.add(row)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to record swipe for user {user_id}: {e}") from e
        return row.to_event()

    def swipe_history(self, user_id: str, limit: int = 100) -> list[SwipeEvent]:
        stmt = (
            select(Swipe)
            .where(Swipe.user_id == user_id)
            .order_by(Swipe.id.desc())
            .limit(limit)
        )
        with self._read() as session:
            rows = list(session.scalars(stmt))
        return [row.to_event() for row in reversed(rows)]

    def get_stats(self) -> dict:
        """Get store statistics."""
        stats = {}
        with self._read() as session:
            stats["total_jobs"] = session.scalar(select(func.count(Job.id))) or 0
            stats["active_jobs"] = session.scalar(
                select(func.count(Job.id)).where(Job.active.is_(True))
            ) or 0
            stats["jobs_with_embeddings"] = session.scalar(
                select(func.count(Job.id)).where(Job.embedding.is_not(None))
            ) or 0
            stats["total_swipes"] = session.scalar(select(func.count(Swipe.id))) or 0
            stats["total_profiles"] = session.scalar(select(func.count(Profile.id))) or 0

            rows = session.execute(
                select(Job.source, func.count(Job.id)).group_by(Job.source)
            ).all()
            stats["by_source"] = {source: count for source, count in rows}

            rows = session.execute(
                select(Swipe.action, func.count(Swipe.id)).group_by(Swipe.action)
            ).all()
            stats["swipes_by_action"] = {action: count for action, count in rows}
        return stats

    @contextmanager
    def _read(self):
        try:
            with self.session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            raise StoreError(f"Store read failed: {e}") from e
