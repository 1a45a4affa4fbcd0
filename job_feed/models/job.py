"""Canonical job model: one row per (company, title, location)."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from job_feed.jobs.models import JobRecord

from .base import Base


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        UniqueConstraint("company", "title", "location", name="uq_job_key"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # SHA-256 hex of the key
    company: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    remote_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    salary: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    requirements: Mapped[list | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    company_size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    apply_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    source: Mapped[str] = mapped_column(String(50), default="")
    lifestyle_data: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    network_data: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    growth_data: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    embedding: Mapped[list | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    @classmethod
    def from_record(cls, record: JobRecord, updated_at: datetime) -> "Job":
        data = record.to_dict(include_embedding=True)
        return cls(**data, updated_at=updated_at)

    def to_record(self) -> JobRecord:
        return JobRecord.from_dict({
            "id": self.id,
            "company": self.company,
            "title": self.title,
            "location": self.location,
            "remote_type": self.remote_type,
            "salary": self.salary,
            "description": self.description,
            "requirements": self.requirements,
            "industry": self.industry,
            "company_size": self.company_size,
            "apply_url": self.apply_url,
            "source": self.source,
            "lifestyle_data": self.lifestyle_data,
            "network_data": self.network_data,
            "growth_data": self.growth_data,
            "embedding": self.embedding,
            "active": self.active,
        })
