"""Shared FastAPI dependencies."""

from fastapi import Request

from job_feed.feed import FeedService


def get_service(request: Request) -> FeedService:
    return request.app.state.service
