"""Feed, swipe and sync routes."""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from job_feed.errors import ProfileNotFoundError, StoreError
from job_feed.feed import FeedService

from .dependencies import get_service

logger = logging.getLogger("job_feed.web")

router = APIRouter()


class SwipeRequest(BaseModel):
    job_id: str
    action: Literal["like", "pass", "save", "apply"]
    session_id: Optional[str] = None


class SyncRequest(BaseModel):
    sources: list[str]


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/users/{user_id}/feed")
def get_feed(user_id: str, service: FeedService = Depends(get_service)):
    try:
        feed = service.get_feed(user_id)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"user_id": user_id, "jobs": [job.to_dict() for job in feed]}


@router.get("/users/{user_id}/preferences")
def get_preferences(user_id: str, service: FeedService = Depends(get_service)):
    return service.get_preferences(user_id).to_dict()


@router.post("/users/{user_id}/swipes", status_code=201)
def record_swipe(user_id: str, body: SwipeRequest, service: FeedService = Depends(get_service)):
    try:
        event = service.record_swipe(user_id, body.job_id, body.action, body.session_id)
    except StoreError as e:
        logger.error("[user:%s] Failed to save swipe: %s", user_id, e)
        raise HTTPException(status_code=503, detail="Failed to save swipe")
    return {
        "success": True,
        "swipe": {
            "user_id": event.user_id,
            "job_id": event.job_id,
            "action": event.action,
            "session_id": event.session_id,
            "created_at": event.created_at.isoformat(),
        },
    }


@router.post("/sync")
def sync_listings(body: SyncRequest, service: FeedService = Depends(get_service)):
    result = service.sync_listings(body.sources)
    return result.to_dict()
