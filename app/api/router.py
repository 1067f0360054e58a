"""
Icebreaker — Main API Router

Aggregates all sub-routers under a single prefix so that ``app.main``
can mount the entire API surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from app.api import events, matching

router = APIRouter()

# Order matters: ``/events/validate`` must be registered before ``/events/{event_id}``.
router.include_router(events.router, prefix="/events", tags=["Events"])
router.include_router(matching.router, prefix="/events", tags=["Matching"])
