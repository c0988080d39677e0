"""
Top-level router for version 1 of the API.

This router aggregates the resource routers under their path prefixes.
When a new resource is added, include its router here.
"""

from fastapi import APIRouter

from .endpoints import auth, events, forum, posts, site_settings, studies, users


router = APIRouter()

# Authentication routes sit directly under the API prefix
# (``/register``, ``/login``, ``/logout``, ``/user``).
router.include_router(auth.router, tags=["auth"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(studies.router, prefix="/studies", tags=["studies"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])
router.include_router(forum.router, prefix="/forum", tags=["forum"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(site_settings.router, prefix="/site-settings", tags=["site-settings"])
