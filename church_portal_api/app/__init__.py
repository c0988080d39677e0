"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each domain (events, studies, posts, forum, users, site
settings) exposes a router defined in ``api/v1/endpoints`` and keeps
its business rules in ``services``.  Storage lives behind the
``core.storage.Storage`` interface so that the in-memory implementation
can be replaced by a persistent one without touching the routes.
"""

from .main import app, create_app  # noqa: F401
