"""
Top-level package for the Church Portal API.

This file makes ``church_portal_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``church_portal_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
