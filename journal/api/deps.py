"""Shared API dependencies."""

from fastapi import Request

from journal.context import AppContext


def get_context(request: Request) -> AppContext:
    """The application context built in the lifespan handler."""
    return request.app.state.context
