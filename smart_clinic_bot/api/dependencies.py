"""FastAPI dependencies."""

from fastapi import Request

from ..container import ServiceContext


def get_context(request: Request) -> ServiceContext:
    return request.app.state.context
