"""Shared request dependencies."""

import httpx
from fastapi import Request

from app.domain.relay import ChatRelay


def get_relay(request: Request) -> ChatRelay:
    """Relay built at start-up in the application lifespan."""
    return request.app.state.relay


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client
