"""
Simple in-memory rate limiter for the authentication endpoints.
"""
import logging
import time
from typing import Dict

from fastapi import Request

from jobboard.core import config
from jobboard.core.errors import RateLimited

logger = logging.getLogger(__name__)

# Store for rate limit tracking: {"scope:ip": [timestamp, ...]}
rate_limit_store: Dict[str, list] = {}


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request."""
    # Check for forwarded IP (from proxy/load balancer)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


def _prune_idle_keys(scope: str, cutoff: float) -> None:
    """Drop keys in scope with no request after cutoff."""
    prefix = f"{scope}:"
    idle = [
        key for key, timestamps in rate_limit_store.items()
        if key.startswith(prefix) and (not timestamps or timestamps[-1] <= cutoff)
    ]
    for key in idle:
        del rate_limit_store[key]


def check_rate_limit(
    request: Request,
    scope: str,
    max_requests: int = None,
    window_seconds: int = None,
) -> None:
    """
    Check if client has exceeded the rate limit for a scope.

    Args:
        request: FastAPI request object
        scope: Name of the limited action ("login", "register")
        max_requests: Maximum number of requests allowed (defaults to LOGIN_RATE_LIMIT)
        window_seconds: Time window in seconds (defaults to LOGIN_RATE_WINDOW_SECONDS)

    Raises:
        RateLimited: 429 if rate limit exceeded
    """
    max_requests = max_requests or config.LOGIN_RATE_LIMIT
    window_seconds = window_seconds or config.LOGIN_RATE_WINDOW_SECONDS
    key = f"{scope}:{get_client_ip(request)}"
    now = time.time()

    cutoff = now - window_seconds
    _prune_idle_keys(scope, cutoff)
    recent = [timestamp for timestamp in rate_limit_store.get(key, ()) if timestamp > cutoff]

    request_count = len(recent)
    if request_count >= max_requests:
        logger.warning(f"Rate limit exceeded for {key} ({request_count} requests in {window_seconds}s)")
        raise RateLimited(
            f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds."
        )

    recent.append(now)
    rate_limit_store[key] = recent
    logger.debug(f"Rate limit check passed for {key} ({request_count + 1}/{max_requests})")


def reset_rate_limits() -> None:
    rate_limit_store.clear()
