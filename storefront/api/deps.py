"""Request dependencies: the wired backend and the public-key bearer check."""

from typing import Optional

from fastapi import Header, Request

from storefront.container import Backend
from storefront.errors import AuthenticationError, ValidationError


def get_backend(request: Request) -> Backend:
    return request.app.state.backend


def require_public_key(request: Request, authorization: Optional[str] = Header(default=None)) -> None:
    """Every storefront call carries ``Authorization: Bearer <public key>``."""
    expected = get_backend(request).config.api.public_key
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or token != expected:
        raise AuthenticationError("Missing or invalid authorization header")


def expected_version(if_match: Optional[str] = Header(default=None)) -> Optional[int]:
    """Parse an optional ``If-Match`` cart version."""
    if if_match is None or not if_match.strip():
        return None
    try:
        return int(if_match.strip().strip('"'))
    except ValueError:
        raise ValidationError(f"If-Match must be an integer cart version, got {if_match!r}") from None
