"""FastAPI dependencies guarding write endpoints with an API key."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Header, HTTPException, Request

from restaurant_admin_service.auth.api_key_validator import APIKeyValidator


def get_api_key_from_header(
    x_api_key: Annotated[str | None, Header()] = None,
    validator: APIKeyValidator | None = None,
) -> str:
    """Extract and validate the API key from the X-API-Key header.

    Args:
        x_api_key: API key from X-API-Key header (injected by FastAPI)
        validator: APIKeyValidator to check the key against; None skips the check

    Returns:
        str: The validated API key

    Raises:
        HTTPException: 401 if API key is missing or invalid
    """
    if not x_api_key:
        raise HTTPException(status_code=401, detail="Missing API key")

    if validator is not None and not validator.validate(x_api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")

    return x_api_key


def require_api_key() -> Callable[..., str]:
    """Build a dependency validating against the app's configured validator.

    The validator is read from ``request.app.state.api_key_validator``.
    """

    def dependency(
        request: Request,
        x_api_key: Annotated[str | None, Header()] = None,
    ) -> str:
        return get_api_key_from_header(
            x_api_key=x_api_key, validator=request.app.state.api_key_validator
        )

    return dependency
