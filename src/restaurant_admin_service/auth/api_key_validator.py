"""API key validation for catalog and order write endpoints."""

import hmac


class APIKeyValidator:
    """Validates the X-API-Key header sent by the admin dashboard.

    Keys are compared in constant time against a configured set.
    """

    def __init__(self, api_keys: list[str]) -> None:
        """Initialize validator with list of valid API keys.

        Args:
            api_keys: List of valid API key strings

        Raises:
            ValueError: If api_keys list is empty
        """
        keys = [key for key in api_keys if key]
        if not keys:
            raise ValueError("At least one API key must be provided")

        self.api_keys = tuple(dict.fromkeys(keys))

    def validate(self, api_key: str) -> bool:
        """Validate an API key.

        Args:
            api_key: The API key to validate

        Returns:
            bool: True if valid, False otherwise
        """
        candidate = api_key.encode()
        return any(hmac.compare_digest(candidate, key.encode()) for key in self.api_keys)
