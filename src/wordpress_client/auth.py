"""Authentication module for loading WordPress credentials.

This module handles loading WordPress credentials from environment variables
using python-dotenv. Requests authenticate with HTTP basic auth using a
WordPress application password.
"""

import os
from typing import NamedTuple

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """WordPress REST API credentials."""
    url: str
    user: str
    application_password: str


class Authenticator:
    """Loads and validates WordPress credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    cached or logged.

    Required environment variables:
        WORDPRESS_BASE_URL: Site URL (e.g., https://example.com)
        WORDPRESS_USERNAME: WordPress user name
        WORDPRESS_APPLICATION_PASSWORD: Application password for that user

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(self):
        """Initialize the authenticator by loading environment variables from .env file."""
        load_dotenv()

    def get_credentials(self) -> Credentials:
        """Get WordPress credentials from environment variables.

        Returns:
            Credentials: A named tuple containing url, user and application_password.
                The url never ends with a slash.

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        url = os.getenv('WORDPRESS_BASE_URL')
        user = os.getenv('WORDPRESS_USERNAME')
        application_password = os.getenv('WORDPRESS_APPLICATION_PASSWORD')

        missing = []
        if not url:
            missing.append('WORDPRESS_BASE_URL')
        if not user:
            missing.append('WORDPRESS_USERNAME')
        if not application_password:
            missing.append('WORDPRESS_APPLICATION_PASSWORD')

        if missing:
            raise InvalidCredentialsError(
                user=user if user else "unknown",
                endpoint=url if url else "unknown"
            )

        return Credentials(
            url=url.rstrip('/'),  # type: ignore[union-attr]
            user=user,  # type: ignore[arg-type]
            application_password=application_password,  # type: ignore[arg-type]
        )
