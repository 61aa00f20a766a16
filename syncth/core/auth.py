"""API key authentication for the Syncthing REST API."""

import os
from urllib.parse import urlencode

from dotenv import find_dotenv, load_dotenv

DEFAULT_URL = "http://localhost:8384"
API_PREFIX = "/rest"


class ApiKeyAuth:
    """Holds the daemon address and the static API key sent with every call."""

    HEADER = "X-API-Key"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> None:
        """Initialize authentication.

        Args:
            api_key: API key from the local GUI config (or SYNCTH_API_KEY env)
            base_url: Daemon URL (or SYNCTH_URL env, default localhost:8384)
        """
        load_dotenv(find_dotenv(usecwd=True))

        self.api_key = os.getenv("SYNCTH_API_KEY") or api_key or ""
        self.base_url = (base_url or os.getenv("SYNCTH_URL", DEFAULT_URL)).rstrip("/")

        if not self.api_key:
            raise ValueError(
                "Missing Syncthing API key. Set <apikey> in the GUI section of "
                "config.xml or the SYNCTH_API_KEY environment variable."
            )

    def get_headers(self, content_type: str = "application/json") -> dict[str, str]:
        """Headers for an authenticated request."""
        return {
            self.HEADER: self.api_key,
            "Content-Type": content_type,
            "Accept": "application/json",
        }

    def get_full_url(self, path: str, query_params: dict[str, str] | None = None) -> str:
        """Build full URL from base URL, ``/rest`` prefix, path and query params.

        Args:
            path: API path below ``/rest`` (e.g., /config/folders)
            query_params: Optional query parameters

        Returns:
            Full URL string
        """
        url = f"{self.base_url}{API_PREFIX}{path}"
        if query_params:
            url += "?" + urlencode(sorted(query_params.items()))
        return url
