"""HTTP client for the Syncthing REST API."""

import logging
from typing import Any

import requests

from ..models.config import Configuration
from ..models.remote import FileInfo, FolderType
from .auth import ApiKeyAuth

logger = logging.getLogger(__name__)


class RemoteError(Exception):
    """Base exception for Syncthing API failures."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class RemoteFetchError(RemoteError):
    """A read failed: transport error, non-success status or non-JSON body."""


class RemoteWriteError(RemoteError):
    """A PUT or POST failed: transport error or non-success status."""


class RemoteInconsistency(RemoteError):
    """The daemon returned a different folder than the one requested."""


class UnexpectedShape(RemoteError):
    """A fetched document lacks a field the client depends on."""


class SyncthingClient:
    """Client for the daemon's configuration API, treated as a document store.

    Every call is a single blocking request. Nothing is retried and nothing is
    cached between calls.
    """

    def __init__(self, auth: ApiKeyAuth, timeout: float | None = 30) -> None:
        """Initialize client.

        Args:
            auth: ApiKeyAuth carrying the daemon URL and API key
            timeout: Per-request timeout in seconds
        """
        self.auth = auth
        self.timeout = timeout
        self.session = requests.Session()

    @classmethod
    def from_config(cls, config: Configuration, base_url: str | None = None) -> "SyncthingClient":
        """Create a client authenticated with the config's GUI API key."""
        return cls(ApiKeyAuth(api_key=config.gui.api_key, base_url=base_url))

    def _send(
        self,
        method: str,
        path: str,
        query_params: dict[str, str] | None = None,
        json_data: Any = None,
    ) -> requests.Response:
        url = self.auth.get_full_url(path, query_params)
        error_cls = RemoteFetchError if method == "GET" else RemoteWriteError

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=self.auth.get_headers(),
                json=json_data if method in ("POST", "PUT", "PATCH") else None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise error_cls(f"Request failed: {e}") from e

        logger.debug("%s %s -> %s", method, path, response.status_code)

        if response.status_code >= 400:
            error_msg = f"API error {response.status_code}: {response.text[:500]}"
            raise error_cls(error_msg, response.status_code, response)

        return response

    def get(self, path: str, query_params: dict[str, str] | None = None) -> Any:
        """Make a GET request and decode the JSON body."""
        response = self._send("GET", path, query_params)
        try:
            return response.json()
        except ValueError as e:
            raise RemoteFetchError(
                f"Invalid JSON from {path}: {e}", response.status_code, response
            ) from e

    def put(self, path: str, json_data: Any) -> None:
        """Make a PUT request. The response body is ignored."""
        self._send("PUT", path, json_data=json_data)

    def post(self, path: str, json_data: Any) -> None:
        """Make a POST request. The response body is ignored."""
        self._send("POST", path, json_data=json_data)

    # -------------------------------------------------------------------------
    # System
    # -------------------------------------------------------------------------

    def get_own_id(self) -> str:
        """Get the device ID of the daemon we are talking to."""
        status = self.get("/system/status")
        own_id = status.get("myID") if isinstance(status, dict) else None
        if not isinstance(own_id, str):
            raise UnexpectedShape("System status has no 'myID' field")
        return own_id

    def get_config(self) -> Configuration:
        """Fetch the daemon's full configuration as a ``Configuration``."""
        data = self.get("/config")
        if not isinstance(data, dict):
            raise UnexpectedShape("Config document is not an object")
        return Configuration.from_dict(data)

    # -------------------------------------------------------------------------
    # Folders
    # -------------------------------------------------------------------------

    def get_folder(self, folder_id: str) -> dict[str, Any]:
        """Fetch the raw folder document.

        Raises:
            RemoteFetchError: On transport or HTTP failure
            RemoteInconsistency: If the document's ``id`` is not ``folder_id``
        """
        document = self.get(f"/config/folders/{folder_id}")
        if not isinstance(document, dict):
            raise UnexpectedShape(f"Folder document for {folder_id} is not an object")

        returned_id = document.get("id")
        if returned_id != folder_id:
            raise RemoteInconsistency(
                f"Requested folder {folder_id!r} but daemon returned {returned_id!r}"
            )
        return document

    def put_folder(self, folder_id: str, document: dict[str, Any]) -> None:
        """Replace the whole folder document."""
        self.put(f"/config/folders/{folder_id}", document)

    def add_folder(self, path: str, folder_id: str, folder_type: FolderType, label: str) -> None:
        """Create a new folder entry."""
        self.post(
            "/config/folders",
            {
                "path": path,
                "id": folder_id,
                "type": str(folder_type),
                "label": label,
            },
        )

    def list_folder_ids(self) -> set[str]:
        """IDs of every folder the daemon knows about."""
        folders = self.get("/config/folders")
        if not isinstance(folders, list):
            raise UnexpectedShape("Folder list is not an array")
        return {f["id"] for f in folders if isinstance(f, dict) and "id" in f}

    def browse(self, folder_id: str) -> list[FileInfo]:
        """Recursive listing of a folder's contents."""
        entries = self.get("/db/browse", {"folder": folder_id})
        if not isinstance(entries, list):
            raise UnexpectedShape(f"Browse listing for {folder_id} is not an array")
        return [FileInfo.from_dict(entry) for entry in entries]
