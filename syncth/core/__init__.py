"""Core client functionality."""

from .auth import ApiKeyAuth
from .client import (
    RemoteError,
    RemoteFetchError,
    RemoteInconsistency,
    RemoteWriteError,
    SyncthingClient,
    UnexpectedShape,
)
from .ids import generate_folder_id
from .sharing import FolderSharing, ShareResult, shared_devices

__all__ = [
    "ApiKeyAuth",
    "FolderSharing",
    "RemoteError",
    "RemoteFetchError",
    "RemoteInconsistency",
    "RemoteWriteError",
    "ShareResult",
    "SyncthingClient",
    "UnexpectedShape",
    "generate_folder_id",
    "shared_devices",
]
