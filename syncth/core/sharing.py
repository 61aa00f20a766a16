"""Share and unshare folders with devices on the daemon.

Both operations read the folder document, edit its ``devices`` array and PUT
the whole document back. There is no version check between the read and the
write: if another client changes the same folder in between, its change is
overwritten (last writer wins).
"""

import logging
from dataclasses import dataclass
from typing import Any

from ..models.config import Configuration, Device, Folder
from .client import SyncthingClient, UnexpectedShape

logger = logging.getLogger(__name__)


@dataclass
class ShareResult:
    """Result of a share or unshare operation."""

    folder_id: str
    device_id: str
    operation: str  # "share" or "unshare"
    entries_before: int
    entries_after: int

    @property
    def changed(self) -> bool:
        return self.entries_before != self.entries_after


def _device_entries(document: dict[str, Any], folder_id: str) -> list[Any]:
    devices = document.get("devices")
    if not isinstance(devices, list):
        raise UnexpectedShape(f"Could not set devices in folder config for {folder_id}")
    return devices


def _entry_matches(entry: Any, device_id: str) -> bool:
    return isinstance(entry, dict) and entry.get("deviceID") == device_id


class FolderSharing:
    """Edits a folder's device list on the daemon."""

    def __init__(self, client: SyncthingClient, strict: bool = False) -> None:
        """Initialize.

        Args:
            client: Client for the daemon
            strict: If True, ``share`` does nothing when the device is already
                present. The default appends unconditionally, so sharing twice
                leaves two entries.
        """
        self.client = client
        self.strict = strict

    def share(self, folder_id: str, device_id: str) -> ShareResult:
        """Add ``device_id`` to the folder's device list."""
        document = self.client.get_folder(folder_id)
        devices = _device_entries(document, folder_id)
        before = len(devices)

        if self.strict and any(_entry_matches(entry, device_id) for entry in devices):
            logger.debug("Folder %s already shared with %s; not writing", folder_id, device_id)
            return ShareResult(folder_id, device_id, "share", before, before)

        devices.append({
            "deviceID": device_id,
            "encryptionPassword": "",
            "introducedBy": "",
        })
        logger.debug("Folder %s devices: %d -> %d", folder_id, before, len(devices))

        self.client.put_folder(folder_id, document)
        return ShareResult(folder_id, device_id, "share", before, len(devices))

    def unshare(self, folder_id: str, device_id: str) -> ShareResult:
        """Remove every entry for ``device_id`` from the folder's device list."""
        document = self.client.get_folder(folder_id)
        devices = _device_entries(document, folder_id)
        before = len(devices)

        devices[:] = [entry for entry in devices if not _entry_matches(entry, device_id)]
        logger.debug("Folder %s devices: %d -> %d", folder_id, before, len(devices))

        self.client.put_folder(folder_id, document)
        return ShareResult(folder_id, device_id, "unshare", before, len(devices))


def shared_devices(config: Configuration, folder: Folder, own_id: str) -> list[Device]:
    """Configured devices the folder is shared with, excluding the daemon itself.

    Order follows ``config.devices``. References to unknown devices are skipped.
    """
    return [
        device
        for device in config.devices
        if device.id != own_id and folder.shares_with(device.id)
    ]
