"""Models for documents served by the Syncthing REST API."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FolderType(str, Enum):
    """Synchronization direction of a folder."""

    RECEIVE_ONLY = "receiveonly"
    SEND_ONLY = "sendonly"
    SEND_RECEIVE = "sendreceive"

    def __str__(self) -> str:
        return self.value


@dataclass
class FileInfo:
    """One entry of a ``/rest/db/browse`` listing."""

    name: str
    mod_time: str
    size: int
    file_type: str  # "file" or "directory"
    children: list["FileInfo"] = field(default_factory=list)

    @property
    def is_directory(self) -> bool:
        return self.file_type == "directory"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileInfo":
        """Create from a browse entry, recursing into ``children``."""
        return cls(
            name=data["name"],
            mod_time=data.get("modTime", ""),
            size=int(data.get("size", 0)),
            file_type=data.get("type", "file"),
            children=[cls.from_dict(child) for child in data.get("children") or []],
        )
