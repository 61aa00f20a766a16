"""Data models for the Syncthing client."""

from .config import (
    ConfigError,
    ConfigMalformed,
    ConfigNotFound,
    Configuration,
    Device,
    Folder,
    FolderDevice,
    Gui,
    LabelNotFound,
    default_config_path,
)
from .remote import FileInfo, FolderType

__all__ = [
    "ConfigError",
    "ConfigMalformed",
    "ConfigNotFound",
    "Configuration",
    "Device",
    "FileInfo",
    "Folder",
    "FolderDevice",
    "FolderType",
    "Gui",
    "LabelNotFound",
    "default_config_path",
]
