"""Local Syncthing configuration model and label resolution."""

import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

# Relative to $HOME
SYNCTHING_CONFIG_PATH = ".config/syncthing/config.xml"


class ConfigError(Exception):
    """Base class for local configuration problems."""


class ConfigNotFound(ConfigError):
    """Raised when the local config file cannot be located."""


class ConfigMalformed(ConfigError):
    """Raised when the config document does not have the expected shape."""


class LabelNotFound(Exception):
    """Raised when a folder label or device name does not resolve."""

    def __init__(self, kind: str, label: str) -> None:
        super().__init__(f"Could not find {kind} with label: {label}")
        self.kind = kind
        self.label = label


def default_config_path() -> Path:
    """Locate the local config file.

    ``SYNCTH_CONFIG`` (from the environment or a .env file) wins over the
    home-relative default.

    Raises:
        ConfigNotFound: If neither ``SYNCTH_CONFIG`` nor ``HOME`` is set
    """
    load_dotenv(find_dotenv(usecwd=True))

    override = os.getenv("SYNCTH_CONFIG")
    if override:
        return Path(override).expanduser()

    home = os.getenv("HOME")
    if not home:
        raise ConfigNotFound("HOME is not set; cannot locate Syncthing config")
    return Path(home) / SYNCTHING_CONFIG_PATH


def _value(element: ET.Element, name: str) -> str | None:
    """Read a field encoded either as an attribute or as a child element."""
    if name in element.attrib:
        return element.attrib[name]
    child = element.find(name)
    if child is not None:
        return (child.text or "").strip()
    return None


def _required(element: ET.Element, name: str) -> str:
    value = _value(element, name)
    if value is None:
        raise ConfigMalformed(f"<{element.tag}> is missing required field '{name}'")
    return value


def _children(element: ET.Element, *tags: str) -> list[ET.Element]:
    """Direct children matching any of the singular/plural tag spellings."""
    return [child for child in element if child.tag in tags]


@dataclass(frozen=True)
class FolderDevice:
    """Reference from a folder to a device that shares it."""

    id: str

    @classmethod
    def from_element(cls, element: ET.Element) -> "FolderDevice":
        device_id = _value(element, "id")
        if device_id is None:
            device_id = _required(element, "deviceID")
        return cls(id=device_id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FolderDevice":
        """Create from a REST folder-device entry."""
        return cls(id=data.get("deviceID") or data["id"])


@dataclass(frozen=True)
class Folder:
    """A synchronized folder as configured locally."""

    id: str
    label: str
    path: str
    devices: tuple[FolderDevice, ...] = ()

    def shares_with(self, device_id: str) -> bool:
        return any(ref.id == device_id for ref in self.devices)

    @classmethod
    def from_element(cls, element: ET.Element) -> "Folder":
        return cls(
            id=_required(element, "id"),
            label=_required(element, "label"),
            path=_required(element, "path"),
            devices=tuple(
                FolderDevice.from_element(child)
                for child in _children(element, "device", "devices")
            ),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Folder":
        """Create from a REST folder document."""
        return cls(
            id=data["id"],
            label=data["label"],
            path=data["path"],
            devices=tuple(FolderDevice.from_dict(d) for d in data.get("devices") or []),
        )


@dataclass(frozen=True)
class Device:
    """A peer device; ``name`` is optional."""

    id: str
    name: str | None = None

    @classmethod
    def from_element(cls, element: ET.Element) -> "Device":
        return cls(id=_required(element, "id"), name=_value(element, "name"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Device":
        """Create from a REST device document."""
        return cls(id=data.get("deviceID") or data["id"], name=data.get("name"))


@dataclass(frozen=True)
class Gui:
    """GUI/API settings. Only the API key is used."""

    api_key: str = ""

    @classmethod
    def from_element(cls, element: ET.Element) -> "Gui":
        return cls(api_key=_value(element, "apikey") or "")


@dataclass(frozen=True)
class Configuration:
    """Canonical local configuration.

    Loaded once per invocation and read-only afterwards. Folder device
    references are not validated against ``devices``; dangling references are
    dropped when computing who a folder is shared with.
    """

    folders: tuple[Folder, ...] = ()
    devices: tuple[Device, ...] = ()
    gui: Gui = field(default_factory=Gui)

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Configuration":
        """Load configuration from the Syncthing config.xml.

        Args:
            config_path: Explicit path (default: see ``default_config_path``)

        Raises:
            ConfigNotFound: If the file cannot be located or does not exist
            ConfigMalformed: If the document cannot be parsed
        """
        path = Path(config_path) if config_path else default_config_path()
        logger.debug("Loading config from %s", path)

        try:
            content = path.read_bytes()
        except FileNotFoundError as e:
            raise ConfigNotFound(f"Config not found: {path}") from e
        except OSError as e:
            raise ConfigNotFound(f"Cannot read config {path}: {e}") from e

        return cls.from_xml(content)

    @classmethod
    def from_xml(cls, content: str | bytes) -> "Configuration":
        """Parse a config.xml document.

        Folder and device lists may use singular or plural element names, and
        ``id``/``label``/``path``/``name`` may be attributes or child elements.
        Bytes are decoded according to the XML declaration. Parsing is
        all-or-nothing.
        """
        try:
            root = ET.fromstring(content)
        except (ET.ParseError, ValueError, LookupError) as e:
            raise ConfigMalformed(f"Invalid config document: {e}") from e

        gui_elements = _children(root, "gui")
        gui = Gui.from_element(gui_elements[0]) if gui_elements else Gui()

        return cls(
            folders=tuple(Folder.from_element(e) for e in _children(root, "folder", "folders")),
            devices=tuple(Device.from_element(e) for e in _children(root, "device", "devices")),
            gui=gui,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Configuration":
        """Create from the JSON document served by ``GET /rest/config``."""
        try:
            return cls(
                folders=tuple(Folder.from_dict(f) for f in data.get("folders") or []),
                devices=tuple(Device.from_dict(d) for d in data.get("devices") or []),
                gui=Gui(api_key=(data.get("gui") or {}).get("apiKey", "")),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigMalformed(f"Unexpected config shape: {e!r}") from e

    # -------------------------------------------------------------------------
    # Label resolution
    # -------------------------------------------------------------------------

    def folder_id(self, label: str) -> str | None:
        """Return the id of the first folder with exactly this label."""
        for folder in self.folders:
            if folder.label == label:
                return folder.id
        return None

    def device_id(self, name: str) -> str | None:
        """Return the id of the first device with exactly this name.

        Unnamed devices never match.
        """
        for device in self.devices:
            if device.name is not None and device.name == name:
                return device.id
        return None

    def require_folder_id(self, label: str) -> str:
        folder_id = self.folder_id(label)
        if folder_id is None:
            raise LabelNotFound("folder", label)
        return folder_id

    def require_device_id(self, name: str) -> str:
        device_id = self.device_id(name)
        if device_id is None:
            raise LabelNotFound("device", name)
        return device_id
