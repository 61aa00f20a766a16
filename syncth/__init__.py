"""Command-line client for managing Syncthing folder sharing."""

__version__ = "0.1.0"
