"""MongoDB repositories for reelcut entities."""

from reelcut.mongodb.repositories.export_repository import ExportRepository

__all__ = [
    "ExportRepository",
]
