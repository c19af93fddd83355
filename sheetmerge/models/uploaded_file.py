from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

"""UploadedFile: one submitted spreadsheet (name + raw bytes)."""

__all__ = [
    "UploadedFile",
]


@dataclass(frozen=True)
class UploadedFile:
    name: str
    content: bytes

    @property
    def is_empty(self) -> bool:
        return not self.content

    @classmethod
    def from_path(cls, path: Path) -> UploadedFile:
        return cls(name=path.name, content=path.read_bytes())
