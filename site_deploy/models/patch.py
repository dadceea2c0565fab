"""Patch models"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Patch:
    """File to create, or to overwrite a manifest entry with, at upload time"""
    path: str
    content: str
    description: str

    def with_content(self, content: str) -> 'Patch':
        """Return a copy carrying new content"""
        return Patch(path=self.path, content=content, description=self.description)

    def to_bytes(self) -> bytes:
        return self.content.encode("utf-8")

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary"""
        return {
            "path": self.path,
            "content": self.content,
            "description": self.description,
        }
