"""Hash calculation utilities"""

import hashlib
from dataclasses import dataclass, field
from typing import Dict, Iterable, Tuple


def calculate_content_hash(content: bytes, algorithm: str = "sha256") -> str:
    """
    Calculate hash of content bytes

    Args:
        content: Content bytes
        algorithm: Hash algorithm

    Returns:
        Hex digest string
    """
    hash_func = hashlib.new(algorithm)
    hash_func.update(content)
    return hash_func.hexdigest()


@dataclass
class FileHashIndex:
    """Two-way index of a file set by content hash"""
    hashes_by_path: Dict[str, str] = field(default_factory=dict)
    content_by_hash: Dict[str, bytes] = field(default_factory=dict)

    @classmethod
    def build(cls, files: Iterable[Tuple[str, bytes]], algorithm: str = "sha256") -> 'FileHashIndex':
        """
        Hash every file

        Args:
            files: (path, content) pairs
            algorithm: Hash algorithm

        Returns:
            Populated index
        """
        index = cls()
        for path, content in files:
            digest = calculate_content_hash(content, algorithm)
            index.hashes_by_path[path] = digest
            index.content_by_hash[digest] = content
        return index

    @property
    def unique_count(self) -> int:
        return len(self.content_by_hash)

    def content_for(self, digest: str) -> bytes:
        return self.content_by_hash[digest]
