# site_deploy/models/project.py
"""Project analysis models"""

import io
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import BinaryIO, Callable, Dict, Iterable, List, Optional, Any, Tuple


class ProjectType(Enum):
    """Framework label inferred for an uploaded project"""
    STATIC_SITE = "Static Website"
    NODE_PROJECT = "Node.js Project"
    VITE = "Vite"
    CRA = "Create React App"
    NEXTJS = "Next.js"
    ANGULAR = "Angular"
    VUE = "Vue"
    UNKNOWN = "Unknown"


def is_normalized_path(path: str) -> bool:
    """Check that a manifest path is root-relative, forward-slash and free of '..'"""
    if not path or path.startswith("/") or "\\" in path:
        return False
    return all(part not in ("", ".", "..") for part in path.split("/"))


@dataclass(frozen=True)
class ArchiveEntry:
    """Raw entry enumerated from an uploaded archive"""
    path: str
    raw_size: int
    reader: Callable[[], bytes] = field(repr=False, compare=False)

    def open(self) -> BinaryIO:
        """Open the entry content as a byte stream"""
        return io.BytesIO(self.reader())


@dataclass(frozen=True)
class ManifestFile:
    """File that will be published, addressed by its root-relative path"""
    path: str
    size: int
    loader: Callable[[], bytes] = field(repr=False, compare=False)

    def __post_init__(self):
        if not is_normalized_path(self.path):
            raise ValueError(f"Invalid manifest path: {self.path!r}")

    @classmethod
    def from_bytes(cls, path: str, content: bytes) -> 'ManifestFile':
        """Create a manifest file backed by in-memory content"""
        return cls(path=path, size=len(content), loader=lambda: content)

    def read_bytes(self) -> bytes:
        return self.loader()

    def read_text(self, encoding: str = "utf-8") -> str:
        return self.read_bytes().decode(encoding, errors="replace")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {"path": self.path, "size": self.size}


@dataclass(frozen=True)
class IgnoredFile:
    """File excluded from the manifest, with the reason shown to the user"""
    path: str
    reason: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary"""
        return {"path": self.path, "reason": self.reason}


@dataclass(frozen=True)
class ProjectAnalysis:
    """Result of analyzing an uploaded project.

    Instances are immutable. Fixes produce a new analysis through
    :meth:`evolve` instead of mutating this one.
    """
    manifest: Tuple[ManifestFile, ...]
    ignored: Tuple[IgnoredFile, ...] = ()
    project_type: ProjectType = ProjectType.UNKNOWN
    warnings: Tuple[str, ...] = ()
    root_prefix: str = ""

    def __post_init__(self):
        # Callers may pass lists
        object.__setattr__(self, "manifest", tuple(self.manifest))
        object.__setattr__(self, "ignored", tuple(self.ignored))
        object.__setattr__(self, "warnings", tuple(self.warnings))

        seen = set()
        for manifest_file in self.manifest:
            if manifest_file.path in seen:
                raise ValueError(f"Duplicate manifest path: {manifest_file.path}")
            seen.add(manifest_file.path)

    @property
    def file_count(self) -> int:
        return len(self.manifest)

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.manifest)

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.manifest]

    def get_file(self, path: str) -> Optional[ManifestFile]:
        """Find a manifest file by exact path"""
        for manifest_file in self.manifest:
            if manifest_file.path == path:
                return manifest_file
        return None

    def has_file(self, path: str) -> bool:
        return self.get_file(path) is not None

    def evolve(self, **changes) -> 'ProjectAnalysis':
        """Return a copy with the given fields replaced"""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "project_type": self.project_type.value,
            "file_count": self.file_count,
            "total_size": self.total_size,
            "root_prefix": self.root_prefix,
            "files": [f.to_dict() for f in self.manifest],
            "ignored": [f.to_dict() for f in self.ignored],
            "warnings": list(self.warnings),
        }


def unique_in_order(messages: Iterable[str]) -> List[str]:
    """De-duplicate messages, keeping first occurrence order"""
    return list(dict.fromkeys(messages))
