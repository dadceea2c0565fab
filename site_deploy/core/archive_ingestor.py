# site_deploy/core/archive_ingestor.py
"""Archive ingestion: extraction, root stripping and junk filtering"""

import asyncio
import functools
import io
import logging
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Union

import aiofiles

from ..api.exceptions import CorruptArchiveError, ValidationError
from ..constants import (
    IGNORE_RULES,
    INDEX_HTML_CAPTURE_LIMIT,
    RESERVED_ARCHIVE_MARKERS,
    SCANNABLE_EXTENSIONS,
    TEXT_SCAN_LIMIT,
)
from ..models.project import ArchiveEntry, IgnoredFile, ManifestFile

logger = logging.getLogger(__name__)

UNSAFE_PATH_REASON = "Unsafe path (outside archive root)"
DUPLICATE_ENTRY_REASON = "Duplicate archive entry"

_READ_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, OSError, RuntimeError, NotImplementedError)


@dataclass
class IngestResult:
    """Normalized archive contents, not yet classified.

    ``index_html`` and ``text_assets`` hold text captured while ingesting
    so the issue detector does not read the same entries twice.
    """
    manifest: List[ManifestFile] = field(default_factory=list)
    ignored: List[IgnoredFile] = field(default_factory=list)
    root_prefix: str = ""
    index_html: Optional[str] = None
    text_assets: Dict[str, str] = field(default_factory=dict)

    @property
    def file_count(self) -> int:
        return len(self.manifest)

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.manifest)


def _read_member(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
    try:
        return archive.read(info)
    except _READ_ERRORS as e:
        raise CorruptArchiveError(f"Failed to read '{info.filename}' from archive: {e}") from e


def iter_archive_entries(archive: zipfile.ZipFile) -> Iterator[ArchiveEntry]:
    """
    Enumerate file entries of an archive

    Directory markers and archiver metadata (``__MACOSX``) are skipped.

    Args:
        archive: Open zip archive

    Yields:
        ArchiveEntry for each remaining file
    """
    for info in archive.infolist():
        if info.is_dir():
            continue
        if any(marker in info.filename for marker in RESERVED_ARCHIVE_MARKERS):
            continue
        yield ArchiveEntry(
            path=info.filename,
            raw_size=info.file_size,
            reader=functools.partial(_read_member, archive, info),
        )


def normalize_entry_path(path: str) -> Optional[str]:
    """
    Normalize an archive member name to a forward-slash relative path

    Args:
        path: Raw member name

    Returns:
        Normalized path, or None if it is absolute or escapes the archive root
    """
    path = path.replace("\\", "/")
    if path.startswith("/"):
        return None
    parts = [part for part in path.split("/") if part not in ("", ".")]
    if not parts or ".." in parts:
        return None
    return "/".join(parts)


def detect_common_root(paths: Iterable[str]) -> str:
    """
    Detect a folder that wraps every path

    Compares only the lexicographically first and last paths, cuts their
    common prefix back to the last '/', and accepts it only if every path
    starts with it. A partial segment is never returned: ``foo/x`` and
    ``foobar/x`` share no root.

    Args:
        paths: Normalized entry paths

    Returns:
        Root prefix ending in '/', or "" when there is none
    """
    paths = list(paths)
    if not paths:
        return ""

    ordered = sorted(paths)
    first, last = ordered[0], ordered[-1]

    i = 0
    while i < len(first) and i < len(last) and first[i] == last[i]:
        i += 1

    cut = first[:i].rfind("/")
    if cut == -1:
        return ""

    candidate = first[:cut + 1]
    if all(p.startswith(candidate) for p in paths):
        return candidate
    return ""


def get_ignore_reason(path: str) -> Optional[str]:
    """Return why a path must not be published, or None to keep it"""
    for kind, pattern, reason in IGNORE_RULES:
        if kind == "contains" and pattern in path:
            return reason
        if kind == "prefix" and path.startswith(pattern):
            return reason
        if kind == "suffix" and path.endswith(pattern):
            return reason
    return None


def _capture_text(result: IngestResult, manifest_file: ManifestFile) -> None:
    path = manifest_file.path
    is_index = path == "index.html" and manifest_file.size < INDEX_HTML_CAPTURE_LIMIT
    is_scannable = path.endswith(SCANNABLE_EXTENSIONS) and manifest_file.size < TEXT_SCAN_LIMIT

    if not (is_index or is_scannable):
        return

    text = manifest_file.read_text()
    if is_index:
        result.index_html = text
    if is_scannable:
        result.text_assets[path] = text


def ingest_entries(entries: Iterable[ArchiveEntry]) -> IngestResult:
    """
    Normalize archive entries into a manifest

    Args:
        entries: Raw archive entries

    Returns:
        IngestResult with kept and ignored files
    """
    result = IngestResult()
    normalized = []

    for entry in entries:
        path = normalize_entry_path(entry.path)
        if path is None:
            result.ignored.append(IgnoredFile(path=entry.path, reason=UNSAFE_PATH_REASON))
            continue
        normalized.append((path, entry))

    root = detect_common_root(path for path, _ in normalized)
    result.root_prefix = root
    if root:
        logger.debug(f"Stripping common root folder '{root}'")

    seen = set()
    for path, entry in normalized:
        final_path = path[len(root):]

        reason = get_ignore_reason(final_path)
        if reason is None and final_path in seen:
            reason = DUPLICATE_ENTRY_REASON

        if reason:
            result.ignored.append(IgnoredFile(path=final_path, reason=reason))
            continue

        seen.add(final_path)
        manifest_file = ManifestFile(path=final_path, size=entry.raw_size, loader=entry.reader)
        result.manifest.append(manifest_file)
        _capture_text(result, manifest_file)

    logger.info(
        f"Ingested {result.file_count} files ({result.total_size} bytes), "
        f"ignored {len(result.ignored)}"
    )
    return result


def ingest_archive(data: bytes) -> IngestResult:
    """
    Ingest an uploaded zip archive

    Args:
        data: Archive bytes

    Returns:
        IngestResult

    Raises:
        CorruptArchiveError: If the archive cannot be read
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, OSError) as e:
        raise CorruptArchiveError(f"Failed to read archive: {e}") from e

    return ingest_entries(iter_archive_entries(archive))


def build_archive(files: Mapping[str, Union[bytes, str]]) -> bytes:
    """
    Build an in-memory zip archive

    Args:
        files: Mapping of archive path to content

    Returns:
        Zip archive bytes
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path, content in files.items():
            if isinstance(content, str):
                content = content.encode("utf-8")
            archive.writestr(path, content)
    return buffer.getvalue()


def pack_directory(directory: Path) -> bytes:
    """
    Zip a project folder in memory, paths relative to the folder

    Args:
        directory: Folder to pack

    Returns:
        Zip archive bytes
    """
    files = {}
    for file_path in sorted(directory.rglob("*")):
        if file_path.is_file():
            files[file_path.relative_to(directory).as_posix()] = file_path.read_bytes()
    return build_archive(files)


async def load_upload(path: Path) -> bytes:
    """
    Load an upload as zip bytes

    A folder is packed into an archive first; any other file must be a zip.

    Args:
        path: Zip file or project folder

    Returns:
        Zip archive bytes

    Raises:
        ValidationError: If the path is neither a folder nor a zip file
    """
    if path.is_dir():
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, pack_directory, path)

    if not path.is_file():
        raise ValidationError(f"Upload not found: {path}")

    if path.suffix.lower() != ".zip":
        raise ValidationError("Please upload a valid .zip file or a folder.")

    async with aiofiles.open(path, "rb") as f:
        return await f.read()
