"""Resolve a package's source globs to concrete files on disk."""

import glob
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def _expand(base_dir: Path, pattern: str) -> list[Path]:
    full = Path(pattern) if Path(pattern).is_absolute() else base_dir / pattern
    if glob.has_magic(str(full)):
        return sorted(Path(p) for p in glob.glob(str(full), recursive=True))
    if not full.exists():
        logger.warning("Source path does not exist: %s", full)
        return []
    return [full]


def locate_source_files(
    base_dir: Path,
    source_paths: list[str],
    file_patterns: list[str],
    extensions: list[str],
    exclude_markers: list[str],
) -> list[Path]:
    """Return absolute, deduplicated source files in a stable order.

    Each entry of ``source_paths`` is a file, a directory or a glob relative to
    ``base_dir``. Directories are searched with ``file_patterns``. Files keep
    the order of the entries that produced them; matches within one expansion
    are sorted. Missing paths are logged and skipped.
    """
    found: dict[Path, None] = {}
    for entry in source_paths:
        matches = _expand(base_dir, entry)
        if not matches and glob.has_magic(entry):
            logger.warning("No files match source pattern: %s", entry)
        for match in matches:
            if match.is_dir():
                candidates = sorted(
                    {p for pattern in file_patterns for p in match.glob(pattern)}
                )
            else:
                candidates = [match]
            for candidate in candidates:
                if not candidate.is_file():
                    continue
                if not _is_source_file(candidate, extensions, exclude_markers):
                    continue
                found.setdefault(candidate.resolve(), None)
    return list(found)


def _is_source_file(path: Path, extensions: list[str], exclude_markers: list[str]) -> bool:
    name = path.name
    if not any(name.endswith(ext) for ext in extensions):
        return False
    return not any(marker in path.as_posix() for marker in exclude_markers)
