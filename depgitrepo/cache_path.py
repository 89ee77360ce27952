"""
Parsing of local dependency-cache paths.

Two on-disk layouts are understood:

Gradle module cache::

    ~/.gradle/caches/modules-2/files-2.1/com.fasterxml/classmate/1.7.0/<hash>/classmate-1.7.0.jar!/com/fasterxml/classmate/AnnotationInclusion.class

Maven local repository::

    ~/.m2/repository/com/fasterxml/classmate/1.7.0/classmate-1.7.0.jar!/com/fasterxml/classmate/AnnotationInclusion.class

The part after ``!`` is the entry inside the archive.  It is optional; a
bare archive path yields coordinates with an empty entry.

Examples
========

>>> parse_cache_path("/h/.m2/repository/org/slf4j/slf4j-api/1.7.36/slf4j-api-1.7.36.jar!/org/slf4j/Logger.class").gav()
'org.slf4j:slf4j-api:1.7.36'
>>> to_source_path("com/acme/Outer$Inner.class")
'com/acme/Outer.java'
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .config import GRADLE_CACHE_MARKER, MAVEN_REPO_MARKER

logger = logging.getLogger('main')

CLASS_SUFFIX = ".class"
SOURCE_SUFFIX = ".java"

_VERSION_RE = re.compile(r"[0-9]")


class UnrecognizedPathFormat(ValueError):
    """Raised when a path matches neither the Gradle nor the Maven cache layout."""


@dataclass(frozen=True)
class ParsedPath:
    """Coordinates of a cached artifact plus the entry inside its archive."""

    group_id: str
    artifact_id: str
    version: str
    entry_path: str = ""

    def __post_init__(self):
        for name in ("group_id", "artifact_id", "version"):
            if not getattr(self, name).strip():
                raise UnrecognizedPathFormat(f"Blank {name} in parsed path")
        if self.entry_path.startswith("/"):
            object.__setattr__(self, "entry_path", self.entry_path.lstrip("/"))

    def gav(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @property
    def has_entry(self) -> bool:
        return bool(self.entry_path)

    @property
    def is_compiled_entry(self) -> bool:
        return is_compiled_entry(self.entry_path)


def looks_like_version(segment: str) -> bool:
    """Versions are recognised only by starting with a digit (``1.7.0-RC1`` passes)."""
    return bool(_VERSION_RE.match(segment))


def _split(path: str):
    """Splits a raw path into archive segments and the in-archive entry."""
    archive, bang, entry = path.partition("!")
    parts = archive.replace("\\", "/").split("/")
    return parts, entry.lstrip("/") if bang else ""


def _marker_index(parts: List[str], marker: str) -> int:
    try:
        return parts.index(marker)
    except ValueError:
        return -1


def parse_gradle_cache_path(path: str) -> Optional[ParsedPath]:
    """
    Parses the Gradle layout ``.../files-2.1/{group}/{artifact}/{version}/{hash}/{jar}``.

    Segments after the marker are scanned forward; the first segment followed
    by a version-looking segment is taken as the artifact and everything
    before it as the group.
    """
    parts, entry = _split(path)
    idx = _marker_index(parts, GRADLE_CACHE_MARKER)
    if idx < 0 or idx + 3 >= len(parts):
        return None

    group_segments = []
    i = idx + 1
    while i + 2 < len(parts):
        if looks_like_version(parts[i + 1]):
            group_id = ".".join(group_segments)
            if not group_id:
                return None
            return ParsedPath(group_id, parts[i], parts[i + 1], entry)
        group_segments.append(parts[i])
        i += 1
    return None


def parse_maven_repository_path(path: str) -> Optional[ParsedPath]:
    """
    Parses the Maven layout ``.../repository/{group path}/{artifact}/{version}/{artifact}-{version}[-classifier].jar``.
    """
    parts, entry = _split(path)
    idx = _marker_index(parts, MAVEN_REPO_MARKER)
    if idx < 0 or idx + 4 >= len(parts):
        return None

    for i in range(idx + 1, len(parts) - 2):
        artifact, version, jar_file = parts[i], parts[i + 1], parts[i + 2]
        if (looks_like_version(version)
                and jar_file.endswith(".jar")
                and jar_file.startswith(f"{artifact}-{version}")):
            group_id = ".".join(parts[idx + 1:i])
            if not group_id:
                return None
            return ParsedPath(group_id, artifact, version, entry)
    return None


def parse_cache_path(path: str) -> ParsedPath:
    """
    Parses a dependency-cache path into coordinates and entry.

    The Gradle module-cache layout is tried first, then the Maven local
    repository layout.

    Args:
        path (str): Raw path, optionally suffixed with ``!/entry``

    Returns:
        ParsedPath: Group, artifact, version and entry (without leading separator)

    Raises:
        UnrecognizedPathFormat: If neither layout matches
    """
    if not path or not path.strip():
        raise UnrecognizedPathFormat("Empty cache path")
    path = path.strip()

    parsed = parse_gradle_cache_path(path) or parse_maven_repository_path(path)
    if parsed is None:
        logger.error(f"Unrecognized Gradle/Maven cache path format: {path}")
        raise UnrecognizedPathFormat(f"Unrecognized Gradle/Maven cache path format: {path}")

    logger.info(f"Parsed {parsed.gav()} entry={parsed.entry_path or '<none>'}")
    return parsed


def is_compiled_entry(entry: str) -> bool:
    return entry.endswith(CLASS_SUFFIX)


def to_source_path(class_entry: str) -> str:
    """
    Maps a compiled-class entry to its source file.

    Nested types (``Outer$Inner.class``) are truncated to the enclosing
    top-level type before the suffix is swapped.

    Raises:
        ValueError: If the entry is not a ``.class`` entry
    """
    entry = class_entry.lstrip("/")
    if not entry.endswith(CLASS_SUFFIX):
        raise ValueError(f"Entry does not end with {CLASS_SUFFIX}: {class_entry}")

    directory, slash, filename = entry.rpartition("/")
    if "$" in filename:
        filename = filename[:filename.index("$")] + CLASS_SUFFIX
    return f"{directory}{slash}{filename[:-len(CLASS_SUFFIX)]}{SOURCE_SUFFIX}"


def source_target_for(entry: str) -> str:
    """Returns the in-repository target for an entry; resources pass through unchanged."""
    entry = entry.lstrip("/")
    if is_compiled_entry(entry):
        return to_source_path(entry)
    return entry


def module_guess(target: str) -> Optional[str]:
    """
    Guesses a module directory from the target path.

    The guess is the name of the directory holding the file, and only when
    that directory is itself nested (``a/b/File.java`` -> ``b``).
    """
    directory = target.rpartition("/")[0]
    if "/" not in directory:
        return None
    return directory.rpartition("/")[2] or None


def join_path(*parts: str) -> str:
    """Joins repository path fragments, skipping empty ones."""
    return "/".join(p.strip("/") for p in parts if p and p.strip("/"))


def expand_roots(templates: List[str], artifact_id: str, module: Optional[str]) -> List[str]:
    """
    Fills ``{artifact}``/``{module}`` root templates, dropping module roots
    when there is no module guess and removing duplicates.
    """
    roots: List[str] = []
    for template in templates:
        if "{module}" in template and not module:
            continue
        root = template.format(artifact=artifact_id, module=module or "")
        if root not in roots:
            roots.append(root)
    return roots
