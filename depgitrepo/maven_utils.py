"""
Utilities for reading SCM metadata out of Maven POM descriptors.

POMs are fetched from Maven Central using the fixed repository layout::

    https://repo1.maven.org/maven2/<group path>/<artifact>/<version>/<artifact>-<version>.pom

Only a handful of fields are read: the ``<scm>`` block (``url``,
``connection`` falling back to ``developerConnection``, ``tag``) and the
``<parent>`` coordinates.  When a POM declares no SCM data the parent POM
is consulted instead, up to :data:`MAX_PARENT_DEPTH` levels.

Examples
========

>>> pom_url("com.fasterxml", "classmate", "1.7.0")
'https://repo1.maven.org/maven2/com/fasterxml/classmate/1.7.0/classmate-1.7.0.pom'
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Optional

from .config import MAVEN_REPO_BASE, MAX_PARENT_DEPTH, POM_TIMEOUT
from .http_client import HttpClient

logger = logging.getLogger('maven_utils')

POM_NAMESPACES = {'maven': 'http://maven.apache.org/POM/4.0.0'}

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")


class ScmNotFound(LookupError):
    """Raised when no SCM metadata could be found along the parent POM chain."""


@dataclass(frozen=True)
class Coordinates:
    """Maven groupId/artifactId/version triplet."""

    group_id: Optional[str]
    artifact_id: Optional[str]
    version: Optional[str]

    def is_complete(self) -> bool:
        return not (_is_blank(self.group_id) or _is_blank(self.artifact_id) or _is_blank(self.version))

    def as_path(self) -> str:
        """Return the Maven repository path of the version directory.

        Example
        -------
        >>> Coordinates('org.slf4j', 'slf4j-api', '1.7.36').as_path()
        'org/slf4j/slf4j-api/1.7.36'
        """
        return f"{self.group_id.replace('.', '/')}/{self.artifact_id}/{self.version}"

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass(frozen=True)
class PomScm:
    url: Optional[str] = None
    connection: Optional[str] = None
    tag: Optional[str] = None

    def has_data(self) -> bool:
        return not (_is_blank(self.url) and _is_blank(self.connection) and _is_blank(self.tag))

    def repository_location(self) -> Optional[str]:
        """The SCM url when present, otherwise the connection string."""
        if not _is_blank(self.url):
            return self.url
        if not _is_blank(self.connection):
            return self.connection
        return None


@dataclass(frozen=True)
class PomDocument:
    scm: PomScm
    parent: Optional[Coordinates] = None
    coordinates: Optional[Coordinates] = None
    properties: Dict[str, str] = field(default_factory=dict)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def pom_url(group_id: str, artifact_id: str, version: str) -> str:
    coords = Coordinates(group_id, artifact_id, version)
    return f"{MAVEN_REPO_BASE}/{coords.as_path()}/{artifact_id}-{version}.pom"


def _find(elem: ET.Element, tag: str) -> Optional[ET.Element]:
    # Try the POM namespace first, then a namespace-less document
    found = elem.find(f"maven:{tag}", POM_NAMESPACES)
    if found is None:
        found = elem.find(tag)
    return found


def _text(elem: Optional[ET.Element], tag: str) -> Optional[str]:
    if elem is None:
        return None
    child = _find(elem, tag)
    if child is None or _is_blank(child.text):
        return None
    return child.text.strip()


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _interpolate(value: Optional[str], properties: Dict[str, str]) -> Optional[str]:
    """Replaces ``${...}`` placeholders that are known; unknown ones are left as they are."""
    if value is None or "${" not in value:
        return value
    return _PLACEHOLDER_RE.sub(lambda m: properties.get(m.group(1).strip(), m.group(0)), value)


def parse_pom(pom_xml: str) -> Optional[PomDocument]:
    """
    Extracts SCM fields and parent coordinates from a POM.

    Args:
        pom_xml (str): Raw POM document

    Returns:
        Optional[PomDocument]: Parsed fields, or None if the XML cannot be parsed
    """
    try:
        root = ET.fromstring(pom_xml)
    except ET.ParseError as exc:
        logger.warning(f"Failed to parse POM XML: {exc}")
        return None

    parent_elem = _find(root, "parent")
    parent = None
    if parent_elem is not None:
        parent = Coordinates(
            _text(parent_elem, "groupId"),
            _text(parent_elem, "artifactId"),
            _text(parent_elem, "version"),
        )

    # groupId and version are inherited from the parent when omitted
    coordinates = Coordinates(
        _text(root, "groupId") or (parent.group_id if parent else None),
        _text(root, "artifactId"),
        _text(root, "version") or (parent.version if parent else None),
    )

    properties: Dict[str, str] = {}
    props_elem = _find(root, "properties")
    if props_elem is not None:
        for prop in props_elem:
            if isinstance(prop.tag, str) and not _is_blank(prop.text):
                properties[_local_name(prop.tag)] = prop.text.strip()

    # SCM values stay raw; placeholders are filled in by resolve_scm
    scm_elem = _find(root, "scm")
    scm = PomScm(
        url=_text(scm_elem, "url"),
        connection=_text(scm_elem, "connection") or _text(scm_elem, "developerConnection"),
        tag=_text(scm_elem, "tag"),
    )
    logger.debug(f"Parsed POM {coordinates}: scm={scm}, parent={parent}")
    return PomDocument(scm=scm, parent=parent, coordinates=coordinates, properties=properties)


def project_properties(coordinates: Coordinates, declared: Dict[str, str]) -> Dict[str, str]:
    """
    Builds the placeholder table for SCM interpolation.

    ``project.*`` and ``pom.*`` always name the artifact being resolved,
    even when the SCM block itself comes from a parent POM.  Bare
    ``groupId``/``artifactId``/``version`` keys fill in only where no
    declared property of that name exists.
    """
    properties = dict(declared)
    for key, value in (("groupId", coordinates.group_id),
                       ("artifactId", coordinates.artifact_id),
                       ("version", coordinates.version)):
        if value:
            properties[f"project.{key}"] = value
            properties[f"pom.{key}"] = value
            properties.setdefault(key, value)
    return properties


def interpolate_scm(scm: PomScm, properties: Dict[str, str]) -> PomScm:
    return PomScm(
        url=_interpolate(scm.url, properties),
        connection=_interpolate(scm.connection, properties),
        tag=_interpolate(scm.tag, properties),
    )


def fetch_pom(client: HttpClient, group_id: str, artifact_id: str, version: str) -> Optional[PomDocument]:
    url = pom_url(group_id, artifact_id, version)
    logger.info(f"Fetching POM from: {url}")
    result = client.get(url, timeout=POM_TIMEOUT)
    if not result.ok or not result.text:
        logger.info(f"POM not available for {group_id}:{artifact_id}:{version} (status={result.status_code})")
        return None
    return parse_pom(result.text)


def resolve_scm(client: HttpClient, group_id: str, artifact_id: str, version: str,
                max_depth: int = MAX_PARENT_DEPTH) -> Optional[PomScm]:
    """
    Finds SCM metadata for an artifact, walking up the parent POM chain.

    The walk stops when SCM data is found, a coordinate is blank, a POM
    cannot be fetched or parsed, the chain ends, or ``max_depth`` POMs
    have been read.

    ``${...}`` placeholders in the SCM block are resolved against the
    requested coordinates and the ``<properties>`` of every POM read on the
    way, nearer POMs taking precedence.

    Args:
        client (HttpClient): Shared HTTP client
        group_id (str): Maven groupId
        artifact_id (str): Maven artifactId
        version (str): Artifact version
        max_depth (int): Maximum number of POMs to read

    Returns:
        Optional[PomScm]: The first non-empty SCM block, or None
    """
    requested = Coordinates(group_id, artifact_id, version)
    current = requested
    declared: Dict[str, str] = {}
    depth = 0
    while depth < max_depth and current.is_complete():
        depth += 1
        doc = fetch_pom(client, current.group_id, current.artifact_id, current.version)
        if doc is None:
            return None

        for key, value in doc.properties.items():
            declared.setdefault(key, value)

        if doc.scm.has_data():
            scm = interpolate_scm(doc.scm, project_properties(requested, declared))
            logger.info(f"Found SCM in {current} at depth {depth}: {scm}")
            return scm

        if doc.parent is None or not doc.parent.is_complete():
            logger.info(f"No SCM in {current} and no parent to follow")
            break
        logger.debug(f"No SCM in {current}, following parent {doc.parent}")
        current = doc.parent

    logger.info(f"No SCM metadata found for {group_id}:{artifact_id}:{version} after {depth} POM(s)")
    return None
