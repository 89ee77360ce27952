"""
API-free fallback that probes a repository's web front-end directly.

Used for hosts other than GitHub, and for GitHub repositories where the
API could not confirm a ref/path.  Candidate URLs follow the common
``{repo}/blob/{ref}/{path}`` (file) and ``{repo}/tree/{ref}/{path}``
(directory) conventions.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .cache_path import expand_roots, join_path, module_guess
from .config import (DEFAULT_RESOURCE_ROOT, DEFAULT_SOURCE_ROOT, PROBE_SOURCE_ROOTS, PROBE_TIMEOUT,
                     RESOURCE_ROOTS)
from .http_client import HttpClient

url_logger = logging.getLogger('url_construction')


def root_candidates(artifact_id: str, target: str, is_compiled: bool) -> List[str]:
    """Returns the roots to probe, most specific first; an empty target only has the repository root."""
    if not target:
        return [""]
    templates = PROBE_SOURCE_ROOTS if is_compiled else RESOURCE_ROOTS
    return expand_roots(templates, artifact_id, module_guess(target))


def web_url(repo_web: str, view: str, ref: str, path: str) -> str:
    return "/".join(part for part in (repo_web.rstrip("/"), view, ref, path) if part)


def probe(client: HttpClient, repo_web: str, refs: List[str], roots: List[str], target: str) -> Optional[str]:
    """
    Returns the first web URL that exists for any ref/root combination.

    Refs form the outer loop so that ref priority wins over root choice;
    for each combination the file view is tried before the directory view.

    Args:
        client (HttpClient): Shared HTTP client
        repo_web (str): Canonical repository web URL
        refs (List[str]): Ref candidates in priority order
        roots (List[str]): Root candidates in priority order
        target (str): Path relative to the root

    Returns:
        Optional[str]: The first URL answering 2xx, or None
    """
    for ref in refs:
        for root in roots:
            path = join_path(root, target)
            for view in ("blob", "tree"):
                candidate = web_url(repo_web, view, ref, path)
                status = client.exists(candidate, timeout=PROBE_TIMEOUT)
                url_logger.debug(f"Probe {candidate}: {status.value}")
                if status.exists:
                    url_logger.info(f"Found by web probe: {candidate}")
                    return candidate
    url_logger.info(f"Web probe found nothing in {repo_web} for {target or '<root>'}")
    return None


def last_resort_url(repo_web: str, refs: List[str], version: str, target: str, is_compiled: bool) -> str:
    """Builds an unverified best-guess URL from the first ref and a default root."""
    ref = refs[0] if refs else f"v{version}"
    if not target:
        return web_url(repo_web, "tree", ref, "")
    root = DEFAULT_SOURCE_ROOT if is_compiled else DEFAULT_RESOURCE_ROOT
    url = web_url(repo_web, "blob", ref, join_path(root, target))
    url_logger.warning(f"Falling back to unverified URL: {url}")
    return url
