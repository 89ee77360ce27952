"""
Resolution pipeline: cache path -> source URL.

Stages run in order and each either feeds the next or fails:

1. Parse       - cache path to coordinates (raises UnrecognizedPathFormat)
2. PomLookup   - SCM data from the POM chain (raises ScmNotFound)
3. Normalize   - SCM value to a web URL (raises UnsupportedScmHost)
4. Resolve     - GitHub API, then the web probe; failures fall through
5. Output      - verified URL, or an unverified guess as a last resort
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .cache_path import UnrecognizedPathFormat, parse_cache_path, source_target_for
from .github_utils import GitHubAPI, build_ref_candidates, resolve_github_source
from .http_client import HttpClient
from .maven_utils import ScmNotFound, resolve_scm
from .probe_utils import last_resort_url, probe, root_candidates
from .scm_utils import UnsupportedScmHost, normalize_scm_url, parse_github_repo

logger = logging.getLogger('main')

RESOLUTION_ERRORS = (UnrecognizedPathFormat, ScmNotFound, UnsupportedScmHost)

STRATEGY_GITHUB_API = "github-api"
STRATEGY_WEB_PROBE = "web-probe"
STRATEGY_GUESS = "guess"


@dataclass(frozen=True)
class Resolution:
    url: str
    verified: bool
    strategy: str


def resolve(path: str, client: Optional[HttpClient] = None, api: Optional[GitHubAPI] = None) -> Resolution:
    """
    Resolves a dependency-cache path to a web URL of the matching source.

    Args:
        path (str): Gradle or Maven cache path, optionally with ``!/entry``
        client (Optional[HttpClient]): Shared HTTP client; when omitted a client is
            built for this call and closed before returning
        api (Optional[GitHubAPI]): GitHub API wrapper; built on ``client`` when omitted

    Returns:
        Resolution: The URL, whether it was confirmed to exist, and which strategy produced it

    Raises:
        UnrecognizedPathFormat: If the path matches no known cache layout
        ScmNotFound: If no POM in the parent chain declares an SCM url or connection
        UnsupportedScmHost: If the SCM declaration cannot be turned into a web URL
    """
    if client is not None:
        return _resolve(path, client, api or GitHubAPI(client))

    client = HttpClient()
    try:
        return _resolve(path, client, api or GitHubAPI(client))
    finally:
        client.close()


def _resolve(path: str, client: HttpClient, api: GitHubAPI) -> Resolution:
    parsed = parse_cache_path(path)
    gav = parsed.gav()

    scm = resolve_scm(client, parsed.group_id, parsed.artifact_id, parsed.version)
    location = scm.repository_location() if scm else None
    if location is None:
        logger.error(f"Cannot obtain SCM info from POM for {gav}")
        raise ScmNotFound(f"Cannot obtain SCM info from POM for {gav}")

    repo_web = normalize_scm_url(location)
    if repo_web is None:
        logger.error(f"Unsupported SCM URL for {gav}: {scm}")
        raise UnsupportedScmHost(f"Unsupported SCM URL for {gav}: {scm}")

    is_compiled = parsed.is_compiled_entry
    target = source_target_for(parsed.entry_path)
    logger.info(f"Resolving {gav} target={target or '<root>'} in {repo_web}")

    handle = parse_github_repo(repo_web)
    if handle is not None:
        found = resolve_github_source(api, handle, parsed.artifact_id, parsed.version, scm.tag, target, is_compiled)
        if found is not None:
            url, _kind = found
            logger.info(f"Resolved via GitHub API: {url}")
            return Resolution(url, True, STRATEGY_GITHUB_API)
        logger.info(f"GitHub API did not resolve {gav}, trying web probe")

    refs = build_ref_candidates(parsed.artifact_id, parsed.version, scm.tag)
    roots = root_candidates(parsed.artifact_id, target, is_compiled)
    url = probe(client, repo_web, refs, roots, target)
    if url is not None:
        logger.info(f"Resolved via web probe: {url}")
        return Resolution(url, True, STRATEGY_WEB_PROBE)

    url = last_resort_url(repo_web, refs, parsed.version, target, is_compiled)
    logger.warning(f"Returning unverified URL for {gav}: {url}")
    return Resolution(url, False, STRATEGY_GUESS)


def resolve_source_url(path: str, client: Optional[HttpClient] = None) -> str:
    """Returns only the URL of :func:`resolve`; the result may be an unverified guess."""
    return resolve(path, client).url


def describe_artifact(path: str) -> str:
    """
    Summarises a cache path as its GAV, followed by the source-relative path
    of the entry when there is one.  No network access.
    """
    parsed = parse_cache_path(path)
    if not parsed.has_entry:
        return parsed.gav()
    return f"{parsed.gav()}\n\n{source_target_for(parsed.entry_path)}"
