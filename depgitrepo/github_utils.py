from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

from .cache_path import expand_roots, join_path, module_guess
from .config import API_TIMEOUT, GITHUB_API_BASE, RESOURCE_ROOTS, SOURCE_ROOTS, USER_AGENT, github_token
from .http_client import FetchResult, HttpClient, ProbeStatus
from .scm_utils import RepoHandle, github_repo_url


class Kind(Enum):
    FILE = "file"
    DIR = "dir"

    @property
    def view(self) -> str:
        """GitHub web view segment: ``blob`` for files, ``tree`` for directories."""
        return "tree" if self is Kind.DIR else "blob"


@dataclass(frozen=True)
class PathResolution:
    path: str
    kind: Kind


logger = logging.getLogger('main')
version_resolve_logger = logging.getLogger('version_resolve')
url_logger = logging.getLogger('url_construction')


class GitHubAPI:
    """
    A client class for the subset of GitHub's REST API used to locate sources.

    This class provides methods to:
    - Check whether a tag or branch exists
    - Read a repository's default branch
    - Check existence and type (file/dir) of a path at a ref
    - List the full recursive tree of a ref

    Every method reports failures (non-2xx, timeouts, malformed JSON) as a
    negative result instead of raising.

    Attributes:
        BASE_URL (str): The base URL for GitHub's API
        client (HttpClient): Shared HTTP client
        headers (dict): Accept, User-Agent and optional bearer authorization
    """

    BASE_URL = GITHUB_API_BASE

    def __init__(self, client: HttpClient, token: Optional[str] = None):
        self.client = client
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        }
        token = token if token is not None else github_token()
        if token and token.strip():
            self.headers["Authorization"] = f"Bearer {token.strip()}"

    def _make_request(self, endpoint: str, params: Optional[Dict] = None) -> FetchResult:
        url = f"{self.BASE_URL}{endpoint}"
        logger.debug(f"Making request to: {url}")
        if params:
            logger.debug(f"Request parameters: {params}")
        return self.client.get(url, timeout=API_TIMEOUT, headers=self.headers, params=params)

    def ref_status(self, owner: str, repo: str, ref: str) -> ProbeStatus:
        """
        Checks whether a ref exists, first as a tag, then as a branch.

        Args:
            owner (str): Repository owner/organization name
            repo (str): Repository name
            ref (str): Tag or branch name

        Returns:
            ProbeStatus: EXISTS if either lookup succeeds, otherwise the status of the branch lookup
        """
        encoded = quote(ref, safe="/")
        tag_result = self._make_request(f"/repos/{owner}/{repo}/git/ref/tags/{encoded}")
        if tag_result.ok:
            return ProbeStatus.EXISTS
        branch_result = self._make_request(f"/repos/{owner}/{repo}/git/ref/heads/{encoded}")
        if branch_result.ok:
            return ProbeStatus.EXISTS
        if ProbeStatus.ERROR in (tag_result.status, branch_result.status):
            return ProbeStatus.ERROR
        return ProbeStatus.ABSENT

    def get_default_branch(self, owner: str, repo: str) -> Optional[str]:
        logger.info(f"Fetching repository info for {owner}/{repo}")
        result = self._make_request(f"/repos/{owner}/{repo}")
        if not result.ok:
            return None
        info = result.json()
        if not isinstance(info, dict):
            return None
        branch = info.get("default_branch")
        return branch if isinstance(branch, str) and branch else None

    def _contents(self, owner: str, repo: str, ref: str, path: str) -> FetchResult:
        # Slashes in the path are sent as-is
        return self._make_request(
            f"/repos/{owner}/{repo}/contents/{quote(path, safe='/')}",
            params={"ref": ref},
        )

    def content_exists(self, owner: str, repo: str, ref: str, path: str) -> bool:
        return self._contents(owner, repo, ref, path).ok

    def get_content_type(self, owner: str, repo: str, ref: str, path: str) -> Optional[str]:
        """
        Returns ``"file"`` or ``"dir"`` for an existing path, None otherwise.

        A JSON array body is a directory listing.  An object body is typed by
        its ``type`` field; anything other than ``dir`` is treated as a file.
        """
        result = self._contents(owner, repo, ref, path)
        if not result.ok:
            return None
        body = result.json()
        if isinstance(body, list):
            return "dir"
        if isinstance(body, dict) and body.get("type") == "dir":
            return "dir"
        return "file"

    def get_tree(self, owner: str, repo: str, ref: str) -> Optional[List[Dict]]:
        """
        Retrieves the complete recursive tree of a ref.

        Returns:
            Optional[List[Dict]]: Tree items with at least ``path`` and ``type``, or None on failure
        """
        logger.info(f"Fetching tree for {owner}/{repo} at {ref}")
        result = self._make_request(
            f"/repos/{owner}/{repo}/git/trees/{quote(ref, safe='/')}",
            params={"recursive": "1"},
        )
        if not result.ok:
            return None
        body = result.json()
        if not isinstance(body, dict) or not isinstance(body.get("tree"), list):
            logger.warning(f"Unexpected tree response format for {owner}/{repo}@{ref}")
            return None
        if body.get("truncated"):
            logger.warning(f"Tree listing for {owner}/{repo}@{ref} is truncated")
        return body["tree"]


def build_ref_candidates(artifact_id: str, version: str, tag: Optional[str] = None) -> List[str]:
    """
    Builds the ordered list of refs to try for an artifact version.

    The POM tag comes first, then ``{artifact}-{version}`` (per-module tags
    in multi-module repositories), ``v{version}`` and the bare version.
    Blank and duplicate entries are dropped, preserving order.
    """
    candidates = [tag, f"{artifact_id}-{version}", f"v{version}", version]
    refs: List[str] = []
    for ref in candidates:
        if ref is None:
            continue
        ref = ref.strip()
        if ref and ref not in refs:
            refs.append(ref)
    return refs


def pick_ref(api: GitHubAPI, handle: RepoHandle, candidates: List[str]) -> Optional[str]:
    """Returns the first candidate GitHub confirms, else the default branch, else None."""
    version_resolve_logger.info(f"Resolving ref for {handle}, candidates: {candidates}")
    for ref in candidates:
        status = api.ref_status(handle.owner, handle.repo, ref)
        version_resolve_logger.info(f"Ref {ref}: {status.value}")
        if status.exists:
            return ref

    default_branch = api.get_default_branch(handle.owner, handle.repo)
    if default_branch:
        version_resolve_logger.info(f"No candidate ref matched, using default branch: {default_branch}")
    else:
        version_resolve_logger.warning(f"No ref could be resolved for {handle}")
    return default_branch


def score_tree_path(path: str, target: str, artifact_id: str) -> int:
    """
    Scores a tree entry that ends with the target path.

    +5 when the top-level directory is the artifact, +3 for a ``src/main``
    layout, +2 for a ``java`` package root, minus one per extra leading
    segment beyond the target.
    """
    score = 0
    if artifact_id and path.startswith(artifact_id + "/"):
        score += 5
    anchored = "/" + path
    if "/src/main/" in anchored:
        score += 3
    if "/java/" in anchored:
        score += 2
    extra = len(path.split("/")) - len(target.split("/"))
    score -= max(0, extra)
    return score


def best_tree_match(tree_items: List[Dict], target: str, artifact_id: str) -> Optional[str]:
    """Picks the highest scoring tree path ending with the target; ties keep the first seen."""
    needle = "/" + target.replace("\\", "/").lstrip("/")
    best = None
    best_score = None
    for item in tree_items:
        if not isinstance(item, dict):
            continue
        path = item.get("path", "")
        if not path or not path.endswith(needle):
            continue
        score = score_tree_path(path, target, artifact_id)
        url_logger.debug(f"Tree candidate {path} scored {score}")
        if best_score is None or score > best_score:
            best, best_score = path, score
    return best


def find_source_path(api: GitHubAPI, handle: RepoHandle, ref: str, target: str,
                     artifact_id: str) -> Optional[PathResolution]:
    """Locates the source file for a compiled entry: conventional roots first, then a tree scan."""
    for root in expand_roots(SOURCE_ROOTS, artifact_id, None):
        candidate = join_path(root, target)
        if api.content_exists(handle.owner, handle.repo, ref, candidate):
            url_logger.info(f"Found source at conventional root: {candidate}")
            return PathResolution(candidate, Kind.FILE)

    tree_items = api.get_tree(handle.owner, handle.repo, ref)
    if tree_items is None:
        return None
    best = best_tree_match(tree_items, target, artifact_id)
    if best:
        url_logger.info(f"Found source via tree scan: {best}")
        return PathResolution(best, Kind.FILE)
    url_logger.info(f"No tree entry ends with {target}")
    return None


def find_resource_path(api: GitHubAPI, handle: RepoHandle, ref: str, target: str,
                       artifact_id: str) -> Optional[PathResolution]:
    """Locates a resource entry under resource-oriented roots, reporting file or directory."""
    for root in expand_roots(RESOURCE_ROOTS, artifact_id, module_guess(target)):
        candidate = join_path(root, target)
        content_type = api.get_content_type(handle.owner, handle.repo, ref, candidate)
        if content_type is not None:
            url_logger.info(f"Found resource {candidate} ({content_type})")
            return PathResolution(candidate, Kind(content_type))
    return None


def github_web_url(handle: RepoHandle, ref: str, resolution: PathResolution) -> str:
    base = f"{github_repo_url(handle)}/{resolution.kind.view}/{ref}"
    return f"{base}/{resolution.path}" if resolution.path else base


def resolve_github_source(api: GitHubAPI, handle: RepoHandle, artifact_id: str, version: str,
                          tag: Optional[str], target: str,
                          is_compiled: bool) -> Optional[Tuple[str, Kind]]:
    """
    Resolves a verified GitHub web URL for a target path.

    Args:
        api (GitHubAPI): GitHub API wrapper
        handle (RepoHandle): Repository owner and name
        artifact_id (str): Maven artifactId, used for ref candidates and module roots
        version (str): Artifact version
        tag (Optional[str]): Tag declared in the POM, tried first
        target (str): Path relative to a source or resource root; empty for the repository root
        is_compiled (bool): Whether the target came from a compiled-class entry

    Returns:
        Optional[Tuple[str, Kind]]: The URL and its kind, or None so the caller can fall back
    """
    ref = pick_ref(api, handle, build_ref_candidates(artifact_id, version, tag))
    if not ref:
        return None

    if not target:
        resolution = PathResolution("", Kind.DIR)
    elif is_compiled:
        resolution = find_source_path(api, handle, ref, target, artifact_id)
    else:
        resolution = find_resource_path(api, handle, ref, target, artifact_id)

    if resolution is None:
        logger.info(f"GitHub API could not locate {target} in {handle}@{ref}")
        return None

    url = github_web_url(handle, ref, resolution)
    url_logger.info(f"Constructed GitHub URL: {url}")
    return url, resolution.kind
