"""
Normalisation of POM SCM declarations into repository web URLs.

Values seen in the wild include::

    https://github.com/FasterXML/java-classmate
    scm:git:https://github.com/FasterXML/java-classmate.git
    scm:git:git@github.com:FasterXML/java-classmate.git
    git@gitlab.com:group/repo.git
    ssh://git@github.com/apache/commons-lang.git
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .config import GITHUB_WEB_BASE

logger = logging.getLogger('url_construction')

KNOWN_HOSTS = ("github.com", "gitlab.com", "bitbucket.org")

# Hosts where the web root is always exactly /owner/repo
TWO_SEGMENT_HOSTS = ("github.com", "bitbucket.org")


class UnsupportedScmHost(ValueError):
    """Raised when an SCM declaration cannot be translated into a web URL."""


@dataclass(frozen=True)
class RepoHandle:
    owner: str
    repo: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"


def _strip_scm_wrapper(value: str) -> str:
    # scm:<provider>:<rest>; the provider never contains a colon
    while value.startswith("scm:"):
        rest = value[len("scm:"):]
        provider, sep, remainder = rest.partition(":")
        if not sep or remainder.startswith("//"):
            return rest
        value = remainder
    return value


def _translate_ssh(value: str) -> str:
    for host in KNOWN_HOSTS:
        for prefix in (f"git@{host}:", f"ssh://git@{host}/", f"git://{host}/"):
            if value.startswith(prefix):
                return f"https://{host}/{value[len(prefix):]}"
    return value


def _trim_web_root(url: str) -> str:
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if host not in TWO_SEGMENT_HOSTS:
        return url
    segments = [s for s in parsed.path.split("/") if s]
    if len(segments) <= 2:
        return url
    return f"{parsed.scheme}://{parsed.netloc}/{segments[0]}/{segments[1]}"


def normalize_scm_url(scm_url_or_connection: Optional[str]) -> Optional[str]:
    """
    Converts an SCM url or connection string into a canonical repository web URL.

    Args:
        scm_url_or_connection (Optional[str]): Value of ``<scm><url>`` or ``<scm><connection>``

    Returns:
        Optional[str]: ``https://host/owner/repo`` style URL, or None if unsupported
    """
    if scm_url_or_connection is None:
        return None
    s = scm_url_or_connection.strip()
    if not s:
        return None

    s = _strip_scm_wrapper(s)
    s = _translate_ssh(s)
    s = s.rstrip("/")
    if s.endswith(".git"):
        s = s[:-len(".git")]

    if not (s.startswith("http://") or s.startswith("https://")):
        logger.warning(f"Unsupported SCM declaration: {scm_url_or_connection}")
        return None

    s = _trim_web_root(s)
    logger.info(f"Normalized SCM {scm_url_or_connection} -> {s}")
    return s


def parse_github_repo(repo_web_url: str) -> Optional[RepoHandle]:
    """Returns the owner/repo handle when the URL points at github.com, otherwise None."""
    parsed = urlparse(repo_web_url)
    if (parsed.hostname or "").lower() != "github.com":
        return None
    segments = parsed.path.split("/")
    # leading slash -> ['', owner, repo, ...]
    if len(segments) < 3 or not segments[1] or not segments[2]:
        return None
    repo = segments[2]
    if repo.endswith(".git"):
        repo = repo[:-len(".git")]
    return RepoHandle(segments[1], repo)


def github_repo_url(handle: RepoHandle) -> str:
    return f"{GITHUB_WEB_BASE}/{handle.owner}/{handle.repo}"
