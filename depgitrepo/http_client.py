"""
Shared HTTP client used by every network-facing component.

The client wraps a single :class:`requests.Session` configured once from
:class:`ClientSettings` (user agent, connect timeout, redirect policy).
Each request supplies its own read timeout.  No retries are attempted:
a failed request is reported back to the caller as a negative result and
the caller moves on to its next candidate.

Every call is reduced to a three-valued :class:`ProbeStatus`:

* ``EXISTS``  - the server answered with a 2xx status
* ``ABSENT``  - the server answered 404/410
* ``ERROR``   - any other status, a timeout or a connection failure
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import requests

from .config import CONNECT_TIMEOUT, PROBE_TIMEOUT, USER_AGENT

logger = logging.getLogger('http')


class ProbeStatus(Enum):
    EXISTS = "exists"
    ABSENT = "absent"
    ERROR = "transient-error"

    @property
    def exists(self) -> bool:
        return self is ProbeStatus.EXISTS


@dataclass(frozen=True)
class ClientSettings:
    """Fixed configuration shared by all requests made through one client."""

    user_agent: str = USER_AGENT
    connect_timeout: float = CONNECT_TIMEOUT
    follow_redirects: bool = True


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a GET: the classified status plus the response, when one arrived."""

    status: ProbeStatus
    response: Optional[requests.Response] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.status.exists

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None

    @property
    def text(self) -> Optional[str]:
        return self.response.text if self.response is not None else None

    def json(self) -> Any:
        """Decodes the body as JSON, returning None when it is missing or malformed."""
        if self.response is None:
            return None
        try:
            return self.response.json()
        except requests.JSONDecodeError:
            logger.warning(f"Response body is not valid JSON (status={self.response.status_code})")
            return None


def status_from_code(status_code: int) -> ProbeStatus:
    if 200 <= status_code < 300:
        return ProbeStatus.EXISTS
    if status_code in (404, 410):
        return ProbeStatus.ABSENT
    return ProbeStatus.ERROR


class HttpClient:
    """
    Blocking HTTP client with immutable settings.

    One instance is meant to be built at process start and passed to the
    POM resolver, the GitHub API wrapper and the web probe.
    """

    def __init__(self, settings: Optional[ClientSettings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or ClientSettings()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.settings.user_agent})

    def _timeout(self, read_timeout: float):
        return (self.settings.connect_timeout, read_timeout)

    def get(self, url: str, *, timeout: float, headers: Optional[Dict[str, str]] = None,
            params: Optional[Dict[str, str]] = None) -> FetchResult:
        """
        Performs a GET request and keeps the body.

        Args:
            url (str): Absolute URL to fetch
            timeout (float): Read timeout in seconds for this call
            headers (Optional[Dict[str, str]]): Extra headers merged over the session defaults
            params (Optional[Dict[str, str]]): Query parameters

        Returns:
            FetchResult: Status plus the response (body already read) when one arrived
        """
        logger.debug(f"HTTP GET: {url}")
        try:
            response = self.session.get(
                url,
                headers=headers,
                params=params,
                timeout=self._timeout(timeout),
                allow_redirects=self.settings.follow_redirects,
            )
        except requests.RequestException as e:
            logger.warning(f"HTTP GET failed for {url}: {str(e)}")
            return FetchResult(ProbeStatus.ERROR)

        status = status_from_code(response.status_code)
        logger.debug(f"HTTP GET status: {response.status_code} for {url}")
        if status is ProbeStatus.ERROR:
            logger.warning(f"Unexpected status {response.status_code} for {url}")
        return FetchResult(status, response)

    def exists(self, url: str, *, timeout: float = PROBE_TIMEOUT,
               headers: Optional[Dict[str, str]] = None) -> ProbeStatus:
        """Checks a URL for existence without reading the body."""
        logger.debug(f"HTTP probe: {url}")
        try:
            response = self.session.get(
                url,
                headers=headers,
                timeout=self._timeout(timeout),
                allow_redirects=self.settings.follow_redirects,
                stream=True,
            )
        except requests.RequestException as e:
            logger.debug(f"HTTP probe failed for {url}: {str(e)}")
            return ProbeStatus.ERROR
        try:
            status = status_from_code(response.status_code)
        finally:
            response.close()
        logger.debug(f"HTTP probe status: {response.status_code} for {url}")
        return status

    def close(self):
        self.session.close()
