"""
crates.io registry client.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable, Dict, Optional
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter

from .config import AuditSettings
from .errors import FetchError, HttpError, NotFoundError, ParseError, TransportError
from .models import FetchFailure, FetchOutcome, RegistryRecord
from .scoring import assess
from .time_utils import parse_timestamp, utc_now


logger = logging.getLogger(__name__)


class RequestThrottle:
    """Enforce a minimum delay between the starts of consecutive requests."""

    def __init__(
        self,
        delay: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.delay = delay
        self._clock = clock
        self._sleep = sleep
        self._last_start: Optional[float] = None

    def wait(self) -> None:
        """Block until the next request may start, then mark it started."""
        if self._last_start is not None:
            remaining = self.delay - (self._clock() - self._last_start)
            if remaining > 0:
                logger.debug("Throttling for %.3fs", remaining)
                self._sleep(remaining)
        self._last_start = self._clock()


def build_session(user_agent: str) -> requests.Session:
    """Create the shared HTTP session. Retries are disabled."""
    session = requests.Session()
    session.headers.update({
        'User-Agent': user_agent,
        'Accept': 'application/json',
    })
    adapter = HTTPAdapter(max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def parse_crate_payload(payload: Dict) -> RegistryRecord:
    """Convert a ``/api/v1/crates/{name}`` body into a RegistryRecord.

    Raises:
        ParseError: if required fields are missing or ill-typed.
    """
    if not isinstance(payload, dict):
        raise ParseError("response body is not a JSON object")
    crate = payload.get('crate')
    if not isinstance(crate, dict):
        raise ParseError("missing field `crate`")

    updated_at = crate.get('updated_at')
    if not isinstance(updated_at, str):
        raise ParseError("missing field `updated_at`")
    try:
        updated = parse_timestamp(updated_at)
    except ValueError as e:
        raise ParseError(f"invalid `updated_at` {updated_at!r}: {e}") from e

    max_version = crate.get('max_version')
    if not isinstance(max_version, str):
        raise ParseError("missing field `max_version`")

    recent_downloads = crate.get('recent_downloads')
    if recent_downloads is None:
        recent_downloads = 0
    elif isinstance(recent_downloads, bool) or not isinstance(recent_downloads, int):
        raise ParseError(f"invalid `recent_downloads` {recent_downloads!r}")
    elif recent_downloads < 0:
        raise ParseError(f"negative `recent_downloads` {recent_downloads}")

    return RegistryRecord(
        updated_at=updated,
        recent_downloads=recent_downloads,
        max_version=max_version,
    )


class CratesIoClient:
    """Fetch crate metadata one request at a time under a fixed cadence."""

    def __init__(
        self,
        settings: Optional[AuditSettings] = None,
        session: Optional[requests.Session] = None,
        throttle: Optional[RequestThrottle] = None,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.settings = settings or AuditSettings()
        self.session = session or build_session(self.settings.user_agent)
        self.throttle = throttle or RequestThrottle(self.settings.request_delay)
        self._now = now

    def __enter__(self) -> "CratesIoClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def crate_url(self, name: str) -> str:
        return f"{self.settings.registry_url}/api/v1/crates/{quote(name, safe='')}"

    def fetch_record(self, name: str) -> RegistryRecord:
        """Fetch and parse registry metadata for a crate.

        Raises:
            FetchError: one of NotFoundError, HttpError, TransportError or
                ParseError.
        """
        url = self.crate_url(name)
        self.throttle.wait()
        logger.info("Fetching metadata for %s", name)
        try:
            with self.session.get(url, timeout=self.settings.timeout) as response:
                if response.status_code == 404:
                    raise NotFoundError(dependency=name)
                if not 200 <= response.status_code < 300:
                    raise HttpError(response.status_code, dependency=name)
                try:
                    payload = response.json()
                except ValueError as e:
                    raise ParseError(f"invalid JSON body: {e}", dependency=name) from e
        except requests.RequestException as e:
            raise TransportError(str(e) or type(e).__name__, dependency=name) from e

        try:
            return parse_crate_payload(payload)
        except ParseError as e:
            e.dependency = name
            raise

    def fetch(self, name: str) -> FetchOutcome:
        """Return the assessment for ``name``, or a FetchFailure."""
        try:
            record = self.fetch_record(name)
        except FetchError as e:
            logger.warning("Failed to fetch %s: %s", name, e)
            return FetchFailure(error=e)
        return assess(record, self._now())
