"""
Runtime settings for an audit run.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from . import __version__


DEFAULT_REGISTRY_URL = "https://crates.io"
DEFAULT_CONTACT = "https://github.com/cargo-maintenance-score/cargo-maintenance-score"
DEFAULT_USER_AGENT = f"cargo-maintenance-score/{__version__} ({DEFAULT_CONTACT})"

# Minimum spacing between the starts of two registry requests. Faster
# clients risk being throttled or banned by crates.io.
MIN_REQUEST_DELAY = 0.6
DEFAULT_TIMEOUT = 30.0
DEFAULT_CARGO_TIMEOUT = 120.0


@dataclass
class AuditSettings:
    """Settings shared by the registry client and the build-graph reader."""

    registry_url: str = DEFAULT_REGISTRY_URL
    user_agent: str = DEFAULT_USER_AGENT
    request_delay: float = MIN_REQUEST_DELAY
    timeout: float = DEFAULT_TIMEOUT
    cargo_timeout: float = DEFAULT_CARGO_TIMEOUT
    no_deps: bool = False

    def __post_init__(self) -> None:
        self.registry_url = self.registry_url.rstrip("/")
        # NaN compares False against every bound, so finiteness is checked first
        if not math.isfinite(self.request_delay) or self.request_delay < MIN_REQUEST_DELAY:
            raise ValueError(
                f"request_delay must be a finite number of at least {MIN_REQUEST_DELAY}s, "
                f"got {self.request_delay}"
            )
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            raise ValueError(f"timeout must be a positive finite number, got {self.timeout}")
        if not math.isfinite(self.cargo_timeout) or self.cargo_timeout <= 0:
            raise ValueError(f"cargo_timeout must be a positive finite number, got {self.cargo_timeout}")
