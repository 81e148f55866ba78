"""
Interfaces for build-graph readers and registry clients.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Protocol, Union

from .models import DeclaredDependency, FetchOutcome


class BuildGraphReader(Protocol):
    """Read the declared dependencies of a project."""

    def read(self, manifest_path: Union[str, Path]) -> Iterable[DeclaredDependency]:
        ...


class RegistryClient(Protocol):
    """Look up maintenance data for one dependency name."""

    def fetch(self, name: str) -> FetchOutcome:
        ...
