"""
Build-graph reading and dependency name extraction.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .config import DEFAULT_CARGO_TIMEOUT
from .errors import ManifestError
from .models import DeclaredDependency


logger = logging.getLogger(__name__)


def default_manifest_path() -> Path:
    """Return ``Cargo.toml`` in the current working directory."""
    return Path.cwd() / "Cargo.toml"


def _entry_name(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        return entry.get("name")
    return getattr(entry, "name", None)


def extract_dependency_names(dependencies: Iterable[Any]) -> List[str]:
    """Return the unique dependency names in ascending order.

    Args:
        dependencies: Entries from the build-graph reader. Each entry is a
            ``DeclaredDependency``, an object with a ``name`` attribute, a
            mapping with a ``"name"`` key, or a bare name.

    Returns:
        Sorted list without duplicates. An empty input yields an empty list.
    """
    names = set()
    for entry in dependencies:
        name = _entry_name(entry)
        if not isinstance(name, str) or not name:
            raise ManifestError(f"Dependency entry without a name: {entry!r}")
        names.add(name)
    return sorted(names)


class CargoMetadataReader:
    """Read the dependency graph of a Cargo project via ``cargo metadata``."""

    def __init__(
        self,
        cargo: str = "cargo",
        timeout: float = DEFAULT_CARGO_TIMEOUT,
        no_deps: bool = False,
    ) -> None:
        self.cargo = cargo
        self.timeout = timeout
        self.no_deps = no_deps

    def read(self, manifest_path: Union[str, Path]) -> List[DeclaredDependency]:
        """Return every dependency edge declared in the project's graph.

        Raises:
            ManifestError: if the manifest is missing or cargo cannot read it.
        """
        manifest_path = Path(manifest_path)
        if not manifest_path.is_file():
            raise ManifestError(
                f"Manifest not found at {manifest_path}. "
                "Run in a Rust project directory with Cargo.toml",
                manifest_path=str(manifest_path),
            )
        metadata = self._run_cargo_metadata(manifest_path)
        return self._parse_dependencies(metadata, manifest_path)

    def _build_command(self, manifest_path: Path) -> List[str]:
        cmd = [
            self.cargo, 'metadata',
            '--format-version', '1',
            '--manifest-path', str(manifest_path),
        ]
        if self.no_deps:
            cmd.append('--no-deps')
        return cmd

    def _run_cargo_metadata(self, manifest_path: Path) -> Dict:
        cmd = self._build_command(manifest_path)
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError as e:
            raise ManifestError(
                f"'{self.cargo}' executable not found; install the Rust toolchain",
                manifest_path=str(manifest_path),
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ManifestError(
                f"cargo metadata timed out after {self.timeout:g}s",
                manifest_path=str(manifest_path),
            ) from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise ManifestError(
                f"cargo metadata failed for {manifest_path}: {stderr or 'exit code %d' % result.returncode}",
                manifest_path=str(manifest_path),
            )

        try:
            metadata = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ManifestError(
                f"cargo metadata returned invalid JSON: {e}",
                manifest_path=str(manifest_path),
            ) from e
        if not isinstance(metadata, dict):
            raise ManifestError(
                "cargo metadata returned an unexpected document",
                manifest_path=str(manifest_path),
            )
        return metadata

    def _parse_dependencies(self, metadata: Dict, manifest_path: Path) -> List[DeclaredDependency]:
        packages = metadata.get('packages')
        if not isinstance(packages, list):
            raise ManifestError(
                "cargo metadata output has no package list",
                manifest_path=str(manifest_path),
            )

        dependencies = []
        for package in packages:
            for dep in package.get('dependencies', []) or []:
                name = dep.get('name')
                if not name:
                    continue
                dependencies.append(DeclaredDependency(
                    name=name,
                    declared_by=package.get('name'),
                    kind=dep.get('kind') or "normal",
                    source=dep.get('source'),
                ))
        logger.debug("Read %d dependency edges from %s", len(dependencies), manifest_path)
        return dependencies
