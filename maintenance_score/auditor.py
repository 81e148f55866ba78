"""
Audit pipeline: build graph -> names -> registry -> report.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .aggregator import ReportAggregator
from .interfaces import BuildGraphReader, RegistryClient
from .manifest import extract_dependency_names
from .models import FetchOutcome, Report


logger = logging.getLogger(__name__)

FetchStartCallback = Callable[[int, int, str], None]
ProgressCallback = Callable[[int, int, str, FetchOutcome], None]


class MaintenanceAuditor:
    """Run a maintenance audit for one project."""

    def __init__(
        self,
        reader: BuildGraphReader,
        client: RegistryClient,
        aggregator_factory: Callable[[], ReportAggregator] = ReportAggregator,
        progress: Optional[ProgressCallback] = None,
        on_fetch_start: Optional[FetchStartCallback] = None,
    ):
        """Initialize the auditor.

        Args:
            reader: Build-graph reader supplying declared dependencies
            client: Registry client used for every lookup
            aggregator_factory: Creates a fresh aggregator per batch
            progress: Called after each fetch with (index, total, name, outcome)
            on_fetch_start: Called before each fetch with (index, total, name)
        """
        self.reader = reader
        self.client = client
        self.aggregator_factory = aggregator_factory
        self.progress = progress
        self.on_fetch_start = on_fetch_start

    def collect_names(self, manifest_path: Union[str, Path]) -> List[str]:
        """Read the build graph and return the sorted unique dependency names.

        Raises:
            ManifestError: if the build graph cannot be read.
        """
        return extract_dependency_names(self.reader.read(manifest_path))

    def audit_names(self, names: Sequence[str]) -> Report:
        """Fetch and score ``names`` in order, one request at a time."""
        aggregator = self.aggregator_factory()
        if not names:
            return aggregator.finish()

        total = len(names)
        logger.info("Auditing %d unique dependencies", total)
        aggregator.start()
        for index, name in enumerate(names, start=1):
            if self.on_fetch_start is not None:
                self.on_fetch_start(index, total, name)
            outcome = self.client.fetch(name)
            aggregator.add(name, outcome)
            if self.progress is not None:
                self.progress(index, total, name, outcome)
        return aggregator.finish()

    def run(self, manifest_path: Union[str, Path]) -> Report:
        """Audit every dependency of the project at ``manifest_path``.

        A ManifestError propagates before any registry request is made.
        """
        names = self.collect_names(manifest_path)
        if not names:
            logger.info("No dependencies found in %s", manifest_path)
        return self.audit_names(names)
