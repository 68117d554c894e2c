"""
Key -> distribution table loaded from distribution files.

Lets response delays be switched out wholesale (e.g. no delays for
integration tests, peak-hour delays for load tests) and generated or updated
by tooling, without touching request mappings: a mapping names a key, the
files decide what delay that key gets.

Files are loaded once at configuration time. Later files override earlier
ones key by key, so a base file can be layered with environment-specific
overrides.

Writers (load, clear) are serialized and publish a complete read-only table
with a single assignment; readers never lock and always see either the old
or the new table.
"""

import logging
import threading
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from ..errors import DistributionLookupError, InvalidConfigurationError
from ..statistics.distributions import Distribution
from .file_source import DirectoryFileSource, FileSource
from .parser import parse_distributions

logger = logging.getLogger(__name__)


class DistributionRegistry:
    """Distributions by key, populated from one or more distribution files."""

    def __init__(self, file_source: FileSource | None = None):
        """
        :param file_source: Default source for load(); when None, files are
            read from the configured files root at load time.
        """
        self.file_source = file_source
        self._lock = threading.Lock()
        self._distributions: Mapping[str, Distribution] | None = None

    @property
    def populated(self) -> bool:
        """True once load() has run with a source list, until clear()."""
        return self._distributions is not None

    def load(
        self,
        sources: Sequence[str] | None,
        file_source: FileSource | None = None,
    ) -> None:
        """
        Replace the table with the merged contents of sources.

        sources=None is a no-op so the feature can go unused. Otherwise
        sources are read and parsed in order, later ones overriding earlier
        ones on the same key, and the merged table is published only once
        every source has loaded.

        :raises DistributionFileNotFoundError: if a source cannot be read.
        :raises InvalidConfigurationError: if a source cannot be parsed or
            holds an invalid descriptor, or sources is a single string.
        """
        if sources is None:
            return
        if isinstance(sources, str):
            raise InvalidConfigurationError(
                f"sources must be a list of file names, got the string {sources!r}"
            )

        source = file_source if file_source is not None else self.file_source
        if source is None:
            from ..config import get_files_root

            source = DirectoryFileSource(get_files_root())

        with self._lock:
            merged: dict[str, Distribution] = {}
            for name in sources:
                entries = parse_distributions(source.read_text(name), name, registry=self)
                overridden = merged.keys() & entries.keys()
                if overridden:
                    logger.debug("%s overrides %s", name, ", ".join(sorted(overridden)))
                merged.update(entries)
                logger.info("Loaded %d distribution(s) from %s", len(entries), name)
            self._distributions = MappingProxyType(merged)
        logger.info("Distribution registry holds %d key(s)", len(merged))

    def lookup(self, key: str) -> Distribution | None:
        """Return the distribution for key, or None if unpopulated or undefined."""
        distributions = self._distributions
        if distributions is None:
            return None
        return distributions.get(key)

    def resolve(self, key: str) -> Distribution:
        """Return the distribution for key, raising DistributionLookupError if there is none."""
        distribution = self.lookup(key)
        if distribution is None:
            raise DistributionLookupError(key)
        return distribution

    def clear(self) -> None:
        """Return the registry to its unpopulated state."""
        with self._lock:
            self._distributions = None
        logger.info("Distribution registry cleared")

    def keys(self) -> list[str]:
        distributions = self._distributions
        return sorted(distributions) if distributions is not None else []

    def __contains__(self, key: object) -> bool:
        distributions = self._distributions
        return distributions is not None and key in distributions

    def __len__(self) -> int:
        distributions = self._distributions
        return len(distributions) if distributions is not None else 0


_default_registry = DistributionRegistry()


def get_default_registry() -> DistributionRegistry:
    """Process-wide registry used by file-based distributions not bound to one."""
    return _default_registry
