"""
Check that request mappings only use file-based delay keys that are defined.

Run once at startup, after the distribution files are loaded, so a typo in
a key fails the server configuration instead of the first matching request.
"""

import logging
from collections.abc import Iterable
from typing import Protocol

from ..errors import DistributionLookupError, MissingDistributionKeysError
from ..registry.distribution_registry import DistributionRegistry
from ..statistics.distributions import Distribution, FileBasedDistribution

logger = logging.getLogger(__name__)


class DelayedMapping(Protocol):
    """A request mapping as seen by the checker."""

    delay_distribution: Distribution | None


class ConsistencyChecker:
    """Find file-based delay references that do not resolve."""

    def __init__(self, registry: DistributionRegistry | None = None):
        """
        :param registry: Registry to resolve unbound file-based references
            through; references bound to a registry use their own.
        """
        self.registry = registry

    def missing_keys(self, mappings: Iterable[DelayedMapping]) -> list[str]:
        """
        Return the sorted, de-duplicated mapping keys that fail to resolve.

        A key is reported as the mapping names it, even when the undefined
        key is further down a chain of file based references.
        """
        missing: set[str] = set()
        for mapping in mappings:
            delay = getattr(mapping, "delay_distribution", None)
            if not isinstance(delay, FileBasedDistribution):
                continue
            try:
                delay.resolve(delay.registry if delay.registry is not None else self.registry)
            except DistributionLookupError as e:
                missing.add(delay.key)
                if e.key != delay.key:
                    logger.warning("Distribution key %s -> undefined key %s", delay.key, e.key)
        return sorted(missing)

    def check(self, mappings: Iterable[DelayedMapping]) -> None:
        """
        Raise if any file-based reference does not resolve.

        :raises MissingDistributionKeysError: listing every missing key once.
        """
        missing = self.missing_keys(mappings)
        if missing:
            logger.error("Undefined file based distribution keys: %s", ", ".join(missing))
            raise MissingDistributionKeysError(missing)
        logger.debug("All file based distribution keys resolve")
