"""
Configure delays at server startup.

Loads the distribution files into a registry, loads the request mappings and,
when enabled, checks that every file-based key the mappings use is defined.
"""

import logging
from dataclasses import dataclass, field

from .config import DelayConfiguration
from .mappings.stub_mapping import StubMapping, load_mappings
from .registry.distribution_registry import DistributionRegistry, get_default_registry
from .registry.file_source import DirectoryFileSource
from .validators.consistency_checker import ConsistencyChecker

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """Registry and mappings ready to serve requests."""

    registry: DistributionRegistry
    mappings: list[StubMapping] = field(default_factory=list)


def bootstrap(
    configuration: DelayConfiguration | None = None,
    registry: DistributionRegistry | None = None,
) -> BootstrapResult:
    """
    Load distributions and mappings described by configuration.

    :param configuration: Defaults to DelayConfiguration.from_env().
    :param registry: Defaults to the process-wide registry.
    :raises DistributionFileNotFoundError: if a configured file or directory is missing.
    :raises InvalidConfigurationError: if a file holds an invalid distribution.
    :raises MissingDistributionKeysError: if checking is enabled and keys are missing.
    """
    configuration = configuration or DelayConfiguration.from_env()
    registry = registry if registry is not None else get_default_registry()

    registry.load(
        configuration.distribution_files,
        file_source=DirectoryFileSource(configuration.files_root),
    )

    mappings: list[StubMapping] = []
    if configuration.mappings_dir is not None:
        mappings = load_mappings(configuration.mappings_dir, registry=registry)

    if configuration.check_distributions:
        ConsistencyChecker(registry).check(mappings)
        logger.info("Checked %d mapping(s) against %d distribution key(s)", len(mappings), len(registry))

    return BootstrapResult(registry=registry, mappings=mappings)
