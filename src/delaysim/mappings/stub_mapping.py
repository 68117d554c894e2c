"""
Load request mappings and the response delay each one is configured with.

Mapping files follow the WireMock layout; only the parts that matter for
delays are interpreted, the request block is kept as-is:

    {
      "request": {"method": "GET", "url": "/orders"},
      "response": {
        "status": 200,
        "delayDistribution": {"type": "filebased", "key": "GET:/orders"}
      }
    }

A file may hold one mapping or {"mappings": [...]}. A response may give
"fixedDelayMilliseconds" instead of a delayDistribution.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import DistributionFileNotFoundError, InvalidConfigurationError
from ..registry.distribution_registry import DistributionRegistry
from ..registry.parser import YAML_SUFFIXES, parse_document
from ..statistics.distributions import Distribution, FixedDistribution
from ..statistics.factory import DistributionFactory

logger = logging.getLogger(__name__)

MAPPING_SUFFIXES = (".json", *YAML_SUFFIXES)


@dataclass
class StubMapping:
    """A request mapping with its optional response delay."""

    name: str
    request: dict[str, Any] = field(default_factory=dict)
    delay_distribution: Distribution | None = None

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        name: str,
        registry: DistributionRegistry | None = None,
    ) -> "StubMapping":
        """Create a StubMapping from mapping file data."""
        if not isinstance(data, dict):
            raise InvalidConfigurationError(f"{name}: mapping must be an object")
        request = data.get("request") or {}
        response = data.get("response") or {}
        if not isinstance(request, dict) or not isinstance(response, dict):
            raise InvalidConfigurationError(f"{name}: request and response must be objects")

        descriptor = response.get("delayDistribution")
        fixed_delay = response.get("fixedDelayMilliseconds")
        delay: Distribution | None = None
        try:
            if descriptor is not None and fixed_delay is not None:
                raise InvalidConfigurationError(
                    "use either delayDistribution or fixedDelayMilliseconds, not both"
                )
            if descriptor is not None:
                delay = DistributionFactory.create(descriptor, registry=registry)
            elif fixed_delay is not None:
                delay = FixedDistribution(fixed_delay)
        except InvalidConfigurationError as e:
            raise InvalidConfigurationError(f"{name}: {e}") from e

        return cls(name=data.get("name") or name, request=request, delay_distribution=delay)


def load_mappings(
    directory: Path | str,
    registry: DistributionRegistry | None = None,
) -> list[StubMapping]:
    """
    Load every mapping file in directory, in file name order.

    :param registry: Registry that file-based delays resolve through.
    :raises DistributionFileNotFoundError: if directory does not exist.
    :raises InvalidConfigurationError: on unparsable files or invalid delays.
    """
    path = Path(directory)
    if not path.is_dir():
        raise DistributionFileNotFoundError(f"Mappings directory not found: {path}")

    mappings: list[StubMapping] = []
    for file_path in sorted(path.iterdir()):
        if not file_path.is_file() or file_path.suffix.lower() not in MAPPING_SUFFIXES:
            continue
        data = parse_document(file_path.read_text(encoding="utf-8"), file_path.name)
        if isinstance(data, dict) and "mappings" in data:
            entries = data["mappings"] or []
            if not isinstance(entries, list):
                raise InvalidConfigurationError(f"{file_path.name}: 'mappings' must be a list")
            for i, entry in enumerate(entries):
                mappings.append(StubMapping.from_dict(entry, f"{file_path.stem}[{i}]", registry))
        else:
            mappings.append(StubMapping.from_dict(data, file_path.stem, registry))

    logger.info("Loaded %d mapping(s) from %s", len(mappings), path)
    return mappings
