"""
Parse distribution files into key -> Distribution tables.

A distribution file is a JSON (or YAML, by .yaml/.yml suffix) object whose
keys identify requests and whose values are distribution descriptors:

    {
      "GET:/orders": {"type": "fixed", "delayMillis": 50},
      "GET:/search": {"type": "lognormal", "medianMillis": 90, "sigma": 0.1}
    }
"""

import json
from typing import TYPE_CHECKING, Any

import yaml

from ..errors import InvalidConfigurationError
from ..statistics.distributions import Distribution
from ..statistics.factory import DistributionFactory

if TYPE_CHECKING:
    from .distribution_registry import DistributionRegistry

YAML_SUFFIXES = (".yaml", ".yml")


def parse_document(text: str, name: str) -> Any:
    """Parse JSON, or YAML when name has a YAML suffix."""
    try:
        if name.lower().endswith(YAML_SUFFIXES):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidConfigurationError(f"{name}: cannot parse file: {e}") from e


def parse_distributions(
    text: str,
    name: str,
    registry: "DistributionRegistry | None" = None,
) -> dict[str, Distribution]:
    """
    Parse a distribution file.

    :param text: File content.
    :param name: File name, used to pick the format and in error messages.
    :param registry: Registry that file-based entries resolve through.
    :return: Distributions by key, in file order.
    """
    data = parse_document(text, name)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigurationError(
            f"{name}: expected an object of key -> distribution, got {type(data).__name__}"
        )

    distributions: dict[str, Distribution] = {}
    for key, descriptor in data.items():
        if not isinstance(key, str):
            raise InvalidConfigurationError(f"{name}: distribution keys must be strings, got {key!r}")
        try:
            distributions[key] = DistributionFactory.create(descriptor, registry=registry)
        except InvalidConfigurationError as e:
            raise InvalidConfigurationError(f"{name}: distribution '{key}': {e}") from e
    return distributions
