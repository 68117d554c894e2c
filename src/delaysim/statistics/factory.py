"""
Build delay distributions from descriptor dictionaries.

A descriptor names its variant in a "type" field; the remaining fields are
the variant's parameters, e.g.

    {"type": "fixed", "delayMillis": 50}
    {"type": "uniform", "lowerMillis": 20, "upperMillis": 40}
    {"type": "lognormal", "medianMillis": 90, "sigma": 0.1}
    {"type": "cappedlognormal", "medianMillis": 90, "sigma": 0.1, "maxValueMillis": 150}
    {"type": "filebased", "key": "GET:/orders"}

Type tags are matched case-insensitively with "-" and "_" ignored, so
"log-normal", "log_normal" and "LogNormal" all select the log-normal variant.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..errors import InvalidConfigurationError
from .distributions import (
    CappedLogNormalDistribution,
    Distribution,
    FileBasedDistribution,
    FixedDistribution,
    LogNormalDistribution,
    UniformDistribution,
)

if TYPE_CHECKING:
    from ..registry.distribution_registry import DistributionRegistry

TYPE_FIELD = "type"


@dataclass(frozen=True)
class VariantSpec:
    """Constructor and descriptor-field to constructor-argument mapping for one variant."""

    distribution_class: type[Distribution]
    fields: dict[str, str]


DISTRIBUTION_VARIANTS: dict[str, VariantSpec] = {
    "fixed": VariantSpec(FixedDistribution, {"delayMillis": "delay_millis"}),
    "uniform": VariantSpec(
        UniformDistribution,
        {"lowerMillis": "lower_millis", "upperMillis": "upper_millis"},
    ),
    "lognormal": VariantSpec(
        LogNormalDistribution,
        {"medianMillis": "median_millis", "sigma": "sigma"},
    ),
    "cappedlognormal": VariantSpec(
        CappedLogNormalDistribution,
        {
            "medianMillis": "median_millis",
            "sigma": "sigma",
            "maxValueMillis": "max_value_millis",
        },
    ),
    "filebased": VariantSpec(FileBasedDistribution, {"key": "key"}),
}


def normalize_type(type_tag: str) -> str:
    """Normalize a type tag for lookup ("Capped-Log_Normal" -> "cappedlognormal")."""
    return type_tag.strip().lower().replace("-", "").replace("_", "")


class DistributionFactory:
    """Factory for creating distributions from descriptor dictionaries."""

    @classmethod
    def create(
        cls,
        descriptor: dict[str, Any],
        registry: "DistributionRegistry | None" = None,
    ) -> Distribution:
        """
        Create a distribution from a descriptor.

        File-based distributions are bound to registry when one is given.

        :raises InvalidConfigurationError: on an unknown type, a missing or
            unexpected field, or parameters the variant rejects.
        """
        if not isinstance(descriptor, dict):
            raise InvalidConfigurationError(
                f"Distribution descriptor must be an object, got {type(descriptor).__name__}"
            )
        type_tag = descriptor.get(TYPE_FIELD)
        if not isinstance(type_tag, str) or not type_tag.strip():
            raise InvalidConfigurationError(f"Distribution descriptor needs a '{TYPE_FIELD}' field")

        variant = DISTRIBUTION_VARIANTS.get(normalize_type(type_tag))
        if variant is None:
            known = ", ".join(sorted(DISTRIBUTION_VARIANTS))
            raise InvalidConfigurationError(
                f"Unknown distribution type: {type_tag} (expected one of: {known})"
            )

        given = set(descriptor) - {TYPE_FIELD}
        missing = sorted(set(variant.fields) - given)
        if missing:
            raise InvalidConfigurationError(
                f"Distribution type '{type_tag}' is missing field(s): {', '.join(missing)}"
            )
        unexpected = sorted(given - set(variant.fields))
        if unexpected:
            raise InvalidConfigurationError(
                f"Distribution type '{type_tag}' does not accept field(s): {', '.join(unexpected)}"
            )

        kwargs = {arg: descriptor[name] for name, arg in variant.fields.items()}
        if variant.distribution_class is FileBasedDistribution:
            kwargs["registry"] = registry
        return variant.distribution_class(**kwargs)

    @classmethod
    def type_names(cls) -> list[str]:
        """Canonical type tags understood by create()."""
        return sorted(DISTRIBUTION_VARIANTS)
