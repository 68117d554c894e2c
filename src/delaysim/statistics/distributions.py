"""
Delay distributions for simulated response latency.

Every distribution produces one non-negative delay, in whole milliseconds,
per call to sample(). The file-based distribution is an indirection: it
looks its key up in a DistributionRegistry and delegates to whatever
distribution is defined there.
"""

import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from ..errors import InvalidConfigurationError

if TYPE_CHECKING:
    from ..registry.distribution_registry import DistributionRegistry

# Fixed resampling policy for capped log-normal draws over the cap.
CAPPED_LOG_NORMAL_MAX_RESAMPLES = 10


def _require_number(field_name: str, value: Any) -> float:
    """Reject booleans, non-numbers, NaN and infinity."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigurationError(f"{field_name} must be a number, got {value!r}")
    if math.isnan(value) or math.isinf(value):
        raise InvalidConfigurationError(f"{field_name} must be finite, got {value!r}")
    return value


def _require_non_negative(field_name: str, value: Any) -> float:
    value = _require_number(field_name, value)
    if value < 0:
        raise InvalidConfigurationError(f"{field_name} must be non-negative, got {value!r}")
    return value


class Distribution(ABC):
    """Base class for delay distributions."""

    type_name: ClassVar[str] = ""

    @abstractmethod
    def sample(self) -> int:
        """Draw a single delay in milliseconds."""
        pass

    def sample_many(self, count: int) -> list[int]:
        """Draw count independent delays."""
        return [self.sample() for _ in range(count)]


@dataclass(frozen=True)
class FixedDistribution(Distribution):
    """Constant delay."""

    type_name: ClassVar[str] = "fixed"

    delay_millis: int

    def __post_init__(self):
        value = _require_non_negative("delayMillis", self.delay_millis)
        if value != int(value):
            raise InvalidConfigurationError(f"delayMillis must be an integer, got {value!r}")
        object.__setattr__(self, "delay_millis", int(value))

    def sample(self) -> int:
        return self.delay_millis


@dataclass(frozen=True)
class UniformDistribution(Distribution):
    """
    Uniform delay over [lower_millis, upper_millis].

    Draws whole milliseconds uniformly from the integers inside the range so
    every sample stays within the configured bounds.
    """

    type_name: ClassVar[str] = "uniform"

    lower_millis: float
    upper_millis: float

    def __post_init__(self):
        lower = _require_non_negative("lowerMillis", self.lower_millis)
        upper = _require_non_negative("upperMillis", self.upper_millis)
        if lower > upper:
            raise InvalidConfigurationError(
                f"lowerMillis ({lower}) must not be greater than upperMillis ({upper})"
            )

    def sample(self) -> int:
        low = math.ceil(self.lower_millis)
        high = math.floor(self.upper_millis)
        if low > high:
            # No whole millisecond inside the range, e.g. [10.2, 10.4]
            return int(round(self.lower_millis))
        return random.randint(low, high)


@dataclass(frozen=True)
class LogNormalDistribution(Distribution):
    """
    Log-normal delay - the usual shape of real-world response times.

    Most requests are fast but a long right tail produces the occasional
    slow response.

    Parameters:
        median_millis: The median delay (50th percentile)
        sigma: Standard deviation of the underlying normal distribution
               - sigma=0.1: tight, almost all samples near the median
               - sigma=0.5: moderate spread
               - sigma=1.0: long tail, occasional very large delays
    """

    type_name: ClassVar[str] = "lognormal"

    median_millis: float
    sigma: float

    def __post_init__(self):
        median = _require_number("medianMillis", self.median_millis)
        if median <= 0:
            raise InvalidConfigurationError(f"medianMillis must be positive, got {median!r}")
        _require_non_negative("sigma", self.sigma)

    def sample(self) -> int:
        mu = math.log(self.median_millis)
        return int(round(random.lognormvariate(mu, self.sigma)))


@dataclass(frozen=True)
class CappedLogNormalDistribution(LogNormalDistribution):
    """
    Log-normal delay with a hard upper bound.

    Draws over the cap are redrawn rather than clamped, so the shape of the
    distribution below the cap is kept. After CAPPED_LOG_NORMAL_MAX_RESAMPLES
    redraws a value still over the cap is clamped to it.
    """

    type_name: ClassVar[str] = "cappedlognormal"

    max_value_millis: float

    def __post_init__(self):
        super().__post_init__()
        cap = _require_number("maxValueMillis", self.max_value_millis)
        if cap < self.median_millis:
            raise InvalidConfigurationError(
                f"maxValueMillis ({cap}) must be at least medianMillis ({self.median_millis})"
            )

    def sample(self) -> int:
        value = super().sample()
        resamples = 0
        while value > self.max_value_millis and resamples < CAPPED_LOG_NORMAL_MAX_RESAMPLES:
            value = super().sample()
            resamples += 1
        return min(value, math.floor(self.max_value_millis))


@dataclass(frozen=True)
class FileBasedDistribution(Distribution):
    """
    Delay defined by key in externally loaded distribution files.

    The key is resolved through the bound registry, or the process-wide
    default registry when none is bound, every time a sample is drawn.
    Keys may point at other file-based distributions; cycles are rejected.
    """

    type_name: ClassVar[str] = "filebased"

    key: str
    registry: "DistributionRegistry | None" = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.key, str) or not self.key.strip():
            raise InvalidConfigurationError(f"key must be a non-empty string, got {self.key!r}")

    def _registry(self, fallback: "DistributionRegistry | None" = None) -> "DistributionRegistry":
        if self.registry is not None:
            return self.registry
        if fallback is not None:
            return fallback
        from ..registry.distribution_registry import get_default_registry

        return get_default_registry()

    def resolve(self, registry: "DistributionRegistry | None" = None) -> Distribution:
        """
        Follow this key (and any file-based chain behind it) to a concrete distribution.

        :raises DistributionLookupError: if a key in the chain is not defined.
        :raises InvalidConfigurationError: if the chain loops back on itself.
        """
        current_registry = registry if registry is not None else self._registry()
        seen = [self.key]
        distribution = current_registry.resolve(self.key)
        while isinstance(distribution, FileBasedDistribution):
            if distribution.key in seen:
                chain = " -> ".join([*seen, distribution.key])
                raise InvalidConfigurationError(f"File based distribution cycle: {chain}")
            seen.append(distribution.key)
            current_registry = distribution._registry(current_registry)
            distribution = current_registry.resolve(distribution.key)
        return distribution

    def sample(self) -> int:
        return self.resolve().sample()
