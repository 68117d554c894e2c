"""Tests for delay distribution sampling."""

import random
import statistics

import pytest

from delaysim.errors import DistributionLookupError, InvalidConfigurationError
from delaysim.registry import DistributionRegistry, InMemoryFileSource, get_default_registry
from delaysim.statistics import (
    CAPPED_LOG_NORMAL_MAX_RESAMPLES,
    CappedLogNormalDistribution,
    FileBasedDistribution,
    FixedDistribution,
    LogNormalDistribution,
    UniformDistribution,
)


@pytest.fixture(autouse=True)
def _seed() -> None:
    random.seed(20240101)


def test_fixed_always_returns_delay() -> None:
    """Fixed returns the same delay on every sample."""
    dist = FixedDistribution(50)
    assert dist.sample_many(100) == [50] * 100


def test_fixed_accepts_integral_float() -> None:
    """An integral float delay is accepted as an int."""
    assert FixedDistribution(20.0).sample() == 20


@pytest.mark.parametrize("value", [-1, 1.5, True, "50", None])
def test_fixed_rejects_invalid_delay(value) -> None:
    """Negative, fractional and non-numeric delays are rejected."""
    with pytest.raises(InvalidConfigurationError):
        FixedDistribution(value)


@pytest.mark.parametrize("lower,upper", [(0, 0), (25, 75), (100, 101), (0.5, 3.5)])
def test_uniform_stays_within_bounds(lower, upper) -> None:
    """Uniform samples stay within the inclusive bounds."""
    dist = UniformDistribution(lower, upper)
    samples = dist.sample_many(2000)
    assert all(lower <= s <= upper for s in samples)


def test_uniform_covers_whole_range() -> None:
    """Uniform samples reach every whole millisecond in range."""
    samples = set(UniformDistribution(1, 4).sample_many(2000))
    assert samples == {1, 2, 3, 4}


def test_uniform_without_whole_millisecond_in_range() -> None:
    """A range with no whole millisecond returns the rounded lower bound."""
    assert UniformDistribution(10.2, 10.4).sample() == 10


def test_uniform_rejects_inverted_bounds() -> None:
    """Lower above upper is rejected."""
    with pytest.raises(InvalidConfigurationError, match="lowerMillis"):
        UniformDistribution(10, 5)


def test_uniform_rejects_negative_bounds() -> None:
    """Negative bounds are rejected."""
    with pytest.raises(InvalidConfigurationError):
        UniformDistribution(-5, 5)


def test_log_normal_with_zero_sigma_returns_median() -> None:
    """With sigma 0 every log-normal sample is the median."""
    assert LogNormalDistribution(90, 0).sample_many(10) == [90] * 10


def test_log_normal_is_non_negative_and_centred_on_median() -> None:
    """Log-normal samples are non-negative with the configured median."""
    samples = LogNormalDistribution(60, 0.5).sample_many(5000)
    assert min(samples) >= 0
    assert abs(statistics.median(samples) - 60) <= 4


@pytest.mark.parametrize("median,sigma", [(0, 0.1), (-10, 0.1), (10, -0.1)])
def test_log_normal_rejects_invalid_parameters(median, sigma) -> None:
    """Non-positive medians and negative sigmas are rejected."""
    with pytest.raises(InvalidConfigurationError):
        LogNormalDistribution(median, sigma)


def test_capped_log_normal_rejects_cap_below_median() -> None:
    """A cap below the median is rejected at construction."""
    with pytest.raises(InvalidConfigurationError, match="maxValueMillis"):
        CappedLogNormalDistribution(90, 0.1, 89)


def test_capped_log_normal_allows_cap_equal_to_median() -> None:
    """A cap equal to the median is allowed."""
    dist = CappedLogNormalDistribution(90, 1.0, 90)
    assert all(0 <= s <= 90 for s in dist.sample_many(1000))


@pytest.mark.parametrize(
    "median,sigma,cap",
    [(90, 0.1, 150), (10, 2.0, 12), (500, 1.5, 600), (1, 0.0, 1), (3, 3.0, 1000)],
)
def test_capped_log_normal_never_exceeds_cap(median, sigma, cap) -> None:
    """Capped samples never exceed the cap or go negative."""
    samples = CappedLogNormalDistribution(median, sigma, cap).sample_many(5000)
    assert max(samples) <= cap
    assert min(samples) >= 0


def test_capped_log_normal_keeps_median() -> None:
    """Capping keeps the empirical median near the configured one."""
    samples = CappedLogNormalDistribution(90, 0.1, 150).sample_many(10_000)
    assert max(samples) <= 150
    assert abs(statistics.median(samples) - 90) <= 2


def test_capped_log_normal_resamples_then_clamps(monkeypatch: pytest.MonkeyPatch) -> None:
    """Over-cap draws are redrawn the fixed number of times, then clamped."""
    draws = []

    def always_over_cap(self) -> int:
        draws.append(1)
        return 1000

    monkeypatch.setattr(LogNormalDistribution, "sample", always_over_cap)
    assert CappedLogNormalDistribution(90, 0.1, 150).sample() == 150
    assert len(draws) == 1 + CAPPED_LOG_NORMAL_MAX_RESAMPLES


def test_capped_log_normal_stops_resampling_under_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    """Redrawing stops at the first draw under the cap."""
    values = iter([400, 300, 120, 999])
    monkeypatch.setattr(LogNormalDistribution, "sample", lambda self: next(values))
    assert CappedLogNormalDistribution(90, 0.1, 150).sample() == 120


def test_capped_log_normal_clamps_below_fractional_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clamping to a fractional cap never exceeds it."""
    monkeypatch.setattr(LogNormalDistribution, "sample", lambda self: 11)
    assert CappedLogNormalDistribution(10, 0.1, 10.5).sample() == 10


def _registry_with(files: dict[str, str]) -> DistributionRegistry:
    registry = DistributionRegistry(InMemoryFileSource(files))
    registry.load(list(files))
    return registry


def test_file_based_delegates_to_registry_entry() -> None:
    """File based sampling returns the registry entry's sample."""
    registry = _registry_with({"d.json": '{"svc:/a": {"type": "fixed", "delayMillis": 50}}'})
    dist = FileBasedDistribution("svc:/a", registry=registry)
    assert dist.sample_many(20) == [50] * 20


def test_file_based_uses_default_registry_when_unbound() -> None:
    """Unbound file based distributions use the process-wide registry."""
    get_default_registry().load(
        ["d.json"],
        file_source=InMemoryFileSource({"d.json": '{"k": {"type": "fixed", "delayMillis": 7}}'}),
    )
    assert FileBasedDistribution("k").sample() == 7


def test_file_based_unpopulated_registry_raises_lookup_error() -> None:
    """Sampling before any load raises DistributionLookupError."""
    with pytest.raises(DistributionLookupError) as exc_info:
        FileBasedDistribution("nowhere", registry=DistributionRegistry()).sample()
    assert exc_info.value.key == "nowhere"


def test_file_based_missing_key_raises_lookup_error() -> None:
    """Sampling an undefined key raises DistributionLookupError."""
    registry = _registry_with({"d.json": '{"present": {"type": "fixed", "delayMillis": 1}}'})
    with pytest.raises(DistributionLookupError, match="absent"):
        FileBasedDistribution("absent", registry=registry).sample()


def test_file_based_follows_chained_keys() -> None:
    """A key pointing at another key resolves to the final distribution."""
    registry = _registry_with(
        {
            "d.json": """{
                "alias": {"type": "filebased", "key": "target"},
                "target": {"type": "fixed", "delayMillis": 33}
            }"""
        }
    )
    assert FileBasedDistribution("alias", registry=registry).sample() == 33


def test_file_based_cycle_is_rejected() -> None:
    """A chain that loops back on itself is a configuration error."""
    registry = _registry_with(
        {
            "d.json": """{
                "a": {"type": "filebased", "key": "b"},
                "b": {"type": "filebased", "key": "a"}
            }"""
        }
    )
    with pytest.raises(InvalidConfigurationError, match="a -> b -> a"):
        FileBasedDistribution("a", registry=registry).sample()


@pytest.mark.parametrize("key", ["", "   ", None, 5])
def test_file_based_requires_key(key) -> None:
    """File based distributions need a non-empty string key."""
    with pytest.raises(InvalidConfigurationError):
        FileBasedDistribution(key)


def test_distributions_compare_by_parameters() -> None:
    """Distributions are equal by type and parameters, not registry."""
    assert FixedDistribution(5) == FixedDistribution(5)
    assert CappedLogNormalDistribution(90, 0.1, 150) != LogNormalDistribution(90, 0.1)
    assert FileBasedDistribution("k", registry=DistributionRegistry()) == FileBasedDistribution("k")
