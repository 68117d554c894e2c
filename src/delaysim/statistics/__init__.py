"""Delay distributions and the descriptor factory that builds them."""

from .distributions import (
    CAPPED_LOG_NORMAL_MAX_RESAMPLES,
    CappedLogNormalDistribution,
    Distribution,
    FileBasedDistribution,
    FixedDistribution,
    LogNormalDistribution,
    UniformDistribution,
)
from .factory import DISTRIBUTION_VARIANTS, DistributionFactory

__all__ = [
    "CAPPED_LOG_NORMAL_MAX_RESAMPLES",
    "DISTRIBUTION_VARIANTS",
    "Distribution",
    "FixedDistribution",
    "UniformDistribution",
    "LogNormalDistribution",
    "CappedLogNormalDistribution",
    "FileBasedDistribution",
    "DistributionFactory",
]
