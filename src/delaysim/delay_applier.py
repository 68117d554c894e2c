"""
Apply a mapping's configured delay to a response.

Samples the mapping's distribution once per request, records the delay as
an OpenTelemetry histogram and sleeps for it. Metrics go to the global
meter provider unless one is injected; without an SDK configured they are
no-ops.
"""

import logging
import time
from collections.abc import Callable

from opentelemetry import metrics
from opentelemetry.metrics import MeterProvider

from .config import metric_name
from .errors import DistributionLookupError
from .validators.consistency_checker import DelayedMapping

logger = logging.getLogger(__name__)


class DelayApplier:
    """Sample, record and sleep for per-request response delays."""

    def __init__(
        self,
        meter_provider: MeterProvider | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.meter = metrics.get_meter(__name__, meter_provider=meter_provider)
        self.sleep = sleep
        self.delay_histogram = self.meter.create_histogram(
            metric_name("response.delay"),
            description="Artificial response delay applied per request",
            unit="ms",
        )
        self.lookup_failures = self.meter.create_counter(
            metric_name("delay.lookup_failures"),
            description="Requests whose file based delay key was not defined",
            unit="1",
        )

    def delay_for(self, mapping: DelayedMapping) -> int:
        """Sample the mapping's delay in milliseconds; 0 when none is configured."""
        distribution = mapping.delay_distribution
        if distribution is None:
            return 0
        return distribution.sample()

    def apply(self, mapping: DelayedMapping) -> int:
        """
        Sample the delay, record it and sleep for it.

        :return: The applied delay in milliseconds.
        :raises DistributionLookupError: if a file-based key is not defined.
        """
        name = getattr(mapping, "name", "")
        try:
            delay_ms = self.delay_for(mapping)
        except DistributionLookupError as e:
            self.lookup_failures.add(1, {metric_name("mapping"): name})
            logger.error("Mapping %s: %s", name, e)
            raise

        distribution = mapping.delay_distribution
        type_name = distribution.type_name if distribution is not None else "none"
        self.delay_histogram.record(
            delay_ms,
            {metric_name("mapping"): name, metric_name("distribution.type"): type_name},
        )
        if delay_ms > 0:
            logger.debug("Mapping %s: delaying response by %d ms", name, delay_ms)
            self.sleep(delay_ms / 1000.0)
        return delay_ms
