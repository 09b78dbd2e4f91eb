"""Prometheus monitoring backend.

PrometheusMonitor turns trigger reconciliation events into Prometheus metrics:

1. Pass health - duration, totals and errors of apply/delete passes
2. Trigger operations - created, updated and deleted triggers, orphans
3. Readiness waits - how long applied triggers take to be observed
"""

from typing import Dict, Optional, Any
import time
import logging

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from fntriggers.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class PrometheusMonitor(OperatorSensor):
    """Prometheus metrics monitor.

    Metrics are registered on `registry` (the process default registry unless
    given) and exposed by the metrics server.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        super().__init__()

        self.pass_duration = Histogram(
            'fntriggers_pass_duration_seconds',
            'Time spent in an apply or delete pass',
            labelnames=['function_name', 'namespace', 'pass_type', 'result'],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
            registry=registry,
        )

        self.pass_total = Counter(
            'fntriggers_pass_total',
            'Total number of apply and delete passes',
            labelnames=['function_name', 'namespace', 'pass_type', 'result'],
            registry=registry,
        )

        self.pass_errors = Counter(
            'fntriggers_pass_errors_total',
            'Total number of failed passes by error type',
            labelnames=['function_name', 'namespace', 'pass_type', 'error_type'],
            registry=registry,
        )

        self.triggers_applied = Counter(
            'fntriggers_triggers_applied_total',
            'Total number of triggers written',
            labelnames=['function_name', 'namespace', 'operation'],
            registry=registry,
        )

        self.triggers_deleted = Counter(
            'fntriggers_triggers_deleted_total',
            'Total number of triggers deleted',
            labelnames=['function_name', 'namespace', 'reason'],
            registry=registry,
        )

        self.wait_duration = Histogram(
            'fntriggers_wait_duration_seconds',
            'Time until an applied trigger was observed',
            labelnames=['function_name', 'namespace', 'result'],
            buckets=[0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=registry,
        )

        logger.info("PrometheusMonitor initialized with all metrics")

    def _record_pass(
        self,
        pass_type: str,
        function_name: str,
        namespace: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception],
    ) -> None:
        result = 'success' if success else 'failure'
        if state:
            self.pass_duration.labels(
                function_name=function_name,
                namespace=namespace,
                pass_type=pass_type,
                result=result,
            ).observe(time.time() - state['start_time'])

        self.pass_total.labels(
            function_name=function_name,
            namespace=namespace,
            pass_type=pass_type,
            result=result,
        ).inc()

        if error:
            self.pass_errors.labels(
                function_name=function_name,
                namespace=namespace,
                pass_type=pass_type,
                error_type=error.__class__.__name__,
            ).inc()

    def on_apply_start(
        self, function_name: str, namespace: str, item_count: int
    ) -> Optional[Dict[str, Any]]:
        return {'start_time': time.time()}

    def on_apply_complete(
        self,
        function_name: str,
        namespace: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        self._record_pass('apply', function_name, namespace, state, success, error)

    def on_delete_start(
        self, function_name: str, namespace: str, item_count: int
    ) -> Optional[Dict[str, Any]]:
        return {'start_time': time.time()}

    def on_delete_complete(
        self,
        function_name: str,
        namespace: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        self._record_pass('delete', function_name, namespace, state, success, error)

    def on_trigger_applied(
        self, function_name: str, namespace: str, trigger_name: str, operation: str
    ) -> None:
        self.triggers_applied.labels(
            function_name=function_name,
            namespace=namespace,
            operation=operation,
        ).inc()

    def on_trigger_deleted(
        self, function_name: str, namespace: str, trigger_name: str, orphan: bool
    ) -> None:
        self.triggers_deleted.labels(
            function_name=function_name,
            namespace=namespace,
            reason='orphan' if orphan else 'function_deleted',
        ).inc()

    def on_wait_complete(
        self,
        function_name: str,
        namespace: str,
        trigger_name: str,
        duration: float,
        success: bool,
    ) -> None:
        self.wait_duration.labels(
            function_name=function_name,
            namespace=namespace,
            result='success' if success else 'failure',
        ).observe(duration)
