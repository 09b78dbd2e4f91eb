"""Function Triggers Operator Sensor Framework.

Non-invasive instrumentation of trigger reconciliation through lifecycle
hooks.

Key components:
- OperatorSensor: Base class defining the lifecycle hooks
- SensorDelegate: Fan-out of events to multiple sensor backends
- PrometheusMonitor: Prometheus metrics exporter

Usage:
    from fntriggers.sensors import SensorDelegate, PrometheusMonitor

    delegate = SensorDelegate()
    delegate.add(PrometheusMonitor())
    TriggersOperator.sensor = delegate
"""

from fntriggers.sensors.base import OperatorSensor
from fntriggers.sensors.delegate import SensorDelegate
from fntriggers.sensors.prometheus import PrometheusMonitor
from fntriggers.sensors.server import init_metrics_server

__all__ = [
    'OperatorSensor',
    'SensorDelegate',
    'PrometheusMonitor',
    'init_metrics_server',
]
