"""Sensor delegation for fan-out pattern.

SensorDelegate routes sensor events to several monitoring backends at once.
Each backend receives the same events and keeps its own state. A failing
backend is logged and never breaks reconciliation or the other backends.
"""

from typing import Set, Dict, Optional, Any
import logging

from fntriggers.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class SensorDelegate(OperatorSensor):
    """Delegate sensor that fans out events to multiple backends.

    Example:
        delegate = SensorDelegate()
        delegate.add(LoggingSensor())
        delegate.add(PrometheusMonitor())

        state = delegate.on_apply_start("my-fn", "default", 2)
        delegate.on_apply_complete("my-fn", "default", state, True)
    """

    def __init__(self) -> None:
        self._sensors: Set[OperatorSensor] = set()

    def add(self, sensor: OperatorSensor) -> None:
        logger.info(f"Adding sensor: {sensor.__class__.__name__}")
        self._sensors.add(sensor)

    def remove(self, sensor: OperatorSensor) -> None:
        logger.info(f"Removing sensor: {sensor.__class__.__name__}")
        self._sensors.discard(sensor)

    def clear(self) -> None:
        logger.info(f"Clearing {len(self._sensors)} sensors")
        self._sensors.clear()

    def _start(self, hook: str, *args: Any) -> Optional[Dict[OperatorSensor, Any]]:
        if not self._sensors:
            return None

        states = {}
        for sensor in self._sensors:
            try:
                state = getattr(sensor, hook)(*args)
                if state is not None:
                    states[sensor] = state
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )
        return states if states else None

    def _complete(
        self,
        hook: str,
        function_name: str,
        namespace: str,
        state: Optional[Dict[OperatorSensor, Any]],
        success: bool,
        error: Optional[Exception],
    ) -> None:
        for sensor in self._sensors:
            try:
                sensor_state = state.get(sensor) if state else None
                getattr(sensor, hook)(function_name, namespace, sensor_state, success, error)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )

    def _fan_out(self, hook: str, *args: Any, **kwargs: Any) -> None:
        for sensor in self._sensors:
            try:
                getattr(sensor, hook)(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )

    # =============================================================================
    # Reconciliation Pass Hooks
    # =============================================================================

    def on_apply_start(self, function_name: str, namespace: str, item_count: int):
        return self._start("on_apply_start", function_name, namespace, item_count)

    def on_apply_complete(
        self,
        function_name: str,
        namespace: str,
        state: Optional[Dict[OperatorSensor, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        self._complete("on_apply_complete", function_name, namespace, state, success, error)

    def on_delete_start(self, function_name: str, namespace: str, item_count: int):
        return self._start("on_delete_start", function_name, namespace, item_count)

    def on_delete_complete(
        self,
        function_name: str,
        namespace: str,
        state: Optional[Dict[OperatorSensor, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        self._complete("on_delete_complete", function_name, namespace, state, success, error)

    # =============================================================================
    # Trigger Operation Hooks
    # =============================================================================

    def on_trigger_applied(
        self, function_name: str, namespace: str, trigger_name: str, operation: str
    ) -> None:
        self._fan_out("on_trigger_applied", function_name, namespace, trigger_name, operation)

    def on_trigger_deleted(
        self, function_name: str, namespace: str, trigger_name: str, orphan: bool
    ) -> None:
        self._fan_out(
            "on_trigger_deleted", function_name, namespace, trigger_name, orphan=orphan
        )

    def on_wait_complete(
        self,
        function_name: str,
        namespace: str,
        trigger_name: str,
        duration: float,
        success: bool,
    ) -> None:
        self._fan_out(
            "on_wait_complete", function_name, namespace, trigger_name, duration, success
        )
