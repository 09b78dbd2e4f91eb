"""Base sensor classes for operator monitoring.

OperatorSensor defines lifecycle hooks for trigger reconciliation. All hooks
are no-ops by default, so subclasses override only the events they care about.

- Hooks for a whole pass come in pairs: on_X_start() and on_X_complete()
- Start hooks return an optional state dict that the complete hook receives
"""

from typing import Dict, Optional, Any
import logging

logger = logging.getLogger(__name__)


class OperatorSensor:
    """Base sensor class for trigger reconciliation monitoring.

    Example:
        class LoggingSensor(OperatorSensor):
            def on_apply_start(self, function_name, namespace, item_count):
                return {'start_time': time.time()}

            def on_apply_complete(self, function_name, namespace, state, success, error=None):
                duration = time.time() - state['start_time']
                logger.info(f"Applied triggers of {function_name} in {duration}s")
    """

    # =============================================================================
    # Reconciliation Pass Hooks
    # =============================================================================

    def on_apply_start(
        self,
        function_name: str,
        namespace: str,
        item_count: int,
    ) -> Optional[Dict[str, Any]]:
        """Called when an apply pass begins.

        Args:
            function_name: Owning function name
            namespace: Kubernetes namespace
            item_count: Number of desired triggers

        Returns:
            Optional state dict passed to on_apply_complete
        """
        pass

    def on_apply_complete(
        self,
        function_name: str,
        namespace: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        """Called when an apply pass completes, successfully or not."""
        pass

    def on_delete_start(
        self,
        function_name: str,
        namespace: str,
        item_count: int,
    ) -> Optional[Dict[str, Any]]:
        """Called when a delete pass begins.

        Returns:
            Optional state dict passed to on_delete_complete
        """
        pass

    def on_delete_complete(
        self,
        function_name: str,
        namespace: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        """Called when a delete pass completes, successfully or not."""
        pass

    # =============================================================================
    # Trigger Operation Hooks
    # =============================================================================

    def on_trigger_applied(
        self,
        function_name: str,
        namespace: str,
        trigger_name: str,
        operation: str,
    ) -> None:
        """Called after a trigger is written.

        Args:
            operation: created or updated
        """
        pass

    def on_trigger_deleted(
        self,
        function_name: str,
        namespace: str,
        trigger_name: str,
        orphan: bool,
    ) -> None:
        """Called after a trigger is deleted.

        Args:
            orphan: True when removed by the orphan wipe of an apply pass
        """
        pass

    def on_wait_complete(
        self,
        function_name: str,
        namespace: str,
        trigger_name: str,
        duration: float,
        success: bool,
    ) -> None:
        """Called when the readiness wait for a trigger ends."""
        pass
