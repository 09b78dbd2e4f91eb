import kopf
import logging
import fntriggers.handlers.function as function
import fntriggers.handlers.probes as probes
from fntriggers.types.settings import Settings
from fntriggers.resources import FunctionTriggers, TriggerClient
from fntriggers.operator import TriggersOperator
from fntriggers.sensors import init_metrics_server, SensorDelegate, PrometheusMonitor
from kubernetes_asyncio import config
from kubernetes_asyncio.client.api_client import ApiClient


@kopf.on.startup()
async def setup(
    settings: kopf.OperatorSettings, memo: kopf.Memo, logger: logging.Logger, **kwargs
):
    # Load Kubernetes config - try in-cluster first (for production), then local kubeconfig (for dev)
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        logger.info("In-cluster config not found, trying local kubeconfig")
        try:
            await config.load_kube_config()
            logger.info("Loaded local Kubernetes configuration")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise

    memo.conf = Settings()
    TriggerClient.conf = memo.conf
    FunctionTriggers.conf = memo.conf

    # One ApiClient for every trigger client to prevent connection leaks
    TriggerClient.shared_api_client = ApiClient()
    logger.info("Shared Kubernetes API client initialized")

    sensor_delegate = SensorDelegate()
    sensor_delegate.add(PrometheusMonitor())
    memo.sensor = sensor_delegate
    TriggersOperator.sensor = sensor_delegate
    logger.info("Sensor infrastructure initialized with PrometheusMonitor")

    try:
        init_metrics_server(memo.conf.metrics_port)
    except Exception as e:
        logger.error(f"Failed to start metrics server: {e}")
        logger.warning("Continuing without metrics server")

    if memo.conf.wait_for_apply:
        logger.info(
            f"Waiting for applied triggers (timeout: {memo.conf.wait_timeout or 'none'})"
        )

    settings.batching.worker_limit = 2

    # Post events to the Kubernetes API for Warning and above
    settings.posting.enabled = True
    settings.posting.level = logging.WARNING


@kopf.on.cleanup()
async def cleanup(logger: logging.Logger, **kwargs):
    """Cleanup handler for operator shutdown."""
    logger.info("Shutting down operator...")

    if TriggerClient.shared_api_client:
        await TriggerClient.shared_api_client.close()
        TriggerClient.shared_api_client = None
        logger.info("Shared API client closed")

    logger.info("Operator shutdown complete")


__all__ = [
    "function",
    "probes",
]
