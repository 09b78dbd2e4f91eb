import datetime
import kopf
from fntriggers.resources import TriggerClient


# Liveness probe
@kopf.on.probe(id='now')
def get_current_timestamp(**kwargs):
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


@kopf.on.probe(id='apiClient')
def get_api_client_ready(**kwargs):
    return TriggerClient.shared_api_client is not None
