# core/ws/events.py
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

MONITORING_GROUP = "monitoring"


def notify_monitors(payload: dict) -> bool:
    """
    Envía un evento a todos los dashboards de monitoreo conectados.
    El consumer espera type="monitor_event" y payload={...}.

    Best-effort: si el channel layer no está disponible se loguea y se
    devuelve False; el envío del comando ya quedó hecho.
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return False
    try:
        async_to_sync(channel_layer.group_send)(
            MONITORING_GROUP,
            {
                "type": "monitor_event",
                "payload": payload,
            },
        )
    except Exception as e:
        logger.warning("notify_monitors failed: %s", e)
        return False
    return True


def request_refresh() -> bool:
    return notify_monitors({"type": "refresh"})
