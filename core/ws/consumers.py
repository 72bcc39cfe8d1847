# core/ws/consumers.py
import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from core.services.poll_loop import PollLoop
from core.services.presenter import Presenter
from core.services.remote_store import RemoteStoreClient
from core.ws.events import MONITORING_GROUP

logger = logging.getLogger(__name__)


class MonitorConsumer(AsyncJsonWebsocketConsumer, Presenter):
    """
    Un PollLoop por conexión; el consumer hace de Presenter y empuja
    frames JSON (loading / error / render / notification) al navegador.
    """

    client_factory = RemoteStoreClient

    async def connect(self):
        self.poll_loop = PollLoop(self.client_factory(), self)

        await self.channel_layer.group_add(MONITORING_GROUP, self.channel_name)
        await self.accept()
        await self.send_json({"type": "ws_connected"})

        # carga inicial + intervalo
        self.poll_loop.start()

    async def disconnect(self, close_code):
        if hasattr(self, "poll_loop"):
            self.poll_loop.shutdown()
        await self.channel_layer.group_discard(MONITORING_GROUP, self.channel_name)

    @classmethod
    async def decode_json(cls, text_data):
        # texto que no es JSON llega como None y se responde con un frame de error
        try:
            return await super().decode_json(text_data)
        except ValueError:
            return None

    async def receive_json(self, content, **kwargs):
        if not isinstance(content, dict):
            logger.info("MonitorConsumer: non-object frame %r", content)
            await self.send_json({"type": "error", "detail": "Invalid message: expected a JSON object"})
            return

        msg_type = content.get("type")
        if msg_type == "toggle":
            await self.poll_loop.toggle(bool(content.get("enabled")))
        elif msg_type == "refresh":
            await self.poll_loop.refresh()
        else:
            logger.info("MonitorConsumer: unknown message type %r", msg_type)
            await self.send_json({"type": "error", "detail": f"Unknown message type: {msg_type}"})

    async def monitor_event(self, event):
        payload = event["payload"]
        if payload.get("type") == "refresh":
            await self.poll_loop.refresh()
        else:
            await self.send_json(payload)

    # -------------------------
    # Presenter
    # -------------------------
    async def show_loading(self):
        await self.send_json({"type": "loading"})

    async def show_error(self, message: str):
        await self.send_json({"type": "error", "detail": message})

    async def render(self, view_model: dict):
        await self.send_json({"type": "render", "data": view_model})

    async def show_notification(self, message: str, level: str = "info"):
        await self.send_json({"type": "notification", "message": message, "level": level})
