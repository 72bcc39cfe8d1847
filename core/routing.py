# core/routing.py
from django.urls import path
from core.ws.consumers import MonitorConsumer

websocket_urlpatterns = [
    path("ws/monitoring/", MonitorConsumer.as_asgi()),
]
