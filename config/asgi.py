# config/asgi.py
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

from django.core.asgi import get_asgi_application
from channels.routing import ProtocolTypeRouter, URLRouter
from channels.security.websocket import AllowedHostsOriginValidator

django_asgi_app = get_asgi_application()  # <-- esto ejecuta django.setup()

import core.routing  # <-- IMPORT DESPUÉS del setup

# Sin auth: el dashboard es público (no hay usuarios ni sesiones)
application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": AllowedHostsOriginValidator(
            URLRouter(core.routing.websocket_urlpatterns)
        ),
    }
)
