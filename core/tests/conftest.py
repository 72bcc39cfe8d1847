import asyncio

import pytest
import requests

from core.models import CommandRecord
from core.services.presenter import Presenter
from core.services.remote_store import RemoteStoreError


@pytest.fixture(autouse=True)
def in_memory_channel_layer(settings):
    settings.CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}


def make_records(*pairs):
    """make_records((1, "RobotA", "ADELANTE"), ...)"""
    return [
        CommandRecord(id=rid, name=name, status=status, ip="10.0.0.1", date="01/01/2025 10:00:00")
        for rid, name, status in pairs
    ]


# -------------------------
# HTTP fakes (requests.Session)
# -------------------------
class FakeResponse:
    def __init__(self, status_code=200, payload=None, json_error=False):
        self.status_code = status_code
        self._payload = payload
        self._json_error = json_error

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json_error:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code}")


class FakeSession:
    """
    routes: {("GET", url): FakeResponse | Exception}
    """

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    def _dispatch(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        outcome = self.routes.get((method, url))
        if outcome is None:
            return FakeResponse(404)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def get(self, url, **kwargs):
        return self._dispatch("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._dispatch("POST", url, **kwargs)


# -------------------------
# Poll loop fakes
# -------------------------
class FakeHandle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    @property
    def active(self):
        return not self.cancelled and not self.fired


class FakeTask:
    def __init__(self, coro):
        self.coro = coro
        self.result = None
        self.cancelled = False
        self._callbacks = []

    def add_done_callback(self, cb):
        self._callbacks.append(cb)

    def cancel(self):
        # si ya está corriendo, termina igual (como un fetch en otro hilo)
        self.cancelled = True

    def run(self):
        if self.cancelled:
            self.coro.close()
        else:
            self.result = asyncio.run(self.coro)
        for cb in self._callbacks:
            cb(self)
        return self.result


class FakeScheduler:
    """Reloj manual: nada corre hasta que el test dispara timers o tareas."""

    def __init__(self):
        self.timers = []
        self.tasks = []

    def call_later(self, delay, callback):
        handle = FakeHandle(delay, callback)
        self.timers.append(handle)
        return handle

    def create_task(self, coro):
        task = FakeTask(coro)
        self.tasks.append(task)
        return task

    def active_timers(self, callback=None):
        return [
            h for h in self.timers
            if h.active and (callback is None or h.callback == callback)
        ]

    def fire(self, handle):
        handle.fired = True
        handle.callback()

    def run_pending(self):
        results = []
        while self.tasks:
            results.append(self.tasks.pop(0).run())
        return results

    def close(self):
        for task in self.tasks:
            task.coro.close()
        self.tasks.clear()


class RecordingPresenter(Presenter):
    def __init__(self):
        self.events = []

    async def show_loading(self):
        self.events.append(("loading", None))

    async def show_error(self, message):
        self.events.append(("error", message))

    async def render(self, view_model):
        self.events.append(("render", view_model))

    async def show_notification(self, message, level="info"):
        self.events.append(("notification", (message, level)))

    def kinds(self):
        return [kind for kind, _ in self.events]

    @property
    def last_render(self):
        for kind, payload in reversed(self.events):
            if kind == "render":
                return payload
        return None


@pytest.fixture
def scheduler():
    s = FakeScheduler()
    yield s
    s.close()


class ScriptedClient:
    """fetch_records devuelve/lanza en orden; el último resultado se repite."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0
        self.on_fetch = None

    def fetch_records(self):
        self.calls += 1
        if self.on_fetch:
            self.on_fetch()
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def store_down():
    return RemoteStoreError("Error al cargar datos: 500", status_code=500)
