# core/services/poll_loop.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from asgiref.sync import sync_to_async
from django.conf import settings
from django.utils import timezone

from core.models import CommandRecord
from core.services.aggregator import summarize
from core.services.presenter import Presenter, build_view_model
from core.services.remote_store import RemoteStoreClient, RemoteStoreError

logger = logging.getLogger(__name__)


class PollState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    DISPLAYING = "displaying"
    ERROR_RETRY = "error_retry"


@dataclass
class DashboardState:
    """Último snapshot conocido; se sobreescribe completo en cada fetch exitoso."""

    records: list[CommandRecord] = field(default_factory=list)
    last_update: Optional[str] = None
    state: PollState = PollState.IDLE
    realtime: bool = False
    error: Optional[str] = None


class PollLoop:
    """
    Idle -> Loading -> {Displaying, ErrorRetry}

    Dos timers independientes sobre el event loop:
      - intervalo periódico (se re-arma en cada tick, sin esperar al fetch)
      - reintento one-shot tras un error

    Sin `single_flight` no hay guardia de solapamiento: si un fetch tarda más
    que el intervalo, el siguiente tick lanza otro fetch en paralelo.
    """

    def __init__(
        self,
        client: RemoteStoreClient,
        presenter: Presenter,
        *,
        state: Optional[DashboardState] = None,
        interval: Optional[float] = None,
        retry_delay: Optional[float] = None,
        recent_limit: Optional[int] = None,
        single_flight: bool = False,
        scheduler=None,
    ):
        self.client = client
        self.presenter = presenter
        self.state = state or DashboardState()
        self.interval = interval if interval is not None else settings.MONITOR_POLL_INTERVAL_SECONDS
        self.retry_delay = retry_delay if retry_delay is not None else settings.MONITOR_RETRY_DELAY_SECONDS
        self.recent_limit = recent_limit if recent_limit is not None else settings.MONITOR_RECENT_LIMIT
        self.single_flight = single_flight

        # cualquier objeto con call_later() y create_task() (asyncio loop por defecto)
        self._scheduler = scheduler
        self._interval_handle = None
        self._retry_handle = None
        self._in_flight = 0
        self._tasks: set = set()
        self._closed = False

    @property
    def scheduler(self):
        return self._scheduler or asyncio.get_running_loop()

    @property
    def is_running(self) -> bool:
        return self._interval_handle is not None

    # -------------------------
    # Timers
    # -------------------------
    def start(self):
        if self._interval_handle is not None:
            self._interval_handle.cancel()
            self._interval_handle = None

        self._closed = False
        self.state.realtime = True
        self._spawn_load()
        self._arm_interval()

    def stop(self):
        # solo cancela el intervalo; un fetch en vuelo igual termina y pinta
        if self._interval_handle is not None:
            self._interval_handle.cancel()
            self._interval_handle = None
        self.state.realtime = False

    def shutdown(self):
        # un fetch que termine después del cierre no pinta ni re-arma el reintento
        self._closed = True
        self.stop()
        self._cancel_retry()
        for task in list(self._tasks):
            task.cancel()

    async def toggle(self, enabled: bool):
        if enabled:
            self.start()
            await self.presenter.show_notification("Monitoreo en tiempo real activado", "success")
        else:
            self.stop()
            await self.presenter.show_notification("Monitoreo en tiempo real desactivado", "info")

    def _arm_interval(self):
        self._interval_handle = self.scheduler.call_later(self.interval, self._tick)

    def _tick(self):
        self._arm_interval()
        if self.single_flight and self._in_flight:
            logger.debug("Tick skipped, %s load(s) in flight", self._in_flight)
            return
        self._spawn_load()

    def _schedule_retry(self):
        if self._closed:
            return
        self._cancel_retry()
        self._retry_handle = self.scheduler.call_later(self.retry_delay, self._retry)

    def _cancel_retry(self):
        if self._retry_handle is not None:
            self._retry_handle.cancel()
            self._retry_handle = None

    def _retry(self):
        self._retry_handle = None
        self._spawn_load()

    def _spawn_load(self):
        task = self.scheduler.create_task(self.load())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # -------------------------
    # Ciclo fetch -> aggregate -> render
    # -------------------------
    async def refresh(self) -> bool:
        """Un ciclo fuera de la cadencia del timer (p.ej. tras enviar un comando)."""
        return await self.load()

    async def load(self) -> bool:
        if self._closed:
            return False

        self._in_flight += 1
        self._set_state(PollState.LOADING)
        await self.presenter.show_loading()

        try:
            records = await sync_to_async(self.client.fetch_records, thread_sensitive=False)()
        except RemoteStoreError as e:
            if self._closed:
                logger.debug("Poll cycle failed after shutdown, ignored: %s", e)
                return False
            self.state.error = str(e)
            self._set_state(PollState.ERROR_RETRY)
            logger.warning("Poll cycle failed, retrying in %ss: %s", self.retry_delay, e)
            await self.presenter.show_error("Error al cargar los datos")
            self._schedule_retry()
            return False
        finally:
            self._in_flight -= 1

        if self._closed:
            return False

        # el reintento pendiente de un fallo anterior ya no aplica
        self._cancel_retry()
        self.state.records = records
        self.state.error = None
        self.state.last_update = timezone.localtime().strftime("%H:%M:%S")

        summary = summarize(records, recent=self.recent_limit)
        self._set_state(PollState.DISPLAYING)
        await self.presenter.render(build_view_model(summary, self.state.last_update))
        self._set_state(PollState.IDLE)
        return True

    def _set_state(self, new_state: PollState):
        logger.debug("Poll state %s -> %s", self.state.state.value, new_state.value)
        self.state.state = new_state
