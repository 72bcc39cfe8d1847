# core/management/commands/monitor_commands.py
"""
MONITOREO EN CONSOLA
====================

Corre el mismo PollLoop que el dashboard web, pintando en stdout:
- carga inicial + intervalo fijo (--interval)
- ante error: aviso + reintento one-shot (--retry-delay)

Ctrl-C para salir. Con --once hace un solo ciclo y termina.
"""

import asyncio

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.services.poll_loop import PollLoop
from core.services.presenter import ConsolePresenter
from core.services.remote_store import RemoteStoreClient


class Command(BaseCommand):
    help = "Monitorea en tiempo real los comandos IoT del mock store"

    def add_arguments(self, parser):
        parser.add_argument("--interval", type=float, default=settings.MONITOR_POLL_INTERVAL_SECONDS)
        parser.add_argument("--retry-delay", type=float, default=settings.MONITOR_RETRY_DELAY_SECONDS)
        parser.add_argument("--limit", type=int, default=settings.MONITOR_RECENT_LIMIT)
        parser.add_argument(
            "--single-flight",
            action="store_true",
            help="Saltar ticks mientras haya un fetch en curso",
        )
        parser.add_argument("--once", action="store_true", help="Un solo ciclo y salir")

    def handle(self, *args, **options):
        if options["interval"] <= 0 or options["retry_delay"] <= 0:
            raise CommandError("--interval y --retry-delay deben ser > 0")

        poll_loop = PollLoop(
            RemoteStoreClient(),
            ConsolePresenter(self),
            interval=options["interval"],
            retry_delay=options["retry_delay"],
            recent_limit=options["limit"],
            single_flight=options["single_flight"],
        )

        if options["once"]:
            ok = asyncio.run(self._run_once(poll_loop))
            if not ok:
                raise CommandError("No se pudieron cargar los registros")
            return

        try:
            asyncio.run(self._run_forever(poll_loop))
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING("Monitoreo detenido"))

    async def _run_once(self, poll_loop: PollLoop) -> bool:
        try:
            return await poll_loop.load()
        finally:
            poll_loop.shutdown()

    async def _run_forever(self, poll_loop: PollLoop):
        poll_loop.start()
        try:
            await asyncio.Event().wait()
        finally:
            poll_loop.shutdown()
