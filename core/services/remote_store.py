# core/services/remote_store.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

import requests
from django.conf import settings

from core.models import CommandRecord
from core.services.aggregator import select_recent

logger = logging.getLogger(__name__)


class RemoteStoreError(Exception):
    """
    Falla de transporte o respuesta no-2xx del mock store.
    `status_code` es None cuando ni siquiera hubo respuesta (timeout, DNS, etc).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def mexico_city_now(now: Optional[datetime] = None) -> str:
    """
    Fecha/hora actual como "DD/MM/YYYY HH:MM:SS" en la zona configurada
    (America/Mexico_City por defecto).
    """
    tz = ZoneInfo(getattr(settings, "COMMANDS_TIME_ZONE", "America/Mexico_City"))
    current = now.astimezone(tz) if now else datetime.now(tz)
    return current.strftime("%d/%m/%Y %H:%M:%S")


class RemoteStoreClient:
    """
    Cliente del recurso REST `dispositivos_IoT`.

      - create_record: nunca lanza, devuelve bool
      - fetch_records: lanza RemoteStoreError (lo usa el poll loop)
      - list_records:  lista vacía ante cualquier error (tabla "últimos 5")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        ip_lookup_url: Optional[str] = None,
        fallback_ip: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.REMOTE_STORE_URL).rstrip("/")
        self.ip_lookup_url = ip_lookup_url or settings.IP_LOOKUP_URL
        self.fallback_ip = fallback_ip or settings.FALLBACK_CLIENT_IP
        self.timeout = timeout if timeout is not None else settings.REMOTE_STORE_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    # -------------------------
    # IP pública
    # -------------------------
    def resolve_client_ip(self) -> str:
        try:
            resp = self.session.get(self.ip_lookup_url, timeout=self.timeout)
            resp.raise_for_status()
            ip = (resp.json().get("ip") or "").strip()
        except (requests.RequestException, ValueError, AttributeError) as e:
            logger.warning("IP lookup failed, using fallback %s: %s", self.fallback_ip, e)
            return self.fallback_ip
        return ip or self.fallback_ip

    # -------------------------
    # Escritura
    # -------------------------
    def create_record(self, name: str, status: str) -> bool:
        payload = {
            "name": name,
            "status": status,
            "ip": self.resolve_client_ip(),
            "date": mexico_city_now(),
        }
        try:
            resp = self.session.post(self.base_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("create_record transport error: %s", e)
            return False

        if not resp.ok:
            logger.warning("create_record rejected: status=%s", resp.status_code)
            return False

        logger.info("Record created: name=%s status=%s ip=%s", name, status, payload["ip"])
        return True

    # -------------------------
    # Lectura
    # -------------------------
    def fetch_records(self) -> list[CommandRecord]:
        try:
            resp = self.session.get(self.base_url, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteStoreError(f"Error de red al cargar registros: {e}") from e

        if not resp.ok:
            raise RemoteStoreError(
                f"Error al cargar datos: {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteStoreError("Respuesta no es JSON", status_code=resp.status_code) from e

        if not isinstance(data, list):
            raise RemoteStoreError("Se esperaba una lista de registros", status_code=resp.status_code)

        return [CommandRecord.from_api(item) for item in data if isinstance(item, dict)]

    def list_records(self) -> list[CommandRecord]:
        try:
            return self.fetch_records()
        except RemoteStoreError as e:
            logger.warning("list_records failed: %s", e)
            return []

    def last_records(self, n: Optional[int] = None) -> list[CommandRecord]:
        limit = n if n is not None else settings.LAST_RECORDS_LIMIT
        return select_recent(self.list_records(), limit)

    def get_record(self, record_id: int) -> Optional[CommandRecord]:
        try:
            resp = self.session.get(f"{self.base_url}/{record_id}", timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("get_record(%s) transport error: %s", record_id, e)
            return None

        if resp.status_code == 404:
            return None
        if not resp.ok:
            logger.warning("get_record(%s) failed: status=%s", record_id, resp.status_code)
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.warning("get_record(%s) returned non-JSON body", record_id)
            return None
        return CommandRecord.from_api(data) if isinstance(data, dict) else None
