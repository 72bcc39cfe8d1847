# core/models/command_record.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional


def _coerce_id(value: Any) -> Optional[int]:
    # mockapi devuelve el id como string ("12")
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class CommandRecord:
    """
    Un comando enviado a un dispositivo, tal como lo guarda el mock store.

    El store asigna `id`; nosotros solo agregamos y leemos, nunca editamos
    ni borramos.
    """

    id: Optional[int]
    name: str
    status: str
    ip: str = ""
    date: str = ""

    @classmethod
    def from_api(cls, payload: dict) -> "CommandRecord":
        return cls(
            id=_coerce_id(payload.get("id")),
            name=str(payload.get("name") or ""),
            status=str(payload.get("status") or ""),
            ip=str(payload.get("ip") or ""),
            date=str(payload.get("date") or ""),
        )

    @property
    def sort_key(self) -> int:
        # registros sin id numérico quedan al final del orden descendente
        return self.id if self.id is not None else -1

    def to_dict(self) -> dict:
        return asdict(self)

    def __str__(self):
        return f"#{self.id} {self.name} → {self.status}"
