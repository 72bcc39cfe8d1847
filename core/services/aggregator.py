# core/services/aggregator.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from core.models import CommandRecord


def select_recent(records: Iterable[CommandRecord], n: int) -> list[CommandRecord]:
    """Ordena por id descendente (id más alto = más reciente) y toma los primeros n."""
    if n <= 0:
        return []
    return sorted(records, key=lambda r: r.sort_key, reverse=True)[:n]


def count_by_status(records: Iterable[CommandRecord]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for r in records:
        counts[r.status] = counts.get(r.status, 0) + 1
    return counts


def percentages(counts: dict[str, int], total: int) -> dict[str, float]:
    if total <= 0:
        return {}
    return {status: round(count / total * 100, 1) for status, count in counts.items()}


def ranked_counts(counts: dict[str, int]) -> list[tuple[str, int]]:
    # mayor frecuencia primero; empates por nombre de comando
    return sorted(counts.items(), key=lambda x: (-x[1], x[0]))


def unique_device_count(records: Iterable[CommandRecord]) -> int:
    return len({r.name for r in records})


@dataclass
class DashboardSummary:
    recent: list[CommandRecord] = field(default_factory=list)
    total: int = 0
    active_devices: int = 0
    counts: dict[str, int] = field(default_factory=dict)
    percentages: dict[str, float] = field(default_factory=dict)
    ranking: list[tuple[str, int]] = field(default_factory=list)

    @property
    def current_status(self) -> str | None:
        return self.recent[0].status if self.recent else None


def summarize(records: list[CommandRecord], recent: int = 10) -> DashboardSummary:
    """
    Todo lo que necesita el dashboard en una pasada.
    Conteos y porcentajes sobre el set completo; `recent` solo limita la tabla.
    """
    counts = count_by_status(records)
    total = len(records)
    return DashboardSummary(
        recent=select_recent(records, recent),
        total=total,
        active_devices=unique_device_count(records),
        counts=counts,
        percentages=percentages(counts, total),
        ranking=ranked_counts(counts),
    )
