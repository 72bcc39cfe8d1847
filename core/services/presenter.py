# core/services/presenter.py
"""
Proyección de datos agregados -> view-model del dashboard.

No hay lógica de negocio aquí: el Aggregator calcula, esto solo da forma
(filas de tabla, contadores, ranking con barras, config del pie chart).
Cada render reemplaza por completo la sección anterior.
"""
from __future__ import annotations

from typing import Any, Optional

from core.services.aggregator import DashboardSummary

CHART_PALETTE = [
    "#4e73df", "#1cc88a", "#36b9cc", "#f6c23e", "#e74a3b",
    "#858796", "#f8f9fc", "#5a5c69", "#2e59d9", "#17a673",
]


def command_row_class(status: str) -> str:
    if "ADELANTE" in status:
        return "command-ADELANTE"
    if "ATRAS" in status:
        return "command-ATRAS"
    if status == "DETENER":
        return "command-DETENER"
    if "GIRO" in status:
        return "command-GIRO"
    return ""


def chart_colors(n: int) -> list[str]:
    return [CHART_PALETTE[i % len(CHART_PALETTE)] for i in range(n)]


def build_view_model(summary: DashboardSummary, last_update: Optional[str] = None) -> dict[str, Any]:
    rows = [
        {
            **r.to_dict(),
            "row_class": command_row_class(r.status),
        }
        for r in summary.recent
    ]

    ranking = [
        {
            "status": status,
            "count": count,
            "percentage": summary.percentages.get(status, 0.0),
            "bar_width": f"{summary.percentages.get(status, 0.0)}%",
        }
        for status, count in summary.ranking
    ]

    labels = [item["status"] for item in ranking]
    colors = chart_colors(len(labels))

    return {
        "rows": rows,
        "counters": {
            "active_devices": summary.active_devices,
            "total_commands": summary.total,
        },
        "current_status": summary.current_status,
        "ranking": ranking,
        "chart": {
            "type": "pie",
            "data": {
                "labels": labels,
                "datasets": [
                    {
                        "data": [item["count"] for item in ranking],
                        "backgroundColor": colors,
                        "hoverBackgroundColor": colors,
                        "hoverBorderColor": "rgba(234, 236, 244, 1)",
                    }
                ],
            },
        },
        "last_update": last_update,
    }


class Presenter:
    """
    Superficie de render que consume el PollLoop.
    Las implementaciones concretas: consola (management command),
    WebSocket (MonitorConsumer).
    """

    async def show_loading(self):
        pass

    async def show_error(self, message: str):
        pass

    async def render(self, view_model: dict):
        raise NotImplementedError

    async def show_notification(self, message: str, level: str = "info"):
        pass


class ConsolePresenter(Presenter):
    """Render a stdout de un BaseCommand (usa self.style del comando)."""

    def __init__(self, command):
        self.stdout = command.stdout
        self.style = command.style

    async def show_loading(self):
        self.stdout.write("Cargando registros...")

    async def show_error(self, message: str):
        self.stdout.write(self.style.ERROR(f"{message}. Intentando nuevamente..."))

    async def render(self, view_model: dict):
        counters = view_model["counters"]
        self.stdout.write(self.style.SUCCESS(
            f"[{view_model.get('last_update') or '-'}] "
            f"dispositivos={counters['active_devices']} comandos={counters['total_commands']}"
        ))
        if not view_model["rows"]:
            self.stdout.write("No hay registros disponibles")
        for row in view_model["rows"]:
            self.stdout.write(
                f"  {str(row['id']):>5}  {row['name']:<20} {row['status']:<14} {row['ip']:<16} {row['date']}"
            )
        for item in view_model["ranking"]:
            self.stdout.write(f"  {item['status']:<14} {item['count']} ({item['percentage']}%)")

    async def show_notification(self, message: str, level: str = "info"):
        styler = self.style.SUCCESS if level == "success" else self.style.WARNING
        self.stdout.write(styler(message))
