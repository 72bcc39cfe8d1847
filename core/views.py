# core/views.py

from django.conf import settings
from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from core.forms import CommandForm
from core.services.remote_store import RemoteStoreClient
from core.ws.events import request_refresh


def get_store_client() -> RemoteStoreClient:
    return RemoteStoreClient()


@require_http_methods(["GET", "POST"])
def command_form_view(request):
    """
    Formulario de envío + tabla de los últimos registros.

    POST válido -> create_record; si el store lo acepta se redirige (la
    tabla se vuelve a pintar) y se pide un ciclo inmediato a los dashboards
    de monitoreo abiertos. Si falla, el formulario queda intacto.
    """
    client = get_store_client()

    if request.method == "POST":
        form = CommandForm(request.POST)
        if form.is_valid():
            ok = client.create_record(form.cleaned_data["name"], form.cleaned_data["status"])
            if ok:
                messages.success(request, "Comando enviado correctamente")
                request_refresh()
                return redirect("core:command_form")
            messages.error(request, "Error al enviar el comando. Por favor, intente nuevamente.")
    else:
        form = CommandForm()

    records = client.last_records(settings.LAST_RECORDS_LIMIT)
    return render(
        request,
        "core/command_form.html",
        {
            "form": form,
            "records": records,
            "current_status": records[0].status if records else None,
            "records_limit": settings.LAST_RECORDS_LIMIT,
        },
    )


def monitoring_view(request):
    # la data llega por WebSocket; la página solo arma el esqueleto
    return render(
        request,
        "core/monitoring.html",
        {
            "poll_interval": settings.MONITOR_POLL_INTERVAL_SECONDS,
            "recent_limit": settings.MONITOR_RECENT_LIMIT,
        },
    )


def record_detail_view(request, record_id: int):
    record = get_store_client().get_record(record_id)
    if record is None:
        raise Http404("Registro no encontrado")
    return render(request, "core/record_detail.html", {"record": record})
