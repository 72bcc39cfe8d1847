# core/urls.py
from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.command_form_view, name="command_form"),
    path("monitoring/", views.monitoring_view, name="monitoring"),
    path("monitoring/records/<int:record_id>/", views.record_detail_view, name="record_detail"),
]
