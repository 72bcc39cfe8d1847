from django.contrib.staticfiles.urls import staticfiles_urlpatterns
from django.conf import settings
from django.urls import include, path
from core.api.views import (
    RecordsAPIView,
    RecordDetailAPIView,
    StatsAPIView,
)

urlpatterns = [
    path("", include("core.urls")),

    path("api/records/", RecordsAPIView.as_view(), name="api-records"),
    path("api/records/<int:record_id>/", RecordDetailAPIView.as_view(), name="api-record-detail"),
    path("api/stats/", StatsAPIView.as_view(), name="api-stats"),
]

if settings.DEBUG:
        urlpatterns += staticfiles_urlpatterns()
