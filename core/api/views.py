# =========================
# FILE: core/api/views.py
# =========================
from __future__ import annotations

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api.serializers import CommandRecordSerializer
from core.services.aggregator import select_recent, summarize
from core.services.presenter import build_view_model
from core.services.remote_store import RemoteStoreClient, RemoteStoreError
from core.ws.events import request_refresh


def _parse_limit(value, default: int):
    if value in (None, ""):
        return default
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return "INVALID"
    return limit if limit >= 0 else "INVALID"


class StoreClientMixin:
    def get_client(self) -> RemoteStoreClient:
        return RemoteStoreClient()


class RecordsAPIView(StoreClientMixin, APIView):
    authentication_classes = []
    permission_classes = []

    def get(self, request):
        limit = _parse_limit(request.query_params.get("limit"), settings.LAST_RECORDS_LIMIT)
        if limit == "INVALID":
            return Response(
                {"detail": "limit must be a non-negative integer"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            records = self.get_client().fetch_records()
        except RemoteStoreError as e:
            return Response({"detail": str(e)}, status=status.HTTP_502_BAD_GATEWAY)

        data = CommandRecordSerializer(select_recent(records, limit), many=True).data
        return Response(data, status=status.HTTP_200_OK)

    def post(self, request):
        serializer = CommandRecordSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        ok = self.get_client().create_record(
            serializer.validated_data["name"],
            serializer.validated_data["status"],
        )
        if not ok:
            return Response(
                {"detail": "Remote store rejected the command"},
                status=status.HTTP_502_BAD_GATEWAY,
            )

        request_refresh()
        return Response({"success": True}, status=status.HTTP_201_CREATED)


class RecordDetailAPIView(StoreClientMixin, APIView):
    authentication_classes = []
    permission_classes = []

    def get(self, request, record_id: int):
        record = self.get_client().get_record(record_id)
        if record is None:
            return Response({"detail": "Record not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(CommandRecordSerializer(record).data, status=status.HTTP_200_OK)


class StatsAPIView(StoreClientMixin, APIView):
    authentication_classes = []
    permission_classes = []

    def get(self, request):
        try:
            records = self.get_client().fetch_records()
        except RemoteStoreError as e:
            return Response({"detail": str(e)}, status=status.HTTP_502_BAD_GATEWAY)

        summary = summarize(records, recent=settings.MONITOR_RECENT_LIMIT)
        last_update = timezone.localtime().strftime("%H:%M:%S")
        return Response(build_view_model(summary, last_update), status=status.HTTP_200_OK)
