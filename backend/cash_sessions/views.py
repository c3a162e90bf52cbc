from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from core_backend.base.mixins import TenantScopedQuerysetMixin
from users.permissions import IsTenantStaff
from .models import CashSession
from .serializers import (
    CashSessionSerializer,
    OpenCashSessionSerializer,
    CloseCashSessionSerializer,
)
from .services import CashSessionService


class CashSessionViewSet(TenantScopedQuerysetMixin, BaseViewSet):
    """
    Cash drawer sessions.

    POST opens a session, PATCH on a session closes it; sessions are
    otherwise immutable.
    """

    queryset = CashSession.objects.all()
    serializer_class = CashSessionSerializer
    permission_classes = [IsTenantStaff]
    http_method_names = ["get", "post", "patch", "head", "options"]
    filterset_fields = {
        "status": ["exact"],
        "opened_at": ["gte", "lte"],
    }
    ordering_fields = ["opened_at", "closed_at"]
    ordering = ["-opened_at"]

    def get_serializer_class(self):
        if self.action == "create":
            return OpenCashSessionSerializer
        if self.action == "partial_update":
            return CloseCashSessionSerializer
        return CashSessionSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = CashSessionService.open_session(
            request.tenant,
            serializer.validated_data["opening_cash_cents"],
            opened_by=request.user,
            notes=serializer.validated_data.get("notes", ""),
        )
        return Response(self._session_payload(session), status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = CashSessionService.close_session(
            request.tenant,
            self.kwargs["pk"],
            serializer.validated_data["closing_cash_cents"],
            closed_by=request.user,
            closing_notes=serializer.validated_data.get("closing_notes", ""),
        )
        return Response(self._session_payload(session))

    @action(detail=False, methods=["get"], url_path="current")
    def current(self, request, **kwargs):
        """The tenant's OPEN session, or null."""
        session = CashSessionService.get_current_session(request.tenant)
        return Response(self._session_payload(session) if session else None)

    def _session_payload(self, session):
        return CashSessionSerializer(session, context=self.get_serializer_context()).data
