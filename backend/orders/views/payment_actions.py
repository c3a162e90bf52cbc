from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.services import BillSplitService
from payments.serializers import (
    PaymentSerializer,
    PayRequestSerializer,
    SplitPreviewSerializer,
)
from payments.services import SettlementService


class PaymentActionsMixin:
    """
    Mixin for settlement and bill splitting.

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["post"], url_path="pay")
    def pay(self, request: Request, pk=None, **kwargs) -> Response:
        """Captures one payment against the order."""
        return self._settle(request, pk)

    @action(detail=True, methods=["get", "post"], url_path="split-payment")
    def split_payment(self, request: Request, pk=None, **kwargs) -> Response:
        """
        GET   -> payment summary for the order
        POST  -> {"action": "pay", ...} settles one share,
                 otherwise a split preview ({"type": ...})
        """
        if request.method == "GET":
            result = SettlementService.get_payment_summary(request.tenant, pk)
            return Response(
                {
                    "order_id": str(result["order"].id),
                    "order_number": result["order"].order_number,
                    "status": result["order"].status,
                    "total_cents": result["order"].total_cents,
                    "tip_cents": result["order"].tip_cents,
                    "amount_due_cents": result["order"].amount_due_cents,
                    "payments": PaymentSerializer(result["payments"], many=True).data,
                    **result["summary"],
                }
            )

        if request.data.get("action") == "pay":
            return self._settle(request, pk)

        serializer = SplitPreviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        preview = BillSplitService.preview(
            request.tenant,
            pk,
            data["type"],
            number_of_splits=data.get("number_of_splits"),
            amounts=data.get("amounts"),
            items=data.get("items"),
            labels=data.get("labels"),
        )
        return Response(preview)

    def _settle(self, request: Request, pk) -> Response:
        serializer = PayRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = SettlementService.pay(
            request.tenant,
            pk,
            provider=data["provider"],
            amount_cents=data.get("amount_cents"),
            tip_cents=data.get("tip_cents", 0),
            split_index=data.get("split_index"),
            processed_by=request.user,
        )
        result["order"] = self._order_payload(pk)
        return Response(result, status=status.HTTP_201_CREATED)
