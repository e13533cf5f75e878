from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.views import APIView

from authentication.api.serializers import UserSerializer
from authentication.permissions import AdminRequired
from infrastructure.container import container
from marketplace.catalog.api.serializers import FlaggedProductSerializer, SellerProductSerializer
from marketplace.moderation.api.serializers import (
    FlagProductSerializer,
    PendingSellerSerializer,
    ReviewSellerSerializer,
)
from marketplace.services import http_status_for
from utils.responses import result_error_response, success_response, validation_error_response


def get_moderation_service():
    return container.moderation_service()


class AdminAPIView(APIView):
    permission_classes = [AdminRequired]


class AnalyticsView(AdminAPIView):
    @extend_schema(
        operation_id="admin_analytics",
        summary="Platform counters",
        description="Total users, sellers, active products and flagged products.",
        tags=["Admin"],
    )
    def get(self, request):
        result = get_moderation_service().analytics()
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))
        return success_response({"analytics": result.value})


class PendingSellersView(AdminAPIView):
    @extend_schema(
        operation_id="admin_pending_sellers",
        summary="Seller applications waiting for review",
        responses={200: OpenApiResponse(response=PendingSellerSerializer(many=True))},
        tags=["Admin"],
    )
    def get(self, request):
        applications = get_moderation_service().pending_sellers()
        return success_response({"sellers": PendingSellerSerializer(applications, many=True).data})


class FlaggedProductsView(AdminAPIView):
    @extend_schema(
        operation_id="admin_flagged_products",
        summary="Products flagged by trust scoring or by an admin",
        responses={200: OpenApiResponse(response=FlaggedProductSerializer(many=True))},
        tags=["Admin"],
    )
    def get(self, request):
        products = get_moderation_service().flagged_products()
        return success_response({"products": FlaggedProductSerializer(products, many=True).data})


class ReviewSellerView(AdminAPIView):
    @extend_schema(
        operation_id="admin_review_seller",
        summary="Approve or reject a seller application",
        description="""
        **approve** grants the seller role.
        **reject** records the reason; the applicant may apply again.
        """,
        request=ReviewSellerSerializer,
        responses={
            200: OpenApiResponse(description="Application reviewed"),
            400: OpenApiResponse(description="Validation failed"),
            404: OpenApiResponse(description="Seller not found"),
        },
        tags=["Admin"],
    )
    def post(self, request):
        serializer = ReviewSellerSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = get_moderation_service().review_seller(
            request.user, data["seller_id"], data["action"], data.get("reason")
        )
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        message = "Seller approved" if data["action"] == "approve" else "Seller application rejected"
        return success_response({"user": UserSerializer(result.value).data}, message=message)


class FlagProductView(AdminAPIView):
    @extend_schema(
        operation_id="admin_flag_product",
        summary="Flag a product for fraud",
        request=FlagProductSerializer,
        responses={404: OpenApiResponse(description="Product not found")},
        tags=["Admin"],
    )
    def post(self, request):
        serializer = FlagProductSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_moderation_service().flag_product(
            request.user, serializer.validated_data["product_id"], serializer.validated_data["reason"]
        )
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response({"product": FlaggedProductSerializer(result.value).data}, message="Product flagged")


class ReverifyProductView(AdminAPIView):
    @extend_schema(
        operation_id="admin_reverify_product",
        summary="Run trust scoring again",
        description="Stores the fresh analysis. `degraded` is true when no AI provider answered.",
        tags=["Admin"],
    )
    def post(self, request, product_id):
        result = get_moderation_service().reverify_product(product_id)
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response(
            {"product": SellerProductSerializer(result.value["product"]).data, "degraded": result.value["degraded"]},
            message="Product re-verified",
        )
