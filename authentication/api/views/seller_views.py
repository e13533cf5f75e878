from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.views import APIView

from authentication.api.serializers import SellerApplySerializer, UserSerializer
from infrastructure.container import container
from utils.responses import error_response, success_response, validation_error_response


def get_seller_service():
    return container.seller_service()


class SellerApplicationCreateView(APIView):
    """POST only - Submit seller application"""

    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ["post"]

    @extend_schema(
        operation_id="seller_application_submit",
        summary="Submit seller application",
        description="""
        Submit or resubmit an application to become a seller.

        **Requirements:**
        - User must be authenticated
        - User cannot already be an approved seller
        - Cannot have an existing pending application

        The role only changes once an admin approves the application.
        """,
        request=SellerApplySerializer,
        responses={
            200: OpenApiResponse(description="Application submitted"),
            400: OpenApiResponse(description="Validation error or requirements not met"),
        },
        tags=["Seller Applications"],
    )
    def post(self, request):
        serializer = SellerApplySerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_seller_service().submit_application(
            request.user,
            business_name=serializer.validated_data["business_name"],
            description=serializer.validated_data["description"],
        )

        if not result.success:
            message = "Something went wrong." if result.is_server_error else result.message
            return error_response(message, status=result.status_code)

        return success_response({"user": UserSerializer(result.data["user"]).data}, message=result.message)


class SellerApplicationStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(operation_id="seller_application_status", tags=["Seller Applications"])
    def get(self, request):
        return success_response(get_seller_service().get_application_status(request.user), status=status.HTTP_200_OK)
