import uuid

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.views import APIView

from authentication.permissions import ApprovedSellerRequired
from infrastructure.container import container
from marketplace.catalog.api.serializers import (
    ProductCompareItemSerializer,
    ProductCompareSerializer,
    ProductCreateSerializer,
    ProductDetailSerializer,
    ProductListQuerySerializer,
    ProductListSerializer,
    ProductUpdateSerializer,
    ReviewSerializer,
    SellerProductSerializer,
)
from marketplace.services import http_status_for
from utils.exceptions import APIError
from utils.rbac import is_owner_or_admin
from utils.responses import result_error_response, success_response, validation_error_response


def get_catalog_service():
    return container.catalog_service()


def _parse_product_id(key):
    try:
        return uuid.UUID(str(key))
    except ValueError:
        raise APIError("Product not found", status_code=status.HTTP_404_NOT_FOUND) from None


def _product_payload(product, user):
    # Owners and admins get trust analysis and status history
    if user.is_authenticated and is_owner_or_admin(user, product.seller_id):
        return SellerProductSerializer(product).data
    return ProductDetailSerializer(product).data


class ProductListCreateView(APIView):
    """GET public listing, POST create a listing (approved sellers)"""

    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_permissions(self):
        if self.request.method == "POST":
            return [ApprovedSellerRequired()]
        return [permissions.AllowAny()]

    @extend_schema(
        operation_id="products_list",
        summary="Browse active products",
        description="""
        Only active, published products are listed.

        **Sort keys:** newest (default), price_asc, price_desc, rating, trending.
        `limit` defaults to 10 and is clamped to 50.
        """,
        parameters=[ProductListQuerySerializer],
        responses={200: OpenApiResponse(response=ProductListSerializer(many=True), description="Products page")},
        tags=["Marketplace - Products"],
    )
    def get(self, request):
        result = get_catalog_service().list_products(request.query_params)
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        page = result.value
        return success_response(
            {
                "products": ProductListSerializer(page["products"], many=True).data,
                "total": page["total"],
                "page": page["page"],
                "limit": page["limit"],
            }
        )

    @extend_schema(
        operation_id="products_create",
        summary="Create a listing",
        description="""
        Accepts JSON or multipart. Multipart requests may carry `images` (up to
        5, first is primary) and a `digital_file`, which makes the listing
        digital. JSON-like fields (tags, physical_details, digital_details) may
        be sent as JSON strings in multipart bodies.

        The listing is scored for fraud before the response; its status is
        active, pending or rejected depending on the verdict.
        """,
        request=ProductCreateSerializer,
        responses={
            201: OpenApiResponse(response=SellerProductSerializer, description="Listing created"),
            400: OpenApiResponse(description="Validation failed"),
            403: OpenApiResponse(description="Seller account not approved"),
        },
        tags=["Marketplace - Products"],
    )
    def post(self, request):
        serializer = ProductCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_catalog_service().create_product(
            request.user,
            serializer.validated_data,
            images=request.FILES.getlist("images"),
            digital_file=request.FILES.get("digital_file"),
        )
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response(
            {"product": SellerProductSerializer(result.value).data},
            message="Product created",
            status=status.HTTP_201_CREATED,
        )


class MyProductsView(APIView):
    permission_classes = [ApprovedSellerRequired]

    @extend_schema(
        operation_id="products_mine",
        summary="The current seller's listings in every status",
        parameters=[
            OpenApiParameter(name="status", type=str, description="Filter by listing status"),
            OpenApiParameter(name="page", type=int),
            OpenApiParameter(name="limit", type=int, description="Default 20"),
        ],
        tags=["Marketplace - Products"],
    )
    def get(self, request):
        result = get_catalog_service().list_my_products(
            request.user,
            status=request.query_params.get("status"),
            page=request.query_params.get("page"),
            limit=request.query_params.get("limit"),
        )
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        page = result.value
        return success_response(
            {
                "products": SellerProductSerializer(page["products"], many=True).data,
                "total": page["total"],
                "page": page["page"],
                "limit": page["limit"],
            }
        )


class ProductDetailView(APIView):
    """
    GET /products/{slug} is public and counts a view.
    PUT and DELETE /products/{id} are for the owner or an admin.
    """

    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_permissions(self):
        if self.request.method == "GET":
            return [permissions.AllowAny()]
        return [ApprovedSellerRequired()]

    @extend_schema(
        operation_id="products_retrieve",
        summary="Product page by slug with approved reviews",
        responses={
            200: OpenApiResponse(response=ProductDetailSerializer, description="Product retrieved"),
            404: OpenApiResponse(description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def get(self, request, key):
        result = get_catalog_service().get_product(key)
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response(
            {
                "product": _product_payload(result.value["product"], request.user),
                "reviews": ReviewSerializer(result.value["reviews"], many=True).data,
            }
        )

    @extend_schema(
        operation_id="products_update",
        summary="Update a listing",
        description="""
        Writable fields: title, description, price, stock, status, category,
        product_type, condition. Uploaded `images` are appended.
        """,
        request=ProductUpdateSerializer,
        responses={
            200: OpenApiResponse(response=SellerProductSerializer, description="Listing updated"),
            403: OpenApiResponse(description="Not the owner"),
            404: OpenApiResponse(description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def put(self, request, key):
        product_id = _parse_product_id(key)

        serializer = ProductUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_catalog_service().update_product(
            request.user, product_id, serializer.validated_data, images=request.FILES.getlist("images")
        )
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response({"product": SellerProductSerializer(result.value).data}, message="Product updated")

    @extend_schema(
        operation_id="products_delete",
        summary="Remove a listing",
        description="Soft delete. The listing moves to status removed.",
        tags=["Marketplace - Products"],
    )
    def delete(self, request, key):
        product_id = _parse_product_id(key)

        result = get_catalog_service().delete_product(request.user, product_id)
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response(message="Product removed")


class ProductCompareView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="products_compare",
        summary="Compare products by their reviews",
        description="Needs at least two products for an AI comparison.",
        request=ProductCompareSerializer,
        tags=["Marketplace - Products"],
    )
    def post(self, request):
        serializer = ProductCompareSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_catalog_service().compare_products(serializer.validated_data["ids"])
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response(
            {
                "products": ProductCompareItemSerializer(result.value["products"], many=True).data,
                "comparison": result.value["comparison"],
            }
        )
