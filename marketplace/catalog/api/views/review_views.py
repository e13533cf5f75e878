from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.views import APIView

from infrastructure.container import container
from marketplace.catalog.api.serializers import (
    HelpfulVoteSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
    ReviewUpdateSerializer,
)
from marketplace.services import http_status_for
from utils.responses import result_error_response, success_response, validation_error_response


def get_review_service():
    return container.review_service()


class ProductReviewsView(APIView):
    def get_permissions(self):
        if self.request.method == "POST":
            return [permissions.IsAuthenticated()]
        return [permissions.AllowAny()]

    @extend_schema(
        operation_id="reviews_list",
        summary="Approved reviews of a product with an AI summary",
        responses={
            200: OpenApiResponse(response=ReviewSerializer(many=True), description="Reviews retrieved"),
            404: OpenApiResponse(description="Product not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def get(self, request, product_id):
        result = get_review_service().list_product_reviews(product_id)
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response(
            {
                "reviews": ReviewSerializer(result.value["reviews"], many=True).data,
                "summary": result.value["summary"],
            }
        )

    @extend_schema(
        operation_id="reviews_create",
        summary="Review a product",
        description="""
        One review per user and product. Reviews by buyers of the product are
        marked as verified purchases. The product's rating aggregate is
        recomputed.
        """,
        request=ReviewCreateSerializer,
        responses={
            201: OpenApiResponse(response=ReviewSerializer, description="Review created"),
            400: OpenApiResponse(description="Validation failed or already reviewed"),
            404: OpenApiResponse(description="Product not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def post(self, request, product_id):
        serializer = ReviewCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_review_service().create_review(request.user, product_id, **serializer.validated_data)
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response(
            {"review": ReviewSerializer(result.value).data}, message="Review created", status=status.HTTP_201_CREATED
        )


class ReviewDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="reviews_update",
        summary="Edit your review",
        request=ReviewUpdateSerializer,
        responses={
            200: OpenApiResponse(response=ReviewSerializer, description="Review updated"),
            403: OpenApiResponse(description="Not the reviewer"),
            404: OpenApiResponse(description="Review not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def put(self, request, review_id):
        serializer = ReviewUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_review_service().update_review(request.user, review_id, serializer.validated_data)
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response({"review": ReviewSerializer(result.value).data}, message="Review updated")

    @extend_schema(
        operation_id="reviews_delete",
        summary="Delete a review (reviewer or admin)",
        tags=["Marketplace - Reviews"],
    )
    def delete(self, request, review_id):
        result = get_review_service().delete_review(request.user, review_id)
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        return success_response(message="Review deleted")


class ReviewHelpfulView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="reviews_helpful",
        summary="Vote a review helpful or not helpful",
        description="One vote per user. Voting again with the other value moves the vote.",
        request=HelpfulVoteSerializer,
        tags=["Marketplace - Reviews"],
    )
    def post(self, request, review_id):
        serializer = HelpfulVoteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_review_service().vote_helpful(request.user, review_id, serializer.validated_data["is_helpful"])
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))

        review = result.value
        return success_response(
            {"helpful_count": review.helpful_count, "not_helpful_count": review.not_helpful_count},
            message="Vote recorded",
        )
