"""
SellerService - Seller Application Business Logic.

Handles the seller onboarding workflow: submission by a student, and
approval/rejection by an admin. Approval is what upgrades the user's role.
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from authentication.infra.observability.metrics import seller_applications_pending, seller_applications_total
from authentication.models import SellerApplication
from utils.rbac import is_seller

from .results import Result


User = get_user_model()
logger = logging.getLogger(__name__)


class SellerService:
    """
    Seller application service encapsulating seller workflow business logic.

    Handles application submission, approval/rejection, and status queries.
    """

    def _refresh_pending_gauge(self):
        seller_applications_pending.set(SellerApplication.objects.filter(status=SellerApplication.STATUS_PENDING).count())

    @transaction.atomic
    def submit_application(self, user, business_name: str, description: str) -> Result:
        """
        Submit a new seller application or resubmit a rejected one.

        Business Logic:
        1. Refuse when the user is already an approved seller
        2. Refuse when an application is already pending
        3. Create the application, or reset a rejected one back to pending

        Args:
            user: CustomUser instance
            business_name: Trading name shown to buyers
            description: What the applicant plans to sell

        Returns:
            Result with the application
        """
        try:
            if is_seller(user):
                return Result(
                    success=False, message="You are already a verified seller.", error="User is already a seller"
                )

            existing = SellerApplication.objects.select_for_update().filter(user=user).first()

            if existing and existing.status == SellerApplication.STATUS_PENDING:
                return Result(
                    success=False,
                    message="You already have a seller application in progress.",
                    error="Application already exists",
                )

            if existing:
                existing.business_name = business_name
                existing.description = description
                existing.status = SellerApplication.STATUS_PENDING
                existing.rejection_reason = ""
                existing.reviewed_at = None
                existing.reviewed_by = None
                existing.applied_at = timezone.now()
                existing.save()
                application = existing
            else:
                application = SellerApplication.objects.create(
                    user=user,
                    business_name=business_name,
                    description=description,
                    status=SellerApplication.STATUS_PENDING,
                )

            user.seller_application = application
            seller_applications_total.labels(status="submitted").inc()
            self._refresh_pending_gauge()
            logger.info(f"Seller application submitted: {application.id} for user {user.id}")

            return Result(
                success=True,
                message="Seller application submitted",
                data={"application": application, "user": user},
            )

        except Exception as e:
            logger.exception(f"Seller application submission error for user {user.id}: {e}")
            return Result(success=False, message="Failed to submit application", error=str(e), status_code=500)

    @transaction.atomic
    def review_application(self, seller_id, action: str, admin_user, reason: Optional[str] = None) -> Result:
        """
        Approve or reject a user's seller application.

        Approval upgrades the user to the seller role; rejection records the
        reason. Both stamp the reviewing admin and time.

        Args:
            seller_id: id of the applying user
            action: "approve" or "reject"
            admin_user: Admin performing the review
            reason: Rejection reason (ignored on approval)

        Returns:
            Result with the updated user
        """
        if action not in ("approve", "reject"):
            return Result(success=False, message="Action must be approve or reject", error="invalid_action")

        try:
            user = User.objects.select_for_update().filter(pk=seller_id).first()
            if user is None:
                return Result(success=False, message="Seller not found", error="not_found", status_code=404)

            application, _ = SellerApplication.objects.get_or_create(
                user=user,
                defaults={"business_name": user.name or user.email, "description": ""},
            )

            application.reviewed_at = timezone.now()
            application.reviewed_by = admin_user

            if action == "approve":
                application.status = SellerApplication.STATUS_APPROVED
                application.rejection_reason = ""
                user.role = User.ROLE_SELLER
                user.save(update_fields=["role", "updated_at"])
            else:
                application.status = SellerApplication.STATUS_REJECTED
                application.rejection_reason = reason or ""

            application.save()
            user.seller_application = application

            seller_applications_total.labels(status=f"{action}d").inc()
            self._refresh_pending_gauge()
            logger.info(f"Seller application for user {user.id} {action}d by admin {admin_user.id}")

            return Result(success=True, message=f"Seller {action}d", data={"seller": user})

        except Exception as e:
            logger.exception(f"Seller review error for user {seller_id}: {e}")
            return Result(success=False, message=f"Failed to {action} seller", error=str(e), status_code=500)

    def approve_application(self, seller_id, admin_user) -> Result:
        return self.review_application(seller_id, "approve", admin_user)

    def reject_application(self, seller_id, admin_user, reason: str) -> Result:
        return self.review_application(seller_id, "reject", admin_user, reason)

    def get_application_status(self, user) -> Dict[str, Any]:
        """
        Get user's seller application status.

        Args:
            user: CustomUser instance

        Returns:
            Dict with application status information
        """
        application = SellerApplication.objects.filter(user=user).first()

        if application:
            return {
                "has_application": True,
                "is_seller": is_seller(user),
                "status": application.status,
                "applied_at": application.applied_at,
                "rejection_reason": application.rejection_reason,
            }

        return {
            "has_application": False,
            "is_seller": is_seller(user),
            "status": SellerApplication.STATUS_NONE,
        }

    def pending_applications(self):
        """Applications waiting for an admin decision, oldest first."""
        return (
            SellerApplication.objects.filter(status=SellerApplication.STATUS_PENDING)
            .select_related("user")
            .order_by("applied_at")
        )
