from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from authentication.domain.models import SellerApplication
from marketplace.tests.factories import SellerFactory, UserFactory

User = get_user_model()


class AuthViewIntegrationTest(TestCase):
    """Registration, login and the session cookie"""

    def setUp(self):
        self.client = APIClient()
        self.payload = {
            "name": "Jordan Lee",
            "email": "Jordan.Lee@Campus.edu",
            "password": "secret123",
            "student_id": "S-20931",
            "college": "North Campus",
        }

    def test_register_creates_verified_student_and_sets_cookie(self):
        response = self.client.post("/api/auth/register", self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["success"])
        user = response.data["data"]["user"]
        self.assertEqual(user["email"], "jordan.lee@campus.edu")
        self.assertEqual(user["role"], "student")
        self.assertTrue(user["is_verified_student"])
        self.assertEqual(user["seller_status"], "none")
        self.assertNotIn("password", user)
        self.assertEqual(response.cookies["token"].value, response.data["data"]["token"])
        self.assertTrue(response.cookies["token"]["httponly"])

    def test_register_without_student_id_is_unverified(self):
        del self.payload["student_id"]

        response = self.client.post("/api/auth/register", self.payload, format="json")

        self.assertFalse(response.data["data"]["user"]["is_verified_student"])

    def test_register_duplicate_email(self):
        UserFactory(email="jordan.lee@campus.edu")

        response = self.client.post("/api/auth/register", self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Email already registered")
        self.assertEqual(User.objects.filter(email="jordan.lee@campus.edu").count(), 1)

    def test_register_weak_password(self):
        self.payload["password"] = "abcdef"

        response = self.client.post("/api/auth/register", self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["errors"], [{"field": "password", "message": "Password must contain a number"}])

    def test_login_and_cookie_authenticates_me(self):
        UserFactory(email="jordan.lee@campus.edu", password="secret123")

        response = self.client.post(
            "/api/auth/login", {"email": "JORDAN.LEE@campus.edu", "password": "secret123"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Login successful")

        me = self.client.get("/api/auth/me")
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data["data"]["user"]["email"], "jordan.lee@campus.edu")

    def test_bearer_header_authenticates_me(self):
        UserFactory(email="jordan.lee@campus.edu", password="secret123")
        login = self.client.post(
            "/api/auth/login", {"email": "jordan.lee@campus.edu", "password": "secret123"}, format="json"
        )

        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['data']['token']}")
        self.assertEqual(client.get("/api/auth/me").status_code, status.HTTP_200_OK)

    def test_login_wrong_password(self):
        UserFactory(email="jordan.lee@campus.edu", password="secret123")

        response = self.client.post(
            "/api/auth/login", {"email": "jordan.lee@campus.edu", "password": "wrong123"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Invalid email or password")

    def test_banned_user_cannot_log_in(self):
        UserFactory(email="jordan.lee@campus.edu", password="secret123", is_banned=True, ban_reason="Spam")

        response = self.client.post(
            "/api/auth/login", {"email": "jordan.lee@campus.edu", "password": "secret123"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Your account has been banned: Spam")

    def test_me_requires_authentication(self):
        response = self.client.get("/api/auth/me")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["message"], "Not authorized, please log in")

    def test_invalid_token_is_rejected(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

        response = self.client.get("/api/auth/me")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["message"], "Invalid token. Please log in again.")

    def test_logout_clears_cookie(self):
        response = self.client.post("/api/auth/logout")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies["token"].value, "")

    def test_update_profile(self):
        user = UserFactory()
        self.client.force_authenticate(user=user)

        response = self.client.put(
            "/api/auth/profile", {"phone": "+1 555-0100", "address": {"city": "Springfield"}}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.phone, "+1 555-0100")
        self.assertEqual(user.address, {"city": "Springfield"})

    def test_change_password_checks_current(self):
        user = UserFactory(password="secret123")
        self.client.force_authenticate(user=user)

        response = self.client.put(
            "/api/auth/password", {"current_password": "nope1234", "new_password": "fresh123"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Current password is incorrect")

        response = self.client.put(
            "/api/auth/password", {"current_password": "secret123", "new_password": "fresh123"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertTrue(user.check_password("fresh123"))


class SellerApplicationIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.student = UserFactory()
        self.payload = {"business_name": "Jordan's Gadgets", "description": "Refurbished phones and chargers"}

    def test_apply_keeps_role_until_approved(self):
        self.client.force_authenticate(user=self.student)

        response = self.client.post("/api/auth/seller/apply", self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Seller application submitted")
        self.assertEqual(response.data["data"]["user"]["role"], "student")
        self.assertEqual(response.data["data"]["user"]["seller_status"], "pending")

    def test_second_pending_application_is_refused(self):
        self.client.force_authenticate(user=self.student)
        self.client.post("/api/auth/seller/apply", self.payload, format="json")

        response = self.client.post("/api/auth/seller/apply", self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "You already have a seller application in progress.")

    def test_rejected_applicant_can_reapply(self):
        SellerApplication.objects.create(
            user=self.student,
            business_name="Old",
            description="Old description",
            status=SellerApplication.STATUS_REJECTED,
            rejection_reason="Too vague",
        )
        self.client.force_authenticate(user=self.student)

        response = self.client.post("/api/auth/seller/apply", self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        application = SellerApplication.objects.get(user=self.student)
        self.assertEqual(application.status, SellerApplication.STATUS_PENDING)
        self.assertEqual(application.rejection_reason, "")

    def test_approved_seller_cannot_apply(self):
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.post("/api/auth/seller/apply", self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "You are already a verified seller.")

    def test_application_status(self):
        self.client.force_authenticate(user=self.student)

        response = self.client.get("/api/auth/seller/application/status")
        self.assertEqual(response.data["data"]["status"], "none")

        self.client.post("/api/auth/seller/apply", self.payload, format="json")
        response = self.client.get("/api/auth/seller/application/status")
        self.assertTrue(response.data["data"]["has_application"])
        self.assertEqual(response.data["data"]["status"], "pending")
