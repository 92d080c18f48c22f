# users/tests/test_auth.py

"""
Authentication tests: identity provider client, AuthService, auth endpoints.
"""

import uuid
from unittest import mock

import requests
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase, override_settings
from rest_framework.test import APIClient, APIRequestFactory
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken
from rest_framework_simplejwt.tokens import AccessToken

from core.exceptions import (
    ConflictError,
    ExternalServiceError,
    NotAuthenticated,
    ValidationFailed,
)
from users.models import User
from users.services.auth_service import (
    COACH_HOME,
    MEMBER_HOME,
    AuthService,
    get_user_id,
    issue_tokens,
    redirect_for,
)
from users.services.identity_provider import (
    IdentityProviderClient,
    IdentityProviderError,
    ProviderSession,
    ProviderUser,
)
from tests.factories import make_coach, make_member

SESSION_REQUEST = "core.baas.requests.Session.request"
GET_PROVIDER = "users.services.auth_service.get_identity_provider"


def _http_response(status_code, body=None):
    response = mock.Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.content = b"{}" if body is not None else b""
    response.json.return_value = body
    return response


def _session(user_id=None, email="member@example.com", **metadata):
    return ProviderSession(
        access_token="provider-access",
        refresh_token="provider-refresh",
        user=ProviderUser(id=user_id or uuid.uuid4(), email=email, metadata=metadata),
    )


# ==============================================================================
# GROUP 1: IDENTITY PROVIDER CLIENT
# ==============================================================================

class TestGroup01_IdentityProviderClient(TestCase):

    @mock.patch(SESSION_REQUEST)
    def test_01_sign_up_returns_provider_user(self, request):
        user_id = uuid.uuid4()
        request.return_value = _http_response(200, {
            "id": str(user_id),
            "email": "new@example.com",
            "user_metadata": {"full_name": "New Member"},
        })

        user = IdentityProviderClient().sign_up("new@example.com", "secret-pass", {"full_name": "New Member"})

        self.assertEqual(user.id, user_id)
        self.assertEqual(user.metadata["full_name"], "New Member")
        method, url = request.call_args.args[:2]
        self.assertEqual(method, "POST")
        self.assertEqual(url, "https://project.supabase.test/auth/v1/signup")
        self.assertEqual(request.call_args.kwargs["json"]["data"], {"full_name": "New Member"})

    @mock.patch(SESSION_REQUEST)
    def test_02_sign_in_uses_password_grant(self, request):
        user_id = uuid.uuid4()
        request.return_value = _http_response(200, {
            "access_token": "at",
            "refresh_token": "rt",
            "user": {"id": str(user_id), "email": "a@example.com"},
        })

        session = IdentityProviderClient().sign_in_with_password("a@example.com", "pw")

        self.assertEqual(session.access_token, "at")
        self.assertEqual(session.user.id, user_id)
        self.assertEqual(request.call_args.kwargs["params"], {"grant_type": "password"})

    @mock.patch(SESSION_REQUEST)
    def test_03_error_status_raises_provider_error(self, request):
        request.return_value = _http_response(400, {"msg": "Invalid login credentials"})

        with self.assertRaises(IdentityProviderError) as ctx:
            IdentityProviderClient().sign_in_with_password("a@example.com", "bad")

        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.message, "Invalid login credentials")

    @mock.patch(SESSION_REQUEST, side_effect=requests.ConnectionError("down"))
    def test_04_transport_error_has_no_status(self, request):
        with self.assertRaises(IdentityProviderError) as ctx:
            IdentityProviderClient().recover("a@example.com")

        self.assertIsNone(ctx.exception.status_code)

    @mock.patch(SESSION_REQUEST)
    def test_05_admin_calls_use_service_role_key(self, request):
        user_id = uuid.uuid4()
        request.return_value = _http_response(200, {"id": str(user_id), "email": "a@example.com"})

        IdentityProviderClient().admin_update_user(user_id, {"full_name": "Renamed"})

        headers = request.call_args.kwargs["headers"]
        self.assertEqual(headers["apikey"], "service-role-key")
        self.assertEqual(request.call_args.kwargs["json"], {"user_metadata": {"full_name": "Renamed"}})

    @override_settings(SUPABASE_CONFIG={"URL": ""})
    def test_06_missing_configuration(self):
        with self.assertRaises(IdentityProviderError):
            IdentityProviderClient().sign_out("token")


# ==============================================================================
# GROUP 2: SIGN UP / SIGN IN
# ==============================================================================

class TestGroup02_SignUpSignIn(TestCase):

    def setUp(self):
        self.provider = mock.Mock()
        self.service = AuthService(provider=self.provider)

    def test_01_sign_up_mirrors_provider_id(self):
        provider_id = uuid.uuid4()
        self.provider.sign_up.return_value = ProviderUser(id=provider_id, email="coach@example.com")

        user = self.service.sign_up("Coach@Example.com", "secret-pass", "Coach Park", role=User.Role.COACH)

        self.assertEqual(user.id, provider_id)
        self.assertEqual(user.email, "coach@example.com")
        self.assertEqual(user.role, User.Role.COACH)
        self.assertFalse(user.has_usable_password())

    def test_02_sign_up_duplicate_email(self):
        make_member(email="taken@example.com")

        with self.assertRaises(ConflictError):
            self.service.sign_up("taken@example.com", "secret-pass", "Someone")
        self.provider.sign_up.assert_not_called()

    def test_03_sign_up_provider_validation_error(self):
        self.provider.sign_up.side_effect = IdentityProviderError("Password is too weak", status_code=422)

        with self.assertRaises(ValidationFailed):
            self.service.sign_up("weak@example.com", "12345678", "Weak Pass")
        self.assertFalse(User.objects.filter(email="weak@example.com").exists())

    def test_04_sign_up_provider_outage(self):
        self.provider.sign_up.side_effect = IdentityProviderError("down", status_code=503)

        with self.assertRaises(ExternalServiceError):
            self.service.sign_up("a@example.com", "secret-pass", "Some One")

    def test_05_sign_in_existing_member(self):
        member = make_member(email="member@example.com")
        self.provider.sign_in_with_password.return_value = _session(member.id, member.email)

        result = self.service.sign_in(" Member@Example.com ", "pw")

        self.provider.sign_in_with_password.assert_called_once_with("member@example.com", "pw")
        self.assertEqual(result.user, member)
        self.assertEqual(result.redirect_to, MEMBER_HOME)
        self.assertEqual(result.provider_access_token, "provider-access")
        self.assertEqual(str(AccessToken(result.access)["user_id"]), str(member.id))

    def test_06_sign_in_creates_missing_local_account(self):
        provider_id = uuid.uuid4()
        self.provider.sign_in_with_password.return_value = _session(
            provider_id, "fresh@example.com", role="COACH", full_name="Fresh Coach",
        )

        result = self.service.sign_in("fresh@example.com", "pw")

        self.assertEqual(result.user.id, provider_id)
        self.assertEqual(result.user.role, User.Role.COACH)
        self.assertEqual(result.redirect_to, COACH_HOME)

    def test_07_sign_in_ignores_admin_role_metadata(self):
        self.provider.sign_in_with_password.return_value = _session(role="ADMIN")

        result = self.service.sign_in("member@example.com", "pw")

        self.assertEqual(result.user.role, User.Role.USER)

    def test_08_sign_in_bad_credentials(self):
        self.provider.sign_in_with_password.side_effect = IdentityProviderError("bad", status_code=400)

        with self.assertRaises(NotAuthenticated):
            self.service.sign_in("member@example.com", "wrong")

    def test_09_sign_in_provider_unreachable(self):
        self.provider.sign_in_with_password.side_effect = IdentityProviderError("down")

        with self.assertRaises(ExternalServiceError):
            self.service.sign_in("member@example.com", "pw")

    def test_10_sign_in_disabled_account(self):
        member = make_member(email="off@example.com", is_active=False)
        self.provider.sign_in_with_password.return_value = _session(member.id, member.email)

        with self.assertRaises(NotAuthenticated):
            self.service.sign_in("off@example.com", "pw")

    def test_11_redirect_by_role(self):
        self.assertEqual(redirect_for(make_coach()), COACH_HOME)
        self.assertEqual(redirect_for(make_member()), MEMBER_HOME)

    def test_12_get_user_id(self):
        member = make_member()
        request = APIRequestFactory().get("/")

        request.user = AnonymousUser()
        self.assertIsNone(get_user_id(request))

        request.user = member
        self.assertEqual(get_user_id(request), str(member.id))


# ==============================================================================
# GROUP 3: SIGN OUT / PASSWORDS
# ==============================================================================

class TestGroup03_SessionsAndPasswords(TestCase):

    def setUp(self):
        self.provider = mock.Mock()
        self.service = AuthService(provider=self.provider)
        self.member = make_member(email="member@example.com")

    def test_01_sign_out_blacklists_refresh(self):
        _, refresh = issue_tokens(self.member)

        self.service.sign_out(refresh, "provider-access")

        self.assertEqual(BlacklistedToken.objects.count(), 1)
        self.provider.sign_out.assert_called_once_with("provider-access")

    def test_02_sign_out_invalid_refresh(self):
        with self.assertRaises(ValidationFailed):
            self.service.sign_out("not-a-token")

    def test_03_sign_out_tolerates_provider_error(self):
        _, refresh = issue_tokens(self.member)
        self.provider.sign_out.side_effect = IdentityProviderError("expired", status_code=401)

        self.service.sign_out(refresh, "provider-access")

        self.assertEqual(BlacklistedToken.objects.count(), 1)

    def test_04_password_reset_request_never_fails(self):
        self.provider.recover.side_effect = IdentityProviderError("unknown user", status_code=404)

        self.service.request_password_reset("Nobody@Example.com")

        self.assertEqual(self.provider.recover.call_args.args[0], "nobody@example.com")

    def test_05_reset_password_error(self):
        self.provider.update_user.side_effect = IdentityProviderError("Token expired", status_code=401)

        with self.assertRaises(ValidationFailed):
            self.service.reset_password("recovery-token", "new-password")

    def test_06_change_password_verifies_current(self):
        self.provider.sign_in_with_password.return_value = _session(self.member.id, self.member.email)

        self.service.change_password(self.member, "old-password", "new-password")

        self.provider.update_user.assert_called_once_with("provider-access", password="new-password")

    def test_07_change_password_wrong_current(self):
        self.provider.sign_in_with_password.side_effect = IdentityProviderError("bad", status_code=400)

        with self.assertRaises(ValidationFailed):
            self.service.change_password(self.member, "wrong", "new-password")
        self.provider.update_user.assert_not_called()


# ==============================================================================
# GROUP 4: AUTH ENDPOINTS
# ==============================================================================

class TestGroup04_AuthAPI(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.provider = mock.Mock()
        patcher = mock.patch(GET_PROVIDER, return_value=self.provider)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_01_signup(self):
        self.provider.sign_up.return_value = ProviderUser(id=uuid.uuid4(), email="new@example.com")

        response = self.client.post("/api/auth/signup/", {
            "email": "new@example.com",
            "password": "secret-pass",
            "confirm_password": "secret-pass",
            "full_name": "New Member",
        }, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["data"]["role"], User.Role.USER)

    def test_02_signup_password_mismatch(self):
        response = self.client.post("/api/auth/signup/", {
            "email": "new@example.com",
            "password": "secret-pass",
            "confirm_password": "other-pass",
            "full_name": "New Member",
        }, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])
        self.assertIn("confirm_password", response.data)
        self.provider.sign_up.assert_not_called()

    def test_03_signup_rejects_admin_role(self):
        response = self.client.post("/api/auth/signup/", {
            "email": "new@example.com",
            "password": "secret-pass",
            "confirm_password": "secret-pass",
            "full_name": "New Admin",
            "role": "ADMIN",
        }, format="json")

        self.assertEqual(response.status_code, 400)

    def test_04_signin_returns_tokens_and_redirect(self):
        coach = make_coach(email="coach@example.com")
        self.provider.sign_in_with_password.return_value = _session(coach.id, coach.email)

        response = self.client.post("/api/auth/signin/", {
            "email": "coach@example.com",
            "password": "pw",
        }, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["access"])
        self.assertTrue(response.data["refresh"])
        self.assertEqual(response.data["redirect_to"], COACH_HOME)
        self.assertEqual(response.data["user"]["email"], "coach@example.com")

    def test_05_signin_wrong_password(self):
        self.provider.sign_in_with_password.side_effect = IdentityProviderError("bad", status_code=400)

        response = self.client.post("/api/auth/signin/", {
            "email": "coach@example.com",
            "password": "wrong",
        }, format="json")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["error_code"], "not_authenticated")
        self.assertEqual(response.data["message"], "Invalid email or password.")

    def test_06_signout_requires_authentication(self):
        response = self.client.post("/api/auth/signout/", {"refresh": "x"}, format="json")

        self.assertEqual(response.status_code, 401)

    def test_07_signout(self):
        member = make_member()
        _, refresh = issue_tokens(member)
        self.client.force_authenticate(member)

        response = self.client.post("/api/auth/signout/", {"refresh": refresh}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(BlacklistedToken.objects.exists())

    def test_08_password_reset_request_always_succeeds(self):
        self.provider.recover.side_effect = IdentityProviderError("unknown", status_code=404)

        response = self.client.post(
            "/api/auth/password/reset-request/", {"email": "nobody@example.com"}, format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["success"])

    def test_09_change_password_same_as_current(self):
        self.client.force_authenticate(make_member())

        response = self.client.post("/api/auth/password/change/", {
            "current_password": "same-password",
            "new_password": "same-password",
        }, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertIn("new_password", response.data)
