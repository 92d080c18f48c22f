# users/tests/test_accounts.py

from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient

from core.exceptions import ExternalServiceError
from users.models import User, UserProfile
from users.services.account_service import AccountService
from users.services.identity_provider import IdentityProviderError
from tests.factories import make_coach, make_member, make_program

GET_PROVIDER = "users.services.account_service.get_identity_provider"


# ==============================================================================
# GROUP 1: ACCOUNT SERVICE
# ==============================================================================

class TestGroup01_AccountService(TestCase):

    def setUp(self):
        self.provider = mock.Mock()
        self.service = AccountService(provider=self.provider)
        self.member = make_member(email="member@example.com", full_name="Member Lee")

    def test_01_get_my_account(self):
        data = self.service.get_my_account(self.member)

        self.assertEqual(data["id"], str(self.member.id))
        self.assertEqual(data["email"], "member@example.com")
        self.assertEqual(data["role"], User.Role.USER)

    def test_02_update_account_syncs_provider(self):
        user = self.service.update_account(self.member, "Member Kim", "https://cdn.example.com/a.png")

        self.provider.admin_update_user.assert_called_once_with(
            self.member.id,
            {"full_name": "Member Kim", "avatar_url": "https://cdn.example.com/a.png"},
        )
        user.refresh_from_db()
        self.assertEqual(user.full_name, "Member Kim")

    def test_03_update_account_provider_failure_keeps_local(self):
        self.provider.admin_update_user.side_effect = IdentityProviderError("down", status_code=500)

        with self.assertRaises(ExternalServiceError):
            self.service.update_account(self.member, "Member Kim")

        self.member.refresh_from_db()
        self.assertEqual(self.member.full_name, "Member Lee")

    def test_04_delete_account_cascades(self):
        coach = make_coach()
        coach_id = coach.id
        program = make_program(coach)

        self.service.delete_account(coach)

        self.provider.admin_delete_user.assert_called_once_with(coach_id)
        self.assertFalse(User.objects.filter(id=coach_id).exists())
        self.assertFalse(type(program).objects.filter(id=program.id).exists())

    def test_05_delete_account_provider_failure(self):
        self.provider.admin_delete_user.side_effect = IdentityProviderError("down", status_code=500)

        with self.assertRaises(ExternalServiceError):
            self.service.delete_account(self.member)
        self.assertTrue(User.objects.filter(id=self.member.id).exists())

    def test_06_profile_created_on_demand(self):
        user = make_member(with_profile=False)

        profile = self.service.get_or_create_profile(user)

        self.assertEqual(profile.account, user)
        self.assertEqual(UserProfile.objects.filter(account=user).count(), 1)

    def test_07_complete_onboarding(self):
        profile = self.service.complete_onboarding(
            self.member,
            fitness_level=UserProfile.FitnessLevel.BEGINNER,
            fitness_goals=["strength"],
            onboarding_data={"gender": "F"},
        )

        self.assertTrue(profile.onboarding_completed)
        self.assertIsNotNone(profile.onboarding_completed_at)
        self.assertEqual(profile.fitness_goals, ["strength"])


# ==============================================================================
# GROUP 2: ACCOUNT ENDPOINTS
# ==============================================================================

class TestGroup02_AccountAPI(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.provider = mock.Mock()
        patcher = mock.patch(GET_PROVIDER, return_value=self.provider)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.member = make_member(email="member@example.com")
        self.client.force_authenticate(self.member)

    def test_01_me_requires_authentication(self):
        response = APIClient().get("/api/auth/me/")

        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.data["success"])

    def test_02_get_me(self):
        response = self.client.get("/api/auth/me/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["email"], "member@example.com")

    def test_03_patch_me(self):
        response = self.client.patch("/api/auth/me/", {"full_name": "New Name"}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["full_name"], "New Name")

    def test_04_delete_me(self):
        response = self.client.delete("/api/auth/me/")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(User.objects.filter(id=self.member.id).exists())

    def test_05_patch_profile(self):
        response = self.client.patch("/api/auth/me/profile/", {
            "nickname": "lifter",
            "fitness_goals": [" strength ", ""],
        }, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["nickname"], "lifter")
        self.assertEqual(response.data["data"]["fitness_goals"], ["strength"])

    def test_06_onboarding_rejects_unknown_keys(self):
        response = self.client.post("/api/auth/me/onboarding/", {
            "fitness_level": "BEGINNER",
            "onboarding_data": {"shoeSize": 270},
        }, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertIn("onboarding_data", response.data)

    def test_07_onboarding(self):
        response = self.client.post("/api/auth/me/onboarding/", {
            "fitness_level": "INTERMEDIATE",
            "fitness_goals": ["fat loss"],
            "onboarding_data": {"gender": "M", "workoutExperience": "2y"},
        }, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["data"]["onboarding_completed"])
