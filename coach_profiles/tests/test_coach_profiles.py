from django.test import TestCase
from rest_framework.test import APIClient

from coach_profiles import services
from coach_profiles.models import CoachProfile
from core.exceptions import ConflictError, ResourceNotFound
from tests.factories import make_coach, make_member


class CoachProfileServiceTests(TestCase):

    def setUp(self):
        self.coach = make_coach()

    def test_create_profile(self):
        profile = services.create_profile(self.coach, nickname="Iron Kim")

        self.assertEqual(profile.account, self.coach)
        self.assertEqual(services.get_my_profile(self.coach), profile)

    def test_create_twice_conflicts(self):
        services.create_profile(self.coach, nickname="Iron Kim")

        with self.assertRaises(ConflictError):
            services.create_profile(self.coach, nickname="Again")

    def test_update_missing_profile(self):
        with self.assertRaises(ResourceNotFound):
            services.update_profile(self.coach, nickname="Nope")

    def test_public_profile_requires_coach_role(self):
        member = make_member()
        CoachProfile.objects.create(account=member, nickname="Not a coach")

        with self.assertRaises(ResourceNotFound):
            services.get_public_profile(member.id)

    def test_delete_profile(self):
        services.create_profile(self.coach)
        services.delete_profile(self.coach)

        self.assertIsNone(services.get_profile_for(self.coach))


class CoachProfileAPITests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.coach = make_coach()
        self.client.force_authenticate(self.coach)

    def test_member_cannot_manage_profile(self):
        client = APIClient()
        client.force_authenticate(make_member())

        response = client.get("/api/coaches/me/profile/")

        self.assertEqual(response.status_code, 403)
        self.assertFalse(response.data["success"])

    def test_create_and_read_profile(self):
        response = self.client.post("/api/coaches/me/profile/", {
            "nickname": "Iron Kim",
            "introduction": "Powerlifting coach",
            "certifications": ["NSCA-CPT", "  "],
            "sns_links": {"instagram": "https://instagram.com/ironkim", "blog": ""},
            "contact_number": "010-1234-5678",
        }, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["data"]["certifications"], ["NSCA-CPT"])
        self.assertEqual(response.data["data"]["sns_links"], {"instagram": "https://instagram.com/ironkim"})

        response = self.client.get("/api/coaches/me/profile/")
        self.assertEqual(response.data["data"]["nickname"], "Iron Kim")

    def test_unknown_sns_key_rejected(self):
        response = self.client.post("/api/coaches/me/profile/", {
            "sns_links": {"myspace": "https://myspace.com/x"},
        }, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertIn("sns_links", response.data)

    def test_public_view_hides_contact_number(self):
        services.create_profile(self.coach, nickname="Iron Kim", contact_number="010-1234-5678")
        client = APIClient()
        client.force_authenticate(make_member())

        response = client.get(f"/api/coaches/{self.coach.id}/profile/")

        self.assertEqual(response.status_code, 200)
        self.assertNotIn("contact_number", response.data["data"])

    def test_owner_sees_contact_number(self):
        services.create_profile(self.coach, contact_number="010-1234-5678")

        response = self.client.get(f"/api/coaches/{self.coach.id}/profile/")

        self.assertEqual(response.data["data"]["contact_number"], "010-1234-5678")

    def test_get_missing_profile(self):
        response = self.client.get("/api/coaches/me/profile/")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error_code"], "not_found")
