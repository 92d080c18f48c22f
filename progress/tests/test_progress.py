# progress/tests/test_progress.py

"""
Workout log and section record tests (services + endpoints).
"""

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from core.exceptions import PermissionDeniedError, ResourceNotFound, ValidationFailed
from progress.models import SectionRecord, WorkoutLog
from progress.services.section_record_service import SectionRecordService
from progress.services.workout_log_service import WorkoutLogService
from tests.factories import (
    make_blueprint,
    make_coach,
    make_enrollment,
    make_library,
    make_member,
    make_program,
    make_section_item,
)


# ==============================================================================
# GROUP 1: WORKOUT LOGS
# ==============================================================================

class TestGroup01_WorkoutLogs(TestCase):

    def setUp(self):
        self.coach = make_coach()
        self.program = make_program(self.coach)
        self.blueprint = make_blueprint(self.program)
        self.member = make_member()
        make_enrollment(self.member, self.program)
        self.library = make_library()
        self.service = WorkoutLogService()

    def _create(self, user=None, **data):
        payload = {"library": self.library, "blueprint": self.blueprint, "max_weight": Decimal("100")}
        payload.update(data)
        return self.service.create(user or self.member, payload)

    def test_01_member_cannot_set_coach_fields(self):
        log = self._create(coach_comment="self praise", is_checked_by_coach=True)

        self.assertIsNone(log.coach_comment)
        self.assertFalse(log.is_checked_by_coach)

        log = self.service.update(self.member, log.id, {"is_checked_by_coach": True, "intensity": "HIGH"})
        self.assertFalse(log.is_checked_by_coach)
        self.assertEqual(log.intensity, "HIGH")

    def test_02_other_member_cannot_read(self):
        log = self._create()

        with self.assertRaises(PermissionDeniedError):
            self.service.get_detail(make_member(), log.id)
        with self.assertRaises(ResourceNotFound):
            self.service.get_detail(self.member, "missing")

    def test_03_coach_reads_enrolled_member_logs(self):
        self._create()

        logs = self.service.get_member_logs_for_coach(self.coach, self.member.id)

        self.assertEqual(logs.count(), 1)

    def test_04_coach_without_enrollment_link_denied(self):
        self._create()

        with self.assertRaises(PermissionDeniedError):
            self.service.get_member_logs_for_coach(make_coach(), self.member.id)

    def test_05_member_without_enrollments_returns_empty(self):
        loner = make_member()
        self._create(user=loner, blueprint=None)

        self.assertEqual(self.service.get_member_logs_for_coach(self.coach, loner.id).count(), 0)

    def test_06_toggle_check_flips(self):
        log = self._create()

        self.assertTrue(self.service.toggle_coach_check(self.coach, log.id).is_checked_by_coach)
        self.assertFalse(self.service.toggle_coach_check(self.coach, log.id).is_checked_by_coach)

    def test_07_comment_requires_program_owner(self):
        log = self._create()

        with self.assertRaises(PermissionDeniedError):
            self.service.update_coach_comment(make_coach(), log.id, "nice")

        log = self.service.update_coach_comment(self.coach, log.id, "Great depth")
        self.assertEqual(log.coach_comment, "Great depth")

        log = self.service.update_coach_comment(self.coach, log.id, "")
        self.assertIsNone(log.coach_comment)


# ==============================================================================
# GROUP 2: SECTION RECORDS
# ==============================================================================

class TestGroup02_SectionRecords(TestCase):

    def setUp(self):
        self.coach = make_coach()
        self.program = make_program(self.coach)
        self.item = make_section_item(make_blueprint(self.program, 1, 1))
        self.member = make_member()
        make_enrollment(self.member, self.program)
        self.service = SectionRecordService()

    def test_01_submit_twice_overwrites(self):
        first = self.service.create_or_update(self.member, self.item.id, {"time": "12:30"})
        second = self.service.create_or_update(self.member, self.item.id, {"time": "11:58"})

        self.assertEqual(first.id, second.id)
        self.assertEqual(SectionRecord.objects.count(), 1)
        second.refresh_from_db()
        self.assertEqual(second.content, {"time": "11:58"})
        self.assertGreaterEqual(second.completed_at, first.completed_at)

    def test_02_requires_enrollment(self):
        with self.assertRaises(PermissionDeniedError):
            self.service.create_or_update(make_member(), self.item.id, {"time": "10:00"})

    def test_03_requires_profile(self):
        member = make_member(with_profile=False)
        make_enrollment(member, self.program)

        with self.assertRaises(ValidationFailed):
            self.service.create_or_update(member, self.item.id, {"time": "10:00"})

    def test_04_unknown_section(self):
        with self.assertRaises(ResourceNotFound):
            self.service.create_or_update(self.member, self.program.id, {"time": "10:00"})

    def test_05_records_by_program_day(self):
        self.service.create_or_update(self.member, self.item.id, {"time": "10:00"})
        other_day = make_section_item(make_blueprint(self.program, 1, 2))
        self.service.create_or_update(self.member, other_day.id, {"time": "9:00"})

        records = self.service.get_records_by_program_day(self.coach, self.program, 1, 1)

        self.assertEqual([r.section_item_id for r in records], [self.item.id])

    def test_06_coach_moderation(self):
        record = self.service.create_or_update(self.member, self.item.id, {"time": "10:00"})

        with self.assertRaises(PermissionDeniedError):
            self.service.delete_by_coach(make_coach(), record.id)

        record = self.service.update_coach_comment(self.coach, record.id, "Pace the first round")
        self.assertEqual(record.coach_comment, "Pace the first round")

        self.service.delete_by_coach(self.coach, record.id)
        self.assertFalse(SectionRecord.objects.exists())


# ==============================================================================
# GROUP 3: ENDPOINTS
# ==============================================================================

class TestGroup03_ProgressAPI(TestCase):

    def setUp(self):
        self.coach = make_coach()
        self.program = make_program(self.coach)
        self.blueprint = make_blueprint(self.program)
        self.item = make_section_item(self.blueprint)
        self.member = make_member()
        make_enrollment(self.member, self.program)
        self.library = make_library()

        self.client = APIClient()
        self.client.force_authenticate(self.member)
        self.coach_client = APIClient()
        self.coach_client.force_authenticate(self.coach)

    def test_01_create_workout_log(self):
        response = self.client.post("/api/progress/workout-logs/", {
            "library": str(self.library.id),
            "blueprint": str(self.blueprint.id),
            "content": {"sets": [{"weight": 100, "reps": 5}], "reps": 5},
            "max_weight": "100.00",
        }, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["data"]["library_title"], self.library.title)
        self.assertFalse(response.data["data"]["is_checked_by_coach"])

    def test_02_content_must_be_object(self):
        response = self.client.post("/api/progress/workout-logs/", {
            "library": str(self.library.id),
            "content": [1, 2, 3],
        }, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertIn("content", response.data)

    def test_03_coach_toggle_check(self):
        log = WorkoutLog.objects.create(user=self.member, library=self.library, blueprint=self.blueprint)

        response = self.coach_client.post(f"/api/progress/coach/workout-logs/{log.id}/toggle-check/")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["data"]["is_checked_by_coach"])

    def test_04_member_cannot_use_coach_endpoints(self):
        log = WorkoutLog.objects.create(user=self.member, library=self.library, blueprint=self.blueprint)

        response = self.client.patch(
            f"/api/progress/coach/workout-logs/{log.id}/comment/", {"comment": "me"}, format="json",
        )

        self.assertEqual(response.status_code, 403)

    def test_05_submit_section_record(self):
        response = self.client.post("/api/progress/section-records/", {
            "section_item_id": str(self.item.id),
            "content": {"weight": 80},
        }, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["data"]["content"], {"weight": 80})

    def test_06_coach_records_require_phase_and_day(self):
        url = f"/api/progress/coach/programs/{self.program.id}/section-records/"

        self.assertEqual(self.coach_client.get(url).status_code, 400)
        self.assertEqual(self.coach_client.get(url, {"phase": 1, "day": 1}).status_code, 200)

    def test_07_my_performance(self):
        now = timezone.now()
        for days_ago, weight in ((7, "60.00"), (1, "70.00")):
            WorkoutLog.objects.create(
                user=self.member,
                library=self.library,
                max_weight=Decimal(weight),
                log_date=now - timedelta(days=days_ago),
            )

        response = self.client.get("/api/progress/performance/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["data"]), 1)
        self.assertEqual(response.data["data"][0]["current_pr"], 70.0)
        self.assertAlmostEqual(response.data["data"][0]["growth_rate"], 16.666, places=2)
        self.assertEqual(response.data["data"][0]["trend"]["trend"], "UP")
        self.assertNotIn("period_growth_rate", response.data["data"][0])

        response = self.client.get("/api/progress/performance/", {
            "start": (now - timedelta(days=3)).date().isoformat(),
            "end": (now + timedelta(days=1)).date().isoformat(),
        })
        self.assertEqual(response.data["data"][0]["period_growth_rate"], 0.0)

    def test_08_training_summary(self):
        for intensity in ("HIGH", "HIGH", "LOW"):
            WorkoutLog.objects.create(user=self.member, library=self.library, intensity=intensity)
        WorkoutLog.objects.create(user=make_member(), library=self.library, intensity="MEDIUM")

        response = self.client.get("/api/progress/performance/summary/")

        self.assertEqual(response.status_code, 200)
        data = response.data["data"]
        self.assertEqual(data["intensity"], {"low": 1, "medium": 0, "high": 2, "total": 3})
        self.assertEqual(data["monthly_frequency"][0]["count"], 3)

        self.assertEqual(self.client.get("/api/progress/performance/summary/", {"months": "x"}).status_code, 400)
