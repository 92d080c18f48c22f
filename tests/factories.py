# tests/factories.py
"""Shared builders for test fixtures."""

import uuid
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from billing.models import Enrollment, Order
from programs.models import (
    BlueprintSection,
    BlueprintSectionItem,
    Program,
    ProgramBlueprint,
    WorkoutLibrary,
)
from users.models import User, UserProfile


def make_user(email=None, role=User.Role.USER, full_name="Test User", **extra):
    return User.objects.create_user(
        email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
        password="pass-1234!",
        full_name=full_name,
        role=role,
        **extra,
    )


def make_coach(email=None, full_name="Coach Kim", **extra):
    return make_user(email=email, role=User.Role.COACH, full_name=full_name, **extra)


def make_member(email=None, full_name="Member Lee", with_profile=True, **extra):
    user = make_user(email=email, role=User.Role.USER, full_name=full_name, **extra)
    if with_profile:
        UserProfile.objects.create(account=user)
    return user


def make_program(coach, title="Strength Base", price=50000, **extra):
    fields = {
        "is_public": True,
        "is_for_sale": True,
        "access_period_days": 30,
    }
    fields.update(extra)
    return Program.objects.create(coach=coach, title=title, price=Decimal(price), **fields)


def make_library(title="Back Squat", workout_type=WorkoutLibrary.WorkoutType.WEIGHT_REPS, **extra):
    return WorkoutLibrary.objects.create(title=title, workout_type=workout_type, **extra)


def make_blueprint(program, phase=1, day=1, **extra):
    return ProgramBlueprint.objects.create(program=program, phase_number=phase, day_number=day, **extra)


def make_section_item(blueprint, title="Main lift", is_recordable=True, order_index=0):
    section = BlueprintSection.objects.create(title=title, is_recordable=is_recordable)
    return BlueprintSectionItem.objects.create(blueprint=blueprint, section=section, order_index=order_index)


def make_order(buyer, program, status=Order.Status.COMPLETED, amount=None, payment_key=None):
    return Order.objects.create(
        buyer=buyer,
        program=program,
        coach_id=program.coach_id,
        amount=program.price if amount is None else Decimal(amount),
        status=status,
        payment_key=payment_key,
    )


def make_enrollment(user, program, status=Enrollment.Status.ACTIVE, end_date=None, order=None, days=None):
    if days is not None:
        end_date = timezone.now() + timedelta(days=days)
    return Enrollment.objects.create(
        user=user,
        program=program,
        order=order,
        status=status,
        end_date=end_date,
    )
