import logging

from django.db import IntegrityError, transaction

from core.cache import invalidate_paths
from core.exceptions import ConflictError, ResourceNotFound
from .models import CoachProfile

logger = logging.getLogger(__name__)

PROFILE_PATH = "/coach/profile"


def get_profile_for(account):
    return CoachProfile.objects.filter(account=account).first()


def create_profile(account, **fields):
    if get_profile_for(account):
        raise ConflictError("Profile already exists. Use update instead.")

    try:
        with transaction.atomic():
            profile = CoachProfile.objects.create(account=account, **fields)
    except IntegrityError:
        raise ConflictError("Profile already exists. Use update instead.")

    invalidate_paths(PROFILE_PATH)
    logger.info(f"Coach profile created for {account.id}")
    return profile


def get_my_profile(account):
    profile = get_profile_for(account)
    if profile is None:
        raise ResourceNotFound("Profile not found.")
    return profile


def update_profile(account, **fields):
    profile = get_profile_for(account)
    if profile is None:
        raise ResourceNotFound("Profile does not exist. Create it first.")

    for name, value in fields.items():
        setattr(profile, name, value)
    profile.save()

    invalidate_paths(PROFILE_PATH)
    return profile


def delete_profile(account):
    profile = get_profile_for(account)
    if profile is None:
        raise ResourceNotFound("Profile does not exist.")

    profile.delete()
    invalidate_paths(PROFILE_PATH)
    logger.info(f"Coach profile deleted for {account.id}")


def get_public_profile(coach_id):
    profile = (
        CoachProfile.objects
        .select_related("account")
        .filter(account_id=coach_id, account__role="COACH")
        .first()
    )
    if profile is None:
        raise ResourceNotFound("Profile not found.")
    return profile
