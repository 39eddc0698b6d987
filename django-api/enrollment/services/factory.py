"""Wiring of the enrollment service to the Django-backed stores."""

from functools import lru_cache

from django.conf import settings

from enrollment.services.consistency import ConsistencyCoordinator
from enrollment.services.enrollment_service import EnrollmentService
from enrollment.stores.django_store import DjangoEnrollmentStore, DjangoRoomStore


@lru_cache(maxsize=None)
def get_enrollment_service() -> EnrollmentService:
    """Process-wide service so every request shares the same event locks."""
    store = DjangoEnrollmentStore()
    coordinator = ConsistencyCoordinator(
        store,
        attempts=settings.ENROLLMENT_WRITE_RETRY_ATTEMPTS,
        max_wait=settings.ENROLLMENT_WRITE_RETRY_MAX_WAIT,
    )
    return EnrollmentService(store=store, rooms=DjangoRoomStore(), coordinator=coordinator)
