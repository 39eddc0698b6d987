from enrollment.handlers.views import (
    CapacityView,
    EnrollmentDetailView,
    EnrollmentListView,
    EventDetailView,
    ParticipantDetailView,
    WaitlistDetailView,
    WaitlistView,
)

__all__ = [
    "CapacityView",
    "EnrollmentDetailView",
    "EnrollmentListView",
    "EventDetailView",
    "ParticipantDetailView",
    "WaitlistDetailView",
    "WaitlistView",
]
