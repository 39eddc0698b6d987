from django.urls import path

from enrollment.handlers import (
    CapacityView,
    EnrollmentDetailView,
    EnrollmentListView,
    EventDetailView,
    ParticipantDetailView,
    WaitlistDetailView,
    WaitlistView,
)

urlpatterns = [
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/enrollments",
        EnrollmentListView.as_view(),
        name="enrollment-list",
    ),
    path(
        "events/<str:event_id>/enrollments/<str:participant_id>",
        EnrollmentDetailView.as_view(),
        name="enrollment-detail",
    ),
    path("events/<str:event_id>/waitlist", WaitlistView.as_view(), name="waitlist"),
    path(
        "events/<str:event_id>/waitlist/<str:participant_id>",
        WaitlistDetailView.as_view(),
        name="waitlist-detail",
    ),
    path("events/<str:event_id>/capacity", CapacityView.as_view(), name="event-capacity"),
    path(
        "participants/<str:participant_id>",
        ParticipantDetailView.as_view(),
        name="participant-detail",
    ),
]
