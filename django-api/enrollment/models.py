"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
Rosters and memberships are JSON columns so each aggregate is a single row
written by a single statement.
"""

import uuid

from django.db import models


class Room(models.Model):
    """Persistence model for rooms."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    number = models.CharField(max_length=50, unique=True)
    capacity = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["number"]

    def __str__(self) -> str:
        return self.number


class Event(models.Model):
    """Persistence model for events and their enrollment state."""

    class Kind(models.TextChoices):
        NO_SPEAKER = "no_speaker", "No speaker"
        ONE_SPEAKER = "one_speaker", "One speaker"
        MULTI_SPEAKER = "multi_speaker", "Multiple speakers"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name="events")
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    capacity = models.PositiveIntegerField()
    kind = models.CharField(max_length=20, choices=Kind.choices, default=Kind.NO_SPEAKER)
    speaker_ids = models.JSONField(default=list, blank=True)
    is_vip_only = models.BooleanField(default=False)
    signed_up = models.JSONField(default=list, blank=True)
    waitlist = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["room", "starts_at"], name="enrollment_event_room_start"),
        ]

    def __str__(self) -> str:
        return self.title


class Participant(models.Model):
    """Persistence model for participants and their event memberships."""

    class Role(models.TextChoices):
        ATTENDEE = "attendee", "Attendee"
        SPEAKER = "speaker", "Speaker"
        ORGANIZER = "organizer", "Organizer"
        VIP = "vip", "VIP"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=150, unique=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.ATTENDEE)
    is_vip = models.BooleanField(default=False)
    enrolled_events = models.JSONField(default=list, blank=True)
    waitlisted_events = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["username"]

    def __str__(self) -> str:
        return self.username
