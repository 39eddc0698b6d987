"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class WaitlistEntrySerializer(serializers.Serializer):
    """Serializer for WaitlistEntry domain model."""

    participant_id = serializers.CharField()
    is_vip = serializers.BooleanField()


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model, including its roster."""

    id = serializers.CharField()
    title = serializers.CharField()
    room_id = serializers.CharField()
    starts_at = serializers.DateTimeField()
    ends_at = serializers.DateTimeField()
    capacity = serializers.SerializerMethodField()
    remaining_capacity = serializers.IntegerField()
    kind = serializers.SerializerMethodField()
    speaker_ids = serializers.ListField(child=serializers.CharField())
    is_vip_only = serializers.BooleanField()
    signed_up = serializers.ListField(child=serializers.CharField())
    waitlist = WaitlistEntrySerializer(many=True)

    def get_capacity(self, obj) -> int:
        return obj.capacity.value

    def get_kind(self, obj) -> str:
        return obj.kind.value


class ParticipantSerializer(serializers.Serializer):
    """Serializer for Participant domain model and memberships."""

    id = serializers.CharField()
    username = serializers.CharField()
    role = serializers.SerializerMethodField()
    is_vip = serializers.BooleanField()
    enrolled_events = serializers.SerializerMethodField()
    waitlisted_events = serializers.SerializerMethodField()

    def get_role(self, obj) -> str:
        return obj.role.value

    def get_enrolled_events(self, obj) -> list[str]:
        return sorted(str(event_id) for event_id in obj.enrolled_events)

    def get_waitlisted_events(self, obj) -> list[str]:
        return sorted(str(event_id) for event_id in obj.waitlisted_events)


class ParticipantRefSerializer(serializers.Serializer):
    """Request body naming the acting participant."""

    participant_id = serializers.CharField()


class CapacityChangeSerializer(serializers.Serializer):
    """Request body for a capacity change."""

    capacity = serializers.IntegerField()
