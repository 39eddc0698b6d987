from django.contrib import admin

from enrollment.models import Event, Participant, Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ["number", "capacity", "created_at"]
    search_fields = ["number"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "room", "starts_at", "capacity", "is_vip_only"]
    list_filter = ["room", "kind", "is_vip_only"]
    search_fields = ["title"]


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ["username", "role", "is_vip"]
    list_filter = ["role", "is_vip"]
    search_fields = ["username"]
