"""Django signals for cache invalidation."""

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from enrollment.cache import invalidate_event
from enrollment.models import Event


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Retire the cached roster when an event is saved or deleted.

    Invalidated again once the transaction commits: a read between the write
    and the commit still sees the old row and must not outlive the commit.
    """
    event_id = instance.pk
    invalidate_event(event_id)
    transaction.on_commit(lambda: invalidate_event(event_id))
