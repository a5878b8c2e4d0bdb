"""Django signals for cache invalidation.

Keys are dropped once the surrounding transaction commits, so a reader
cannot re-cache the listing as it was before the write.
"""

from django.core.cache import cache
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from kermesses.cache_keys import kermesse_tombolas_key
from kermesses.models import Kermesse, Tombola


def _delete_on_commit(key: str) -> None:
    transaction.on_commit(lambda: cache.delete(key))


@receiver(post_delete, sender=Kermesse)
def invalidate_kermesse_cache(sender, instance, **kwargs):
    """Drop the tombola listing of a deleted kermesse."""
    _delete_on_commit(kermesse_tombolas_key(instance.pk))


@receiver([post_save, post_delete], sender=Tombola)
def invalidate_tombola_cache(sender, instance, **kwargs):
    """Invalidate the tombola listing of the kermesse a tombola belongs to."""
    _delete_on_commit(kermesse_tombolas_key(instance.kermesse_id))
