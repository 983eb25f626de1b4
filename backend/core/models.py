"""Abstract model bases."""

from django.db import models


class TimeStampedModel(models.Model):
    """
    Server-side submission and modification times.

    ``created_at`` is the ordering key for report listings and the
    reference point for the overdue rule.  ``updated_at`` moves on every
    save, which includes each staff mutation that appends history.
    """

    created_at = models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Submitted At")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Last Updated")

    class Meta:
        abstract = True
