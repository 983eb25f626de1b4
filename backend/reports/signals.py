"""
Feed wiring.

A new report and every appended history entry each schedule one
``feed.publish``.  Staff mutations always append exactly one entry, so
each committed operation yields one refresh per affected subscriber.
"""

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Report, ReportHistoryEntry
from .realtime import feed


def _publish_on_commit(report_id):
    transaction.on_commit(lambda: feed.publish(report_id), robust=True)


@receiver(post_save, sender=Report)
def on_report_created(sender, instance: Report, created, **kwargs):
    if created:
        _publish_on_commit(instance.pk)


@receiver(post_save, sender=ReportHistoryEntry)
def on_history_appended(sender, instance: ReportHistoryEntry, created, **kwargs):
    if created:
        _publish_on_commit(instance.report_id)
