"""
Push-based report feed.

A dashboard subscribes with ``feed.subscribe(user, listener)`` and gets
a ``ReportSnapshot`` (its scoped reports, newest first, plus stats)
immediately and again after every committed change to a report it can
see or could see before the change.  ``Subscription.cancel()`` stops
delivery.

Change notification is wired in ``reports.signals``: saving a report or
appending a history entry schedules ``feed.publish(report_id)`` with
``transaction.on_commit`` so subscribers never observe a rolled-back
write.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable

from django.db import DatabaseError
from django.db.models import Prefetch
from django.utils import timezone

from .models import Report, ReportHistoryEntry
from .services import ReportQueryService, ReportStatsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportSnapshot:
    reports: list[Report]
    stats: dict[str, Any]
    generated_at: Any = field(default_factory=timezone.now)

    @property
    def report_ids(self) -> frozenset:
        return frozenset(r.pk for r in self.reports)


Listener = Callable[[ReportSnapshot], None]


class Subscription:
    """Handle returned by ``ReportFeed.subscribe``."""

    def __init__(self, feed: ReportFeed, user: Any, listener: Listener):
        self.id = uuid.uuid4()
        self.user = user
        self.listener = listener
        self.visible_ids: frozenset = frozenset()
        self._feed = feed
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._feed._remove(self)


class ReportFeed:
    """Registry of live subscriptions; one process-wide instance is ``feed``."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: dict[uuid.UUID, Subscription] = {}

    def subscribe(self, user: Any, listener: Listener) -> Subscription:
        """
        Register ``listener`` for ``user``'s scoped view and deliver the
        current snapshot right away.

        Raises ``Unauthorized`` when ``user`` is not authenticated.
        """
        snapshot = self.snapshot(user)
        subscription = Subscription(self, user, listener)
        with self._lock:
            self._subscriptions[subscription.id] = subscription
        self._deliver(subscription, snapshot)
        return subscription

    def snapshot(self, user: Any) -> ReportSnapshot:
        reports = list(
            ReportQueryService.scoped_queryset(user).prefetch_related(
                Prefetch("history", queryset=ReportHistoryEntry.objects.order_by("sequence")),
            )
        )
        return ReportSnapshot(reports=reports, stats=ReportStatsService.compute(reports))

    def publish(self, report_id: Any) -> int:
        """
        Refresh every subscription affected by a change to ``report_id``.

        Returns the number of subscriptions notified.
        """
        with self._lock:
            subscriptions = list(self._subscriptions.values())

        notified = 0
        for subscription in subscriptions:
            was_visible = report_id in subscription.visible_ids
            try:
                is_visible = (
                    ReportQueryService.scoped_queryset(subscription.user)
                    .filter(pk=report_id)
                    .exists()
                )
                if not (was_visible or is_visible):
                    continue
                snapshot = self.snapshot(subscription.user)
            except DatabaseError:
                logger.exception(
                    "Report feed refresh for user %s after change to report %s failed",
                    getattr(subscription.user, "pk", None), report_id,
                )
                continue
            self._deliver(subscription, snapshot)
            notified += 1
        return notified

    def _deliver(self, subscription: Subscription, snapshot: ReportSnapshot) -> None:
        if not subscription.active:
            return
        subscription.visible_ids = snapshot.report_ids
        try:
            subscription.listener(snapshot)
        except Exception:
            logger.exception(
                "Report feed listener %s for user %s failed",
                subscription.id, getattr(subscription.user, "pk", None),
            )

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions.pop(subscription.id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)


feed = ReportFeed()
