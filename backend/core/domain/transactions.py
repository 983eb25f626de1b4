"""
core.domain.transactions — Helpers for safe compound writes.

Every mutating report operation follows the same shape: open
``transaction.atomic()``, lock the row with ``select_for_update``, change
one or more fields, append an audit entry and save.  These helpers keep
that shape identical across services.

Usage::

    from django.db import transaction
    from core.domain.transactions import lock_for_update, save_changed_fields

    with transaction.atomic():
        report = lock_for_update(Report, report_id)
        report.status = target
        save_changed_fields(report, ["status"])
        ...append history entry...
"""

from __future__ import annotations

from typing import Any, Iterable, TypeVar

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models

from core.domain.exceptions import NotFound

M = TypeVar("M", bound=models.Model)


def lock_for_update(model_class: type[M], pk: Any) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Convenience wrapper around ``select_for_update().get(pk=pk)``
    that must be called inside an ``atomic()`` block.

    Args:
        model_class: The Django model class.
        pk:          Primary key value.

    Returns:
        The locked model instance.

    Raises:
        NotFound: If no row with that PK exists (or the PK is malformed).
    """
    try:
        return model_class.objects.select_for_update().get(pk=pk)
    except (model_class.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFound(f"{model_class.__name__} with pk={pk} does not exist.")


def save_changed_fields(instance: models.Model, fields: Iterable[str]) -> None:
    """
    Save only ``fields`` plus ``updated_at``.

    ``updated_at`` is an ``auto_now`` field, so listing it in
    ``update_fields`` refreshes it on every call, including calls that
    only append history (``fields`` empty).
    """
    update_fields = set(fields)
    update_fields.add("updated_at")
    instance.save(update_fields=sorted(update_fields))
