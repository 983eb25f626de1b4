"""
core.domain.exceptions — errors raised by the service layer.

Services never raise DRF exceptions; ``core.domain.exception_handler``
translates these at the API boundary:

=====================  ====
DomainError            400
Unauthorized           401
PermissionDenied       403
NotFound               404
Conflict               409
InvalidTransition      409
=====================  ====

``EnrichmentFailed`` is raised by the external collaborators in
``reports.integrations`` and caught by the submission workflow, so it
does not reach a client.
"""

from __future__ import annotations


class DomainError(Exception):
    """A business rule rejected the operation."""

    default_message = "A business rule was violated."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(DomainError):
    default_message = "Authentication is required for this operation."


class PermissionDenied(DomainError):
    """The actor's role lacks the capability, or the actor does not own the report."""

    default_message = "You do not have permission to perform this action."


class NotFound(DomainError):
    """Missing, or outside the actor's visibility scope."""

    default_message = "The requested resource was not found."


class Conflict(DomainError):
    """
    The write clashes with stored state: a duplicate account field, or
    an attempt to rewrite report history.
    """

    default_message = "The operation conflicts with the current state."


class InvalidTransition(Conflict):
    """
    A status change that would move a report backwards.

    Either pass a ready message, or ``current`` / ``target`` (and an
    optional ``reason``) to have one composed::

        raise InvalidTransition(current="resolved", target="submitted")
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        self.current = current
        self.target = target
        self.reason = reason
        if message is None:
            message = "Invalid status change"
            if current and target:
                message += f" from '{current}' to '{target}'"
            if reason:
                message += f" ({reason})"
            message += "."
        super().__init__(message)


class EnrichmentFailed(DomainError):
    """
    Location capture, media upload or priority classification produced
    nothing usable.  ``step`` names which one.
    """

    default_message = "Enrichment step failed."

    def __init__(self, message: str | None = None, *, step: str | None = None) -> None:
        self.step = step
        super().__init__(message)
