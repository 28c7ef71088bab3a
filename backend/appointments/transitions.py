"""
Appointment status graph.

Which status an appointment may move to, who may move it, and whether a
reason must be given. Everything here is a pure function over the static
TRANSITION_RULES table; persisting the change is the view's job.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional

from django.db import models

from users.roles import Role


class AppointmentStatus(models.TextChoices):
    SCHEDULED = "scheduled", "Scheduled"
    CONFIRMED = "confirmed", "Confirmed"
    IN_PROGRESS = "in_progress", "In progress"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
    NO_SHOW = "no_show", "No show"
    RESCHEDULED = "rescheduled", "Rescheduled"


ALL_ROLES = frozenset(Role.values)
MANAGERS = frozenset({Role.OWNER.value, Role.ADMIN.value})


def _plain(value):
    """Choices members and plain strings compare the same way in the rule table."""
    return getattr(value, "value", value)


class TransitionError(Exception):
    code = "transition_error"

    def __init__(self, message, current=None, target=None):
        self.current = current
        self.target = target
        super().__init__(message)


class InvalidTransition(TransitionError):
    code = "invalid_transition"


class ForbiddenRole(TransitionError):
    code = "forbidden_role"


class ReasonRequired(TransitionError):
    code = "reason_required"


@dataclass(frozen=True)
class TransitionRule:
    source: str
    destinations: FrozenSet[str]
    # None means any role; an empty set means nobody
    allowed_roles: Optional[FrozenSet[str]] = None
    requires_reason: bool = False

    def role_allowed(self, role):
        return self.allowed_roles is None or role in self.allowed_roles


_RULES = (
    TransitionRule("scheduled", frozenset({"confirmed", "cancelled", "rescheduled"}), ALL_ROLES),
    TransitionRule("confirmed", frozenset({"in_progress", "cancelled", "no_show", "rescheduled"}), ALL_ROLES),
    TransitionRule("in_progress", frozenset({"completed", "cancelled"}), ALL_ROLES),
    TransitionRule("completed", frozenset(), frozenset()),
    TransitionRule("cancelled", frozenset({"scheduled"}), MANAGERS, requires_reason=True),
    TransitionRule("no_show", frozenset({"scheduled"}), MANAGERS, requires_reason=True),
    TransitionRule("rescheduled", frozenset({"scheduled"}), ALL_ROLES),
)

TRANSITION_RULES = {rule.source: rule for rule in _RULES}


def _has_reason(reason):
    return isinstance(reason, str) and reason.strip() != ""


def check_transition(current, target, role, reason=None):
    """
    Validate moving an appointment from ``current`` to ``target`` by a user with ``role``.

    Checks run in order: destination, role, reason. Raises InvalidTransition,
    ForbiddenRole or ReasonRequired; returns None when the move is allowed.
    """
    current, target, role = _plain(current), _plain(target), _plain(role)
    rule = TRANSITION_RULES.get(current)
    if rule is None or target not in rule.destinations:
        raise InvalidTransition(
            f"Cannot change an appointment from '{current}' to '{target}'.",
            current=current,
            target=target,
        )

    if not rule.role_allowed(role):
        allowed = ", ".join(sorted(rule.allowed_roles)) or "nobody"
        raise ForbiddenRole(
            f"Only {allowed} may move an appointment from '{current}' to '{target}'.",
            current=current,
            target=target,
        )

    if rule.requires_reason and not _has_reason(reason):
        raise ReasonRequired(
            f"A reason is required to move an appointment from '{current}' to '{target}'.",
            current=current,
            target=target,
        )


def can_transition(current, target, role, reason=None) -> bool:
    try:
        check_transition(current, target, role, reason)
    except TransitionError:
        return False
    return True


def allowed_transitions(current, role):
    """Destinations ``role`` may pick from ``current``, in status declaration order."""
    current, role = _plain(current), _plain(role)
    rule = TRANSITION_RULES.get(current)
    if rule is None or not rule.role_allowed(role):
        return []
    return [status for status in AppointmentStatus.values if status in rule.destinations]


def requires_reason(current) -> bool:
    rule = TRANSITION_RULES.get(_plain(current))
    return bool(rule and rule.requires_reason)
