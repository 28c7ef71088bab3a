import pytest

from appointments.transitions import (
    TRANSITION_RULES,
    AppointmentStatus,
    ForbiddenRole,
    InvalidTransition,
    ReasonRequired,
    allowed_transitions,
    can_transition,
    check_transition,
)
from users.roles import Role

OPEN_MOVES = [
    ("scheduled", "confirmed"),
    ("scheduled", "cancelled"),
    ("scheduled", "rescheduled"),
    ("confirmed", "in_progress"),
    ("confirmed", "cancelled"),
    ("confirmed", "no_show"),
    ("confirmed", "rescheduled"),
    ("in_progress", "completed"),
    ("in_progress", "cancelled"),
    ("rescheduled", "scheduled"),
]


@pytest.mark.parametrize("current,target", OPEN_MOVES)
@pytest.mark.parametrize("role", ["owner", "admin", "employee"])
def test_every_role_may_make_ordinary_moves(current, target, role):
    assert check_transition(current, target, role) is None


@pytest.mark.parametrize("target", AppointmentStatus.values)
def test_completed_is_terminal(target):
    with pytest.raises(InvalidTransition):
        check_transition("completed", target, "owner", reason="fix")


def test_skipping_ahead_is_invalid():
    with pytest.raises(InvalidTransition) as exc:
        check_transition("scheduled", "completed", "owner")
    assert exc.value.code == "invalid_transition"


def test_unknown_status_is_invalid():
    with pytest.raises(InvalidTransition):
        check_transition("archived", "scheduled", "owner")
    with pytest.raises(InvalidTransition):
        check_transition("scheduled", "archived", "owner")


@pytest.mark.parametrize("current", ["cancelled", "no_show"])
def test_employee_cannot_reopen(current):
    with pytest.raises(ForbiddenRole) as exc:
        check_transition(current, "scheduled", "employee", reason="client asked")
    assert exc.value.code == "forbidden_role"


@pytest.mark.parametrize("reason", [None, "", "   \n"])
def test_reopening_needs_a_reason(reason):
    with pytest.raises(ReasonRequired) as exc:
        check_transition("cancelled", "scheduled", "admin", reason=reason)
    assert exc.value.code == "reason_required"


def test_manager_reopens_with_reason():
    assert check_transition("no_show", "scheduled", "owner", reason="Client called to rebook") is None


def test_destination_is_checked_before_role():
    with pytest.raises(InvalidTransition):
        check_transition("cancelled", "confirmed", "employee")


def test_role_is_checked_before_reason():
    with pytest.raises(ForbiddenRole):
        check_transition("cancelled", "scheduled", "employee")


def test_unknown_role_cannot_reopen():
    assert can_transition("cancelled", "scheduled", None, reason="x") is False
    assert can_transition("cancelled", "scheduled", "receptionist", reason="x") is False


def test_choices_members_are_accepted():
    check_transition(AppointmentStatus.CANCELLED, AppointmentStatus.SCHEDULED, Role.OWNER, reason="rebooked")
    assert can_transition(AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED, Role.EMPLOYEE)


def test_can_transition_mirrors_check():
    assert can_transition("scheduled", "confirmed", "employee") is True
    assert can_transition("completed", "scheduled", "owner") is False


def test_allowed_transitions_follow_declaration_order():
    assert allowed_transitions("confirmed", "employee") == ["in_progress", "cancelled", "no_show", "rescheduled"]
    assert allowed_transitions("cancelled", "employee") == []
    assert allowed_transitions("cancelled", "owner") == ["scheduled"]
    assert allowed_transitions("completed", "owner") == []
    assert allowed_transitions("archived", "owner") == []


def test_every_status_has_a_rule():
    assert set(TRANSITION_RULES) == set(AppointmentStatus.values)


def test_results_are_deterministic():
    outcomes = {can_transition("confirmed", "no_show", "employee") for _ in range(50)}
    assert outcomes == {True}
