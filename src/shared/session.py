"""Session context and the alert lifecycle state machine.

The application only exposes these as "whatever the UI currently shows".
Here they are explicit values: SessionContext is replaced after every
confirmed company/stack/user change, and AlertFixture moves through
AlertState only along ALLOWED_TRANSITIONS.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, Optional

from src.shared.errors import InvalidTransitionError

__all__ = [
    'ALLOWED_TRANSITIONS',
    'AlertFixture',
    'AlertState',
    'SessionContext',
    'Stack',
    'validate_transition',
]


class Stack(Enum):
    """The two alert queues of the command dashboard."""

    INCIDENT = "Incident"
    SITUATION = "Situation"

    @property
    def other(self) -> "Stack":
        return Stack.SITUATION if self is Stack.INCIDENT else Stack.INCIDENT

    @classmethod
    def from_label(cls, label: str) -> "Stack":
        normalized = (label or "").strip().lower()
        for stack in cls:
            if stack.value.lower() == normalized:
                return stack
        raise ValueError(f"Unknown stack: {label!r}")


class AlertState(Enum):
    OPEN = "open"
    ESCALATED = "escalated"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


ALLOWED_TRANSITIONS: Dict[AlertState, FrozenSet[AlertState]] = {
    AlertState.OPEN: frozenset({AlertState.ESCALATED, AlertState.DISMISSED}),
    AlertState.ESCALATED: frozenset({AlertState.RESOLVED, AlertState.DISMISSED}),
    AlertState.RESOLVED: frozenset(),
    AlertState.DISMISSED: frozenset(),
}

# Transitions that need a completed SOP questionnaire first
SOP_GATED = frozenset({AlertState.ESCALATED, AlertState.DISMISSED})


def validate_transition(from_state: AlertState, to_state: AlertState) -> None:
    """Raise InvalidTransitionError unless from_state -> to_state is allowed."""
    if to_state not in ALLOWED_TRANSITIONS[from_state]:
        raise InvalidTransitionError(from_state, to_state)


@dataclass(frozen=True)
class SessionContext:
    """The authenticated user, selected tenant and active stack of one browser session."""

    company: Optional[str] = None
    stack: Stack = Stack.INCIDENT
    user: Optional[str] = None

    def with_company(self, company: str) -> "SessionContext":
        return replace(self, company=company)

    def with_stack(self, stack: Stack) -> "SessionContext":
        return replace(self, stack=stack)

    def with_user(self, user: str) -> "SessionContext":
        return replace(self, user=user)


@dataclass(frozen=True)
class AlertFixture:
    """A synthetic alert created by the suite and tracked through its lifecycle."""

    site: str
    alert_type: str  # 'Manual Alert', 'Unusual Behaviour', 'Trex', 'LPR'
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    state: AlertState = AlertState.OPEN
    sop_complete: bool = False
    flagged: bool = False

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.state]

    @property
    def stack(self) -> Optional[Stack]:
        """Stack the alert's card is shown on, or None once it left the active view."""
        if self.state is AlertState.OPEN:
            return Stack.INCIDENT
        if self.state is AlertState.ESCALATED:
            return Stack.SITUATION
        return None

    def with_sop_complete(self) -> "AlertFixture":
        return replace(self, sop_complete=True)

    def with_flag(self, flagged: bool = True) -> "AlertFixture":
        """Return the fixture with its flag set or cleared.

        Raises:
            InvalidTransitionError: If the alert already left the active stacks
        """
        if self.is_terminal:
            raise InvalidTransitionError(self.state, self.state, "closed alerts cannot be flagged")
        return replace(self, flagged=flagged)

    def transition(self, to_state: AlertState) -> "AlertFixture":
        """Return the fixture in to_state.

        Escalating and dismissing require a completed SOP. A new SOP is due
        once the alert lands on the Situation stack.

        Raises:
            InvalidTransitionError: If the edge is not allowed or the SOP is incomplete
        """
        validate_transition(self.state, to_state)
        if to_state in SOP_GATED and not self.sop_complete:
            raise InvalidTransitionError(self.state, to_state, "SOP not completed")
        return replace(self, state=to_state, sop_complete=False)
