from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from clients.mailria_client_sdk.errors import ApiError

RowT = TypeVar("RowT")


class ActionKind(str, Enum):
    DELETE = "delete"
    CHANGE_PASSWORD = "change_password"
    CREATE = "create"


class DialogPhase(str, Enum):
    IDLE = "idle"
    SELECTED = "selected"
    CONFIRMING = "confirming"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class InvalidTransition(RuntimeError):
    pass


@dataclass(frozen=True)
class PendingAction(Generic[RowT]):
    kind: ActionKind
    row: RowT | None = None


@dataclass(frozen=True)
class ConfirmOutcome:
    committed: bool
    result: Any = None
    error: ApiError | None = None


class ActionConfirmation(Generic[RowT]):
    """Dialog lifecycle for one destructive or credential-changing action.

    Idle -> Selected -> Confirming -> Committed | Cancelled -> Idle. The
    pending selection never outlives one confirm or cancel.
    """

    def __init__(self) -> None:
        self.phase = DialogPhase.IDLE
        self.pending: PendingAction[RowT] | None = None
        self.trail: list[DialogPhase] = [DialogPhase.IDLE]

    @property
    def is_open(self) -> bool:
        return self.phase in {DialogPhase.SELECTED, DialogPhase.CONFIRMING}

    def select(self, kind: ActionKind, row: RowT | None = None) -> PendingAction[RowT]:
        if self.phase is DialogPhase.CONFIRMING:
            raise InvalidTransition("an action is already being submitted")
        self.pending = PendingAction(kind=kind, row=row)
        self._move(DialogPhase.SELECTED)
        return self.pending

    def cancel(self) -> None:
        if self.phase is not DialogPhase.SELECTED:
            return
        self._move(DialogPhase.CANCELLED)
        self._reset()

    async def confirm(self, submit: Callable[[PendingAction[RowT]], Awaitable[Any]]) -> ConfirmOutcome:
        if self.phase is not DialogPhase.SELECTED or self.pending is None:
            raise InvalidTransition(f"cannot confirm from {self.phase.value}")
        pending = self.pending
        self._move(DialogPhase.CONFIRMING)
        try:
            result = await submit(pending)
        except ApiError as error:
            self._reset()
            return ConfirmOutcome(committed=False, error=error)
        except BaseException:
            self._reset()
            raise
        self._move(DialogPhase.COMMITTED)
        self._reset()
        return ConfirmOutcome(committed=True, result=result)

    def _reset(self) -> None:
        self.pending = None
        self._move(DialogPhase.IDLE)

    def _move(self, phase: DialogPhase) -> None:
        self.phase = phase
        self.trail.append(phase)
