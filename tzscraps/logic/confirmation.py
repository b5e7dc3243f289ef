from dataclasses import dataclass
from enum import Enum


class Confirmation(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass
class Notification:
    """Dismissible, user-facing message about the outcome of an action."""

    message: str
    severity: str = "success"  # success | info | warning | error


@dataclass
class PendingDeletion:
    """
    First step of a destructive action. Nothing is deleted until the owner
    resolves it after `confirm()`; `cancel()` leaves everything as it was.
    """

    target_id: str
    message: str
    status: Confirmation = Confirmation.PENDING

    def confirm(self) -> "PendingDeletion":
        self._settle(Confirmation.CONFIRMED)
        return self

    def cancel(self) -> "PendingDeletion":
        self._settle(Confirmation.CANCELLED)
        return self

    def _settle(self, status: Confirmation):
        if self.status != Confirmation.PENDING:
            raise ValueError(f"Deletion of {self.target_id} is already {self.status.value}")
        self.status = status

    @property
    def is_confirmed(self) -> bool:
        return self.status == Confirmation.CONFIRMED

    def ensure_settled(self):
        if self.status == Confirmation.PENDING:
            raise ValueError(f"Deletion of {self.target_id} has not been confirmed")
