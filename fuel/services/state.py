# fuel/services/state.py
"""
Fuel transaction status machine.

    pending   -> confirmed -> completed -> flagged -> completed (resolved, not fraud)
    pending   -> cancelled
    confirmed -> cancelled
    completed | flagged -> flagged   (admin override)
"""
from core.exceptions import ConflictError
from fuel.models import FuelTransactionStatus as S


class TxAction:
    CONFIRM = "confirm"
    SUBMIT = "submit"
    CANCEL = "cancel"
    AUTO_FLAG = "auto_flag"
    ADMIN_FLAG = "admin_flag"
    CLEAR = "clear"


TRANSITIONS = {
    (S.PENDING, TxAction.CONFIRM): S.CONFIRMED,
    (S.CONFIRMED, TxAction.SUBMIT): S.COMPLETED,
    (S.PENDING, TxAction.CANCEL): S.CANCELLED,
    (S.CONFIRMED, TxAction.CANCEL): S.CANCELLED,
    (S.COMPLETED, TxAction.AUTO_FLAG): S.FLAGGED,
    (S.FLAGGED, TxAction.AUTO_FLAG): S.FLAGGED,
    (S.COMPLETED, TxAction.ADMIN_FLAG): S.FLAGGED,
    (S.FLAGGED, TxAction.ADMIN_FLAG): S.FLAGGED,
    (S.FLAGGED, TxAction.CLEAR): S.COMPLETED,
    (S.COMPLETED, TxAction.CLEAR): S.COMPLETED,
}

MESSAGES = {
    (S.COMPLETED, TxAction.CANCEL): "Cannot cancel completed transaction",
    (S.FLAGGED, TxAction.CANCEL): "Cannot cancel completed transaction",
    (S.CANCELLED, TxAction.CANCEL): "Transaction is already cancelled",
    (S.PENDING, TxAction.SUBMIT): "Transaction must be confirmed before submission. Current status: pending",
}


def transition(current: str, action: str) -> str:
    target = TRANSITIONS.get((current, action))
    if target is None:
        message = MESSAGES.get(
            (current, action),
            f"Cannot {action.replace('_', ' ')} a transaction in status {current}",
        )
        raise ConflictError(message, status=str(current))
    return target
