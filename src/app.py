# src/app.py
from __future__ import annotations

import logging
import math
import os
from typing import List, Optional, Tuple

from inventory import load_inventory
from metrics import BALANCE_AMOUNT, DEPOSIT_TOTAL, DEPOSITED_AMOUNT_TOTAL, VEND_TOTAL
from vending_machine import (
    DEFAULT_DEPOSIT,
    InsufficientFunds,
    InvalidAmount,
    InvalidSelection,
    OutOfStock,
    StockInsufficient,
    VendingItem,
    VendingMachine,
    VendingMachineError,
    VendingSelection,
)

logger = logging.getLogger(__name__)

UNKNOWN_SELECTION = "unknown"

_OUTCOMES = {
    InvalidSelection: "invalid_selection",
    OutOfStock: "out_of_stock",
    StockInsufficient: "stock_insufficient",
    InsufficientFunds: "insufficient_funds",
    InvalidAmount: "invalid_amount",
}


def _initial_balance() -> float:
    raw = os.environ.get("VENDING_INITIAL_BALANCE")
    if raw is None:
        return DEFAULT_DEPOSIT
    try:
        balance = float(raw)
    except ValueError:
        balance = math.nan
    if not (math.isfinite(balance) and balance >= 0):
        logger.warning("Ignoring invalid VENDING_INITIAL_BALANCE", extra={"extra": {"value": raw}})
        return DEFAULT_DEPOSIT
    return balance


class VendingApp:
    """
    Presentation-facing wrapper around a ``VendingMachine``. Exposes
    deposit and vend as ``(ok, message)`` results so a UI can show the
    outcome without handling ledger exceptions itself.
    """

    def __init__(self, machine: Optional[VendingMachine] = None, inventory_path: Optional[str] = None) -> None:
        if machine is None:
            machine = VendingMachine(load_inventory(inventory_path), _initial_balance())
        self.machine = machine
        BALANCE_AMOUNT.set(self.machine.balance)

    @property
    def balance(self) -> float:
        return self.machine.balance

    def list_items(self) -> List[Tuple[VendingSelection, Optional[VendingItem]]]:
        return [(s, self.machine.item_for_current_selection(s)) for s in self.machine.selection]

    def deposit(self, amount: float) -> Tuple[bool, str]:
        try:
            self.machine.deposit(amount)
        except InvalidAmount as e:
            return False, str(e)
        DEPOSIT_TOTAL.inc()
        DEPOSITED_AMOUNT_TOTAL.inc(amount)
        BALANCE_AMOUNT.set(self.machine.balance)
        return True, f"Deposited ${amount:.2f}. Balance: ${self.machine.balance:.2f}"

    def vend(self, selection_name: str, quantity: float) -> Tuple[bool, str]:
        try:
            selection = VendingSelection(selection_name)
        except ValueError:
            # Free text from the caller never becomes a label value
            VEND_TOTAL.inc(selection=UNKNOWN_SELECTION, outcome="invalid_selection")
            return False, "Invalid selection."

        try:
            item = self.machine.vend(selection, quantity)
        except VendingMachineError as e:
            outcome = _OUTCOMES.get(type(e), "error")
            VEND_TOTAL.inc(selection=selection.value, outcome=outcome)
            logger.info("Vend failed", extra={"extra": {"selection": selection.value, "outcome": outcome}})
            return False, self._failure_message(selection, e)

        VEND_TOTAL.inc(selection=selection.value, outcome="success")
        BALANCE_AMOUNT.set(self.machine.balance)
        return True, (
            f"Vended {quantity:g} x {selection.value}. "
            f"{item.quantity:g} left. Balance: ${self.machine.balance:.2f}"
        )

    @staticmethod
    def _failure_message(selection: VendingSelection, error: VendingMachineError) -> str:
        if isinstance(error, InvalidSelection):
            return "Invalid selection."
        if isinstance(error, OutOfStock):
            return f"{selection.value} is out of stock."
        if isinstance(error, StockInsufficient):
            return f"Not enough {selection.value} in stock."
        if isinstance(error, InsufficientFunds):
            return f"Insufficient funds. Please deposit ${error.required:.2f} more."
        return str(error)
