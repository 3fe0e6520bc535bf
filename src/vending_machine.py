"""
Vending machine ledger: catalog of items, deposited balance and the
purchase rules that gate a vend.

A purchase is checked in a fixed order (selection exists, item in stock,
enough stock for the request, enough funds) and only mutates state once
every check has passed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from threading import Lock
from typing import Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_DEPOSIT = 1000.0


# ---------- Errors ----------

class VendingMachineError(Exception):
    """Base class for purchase failures reported to the caller."""


class InvalidSelection(VendingMachineError):
    """The requested selection is not stocked by this machine."""


class OutOfStock(VendingMachineError):
    """The item exists but none are left."""


class StockInsufficient(VendingMachineError):
    """Fewer items remain than were requested."""


class InsufficientFunds(VendingMachineError):
    """The deposited balance does not cover the purchase."""

    def __init__(self, required: float) -> None:
        super().__init__(f"Insufficient funds: {required:.2f} more required")
        self.required = required


class InvalidAmount(VendingMachineError, ValueError):
    """A deposit was negative or not finite, or a quantity was not a finite positive number."""


# ---------- Domain types ----------

class VendingSelection(Enum):
    SODA = "Soda"
    DIET_SODA = "DietSoda"
    CHIPS = "Chips"
    COOKIE = "Cookie"
    SANDWICH = "Sandwich"
    WRAP = "Wrap"
    CANDY_BAR = "CandyBar"
    POP_TART = "PopTart"
    WATER = "Water"
    FRUIT_JUICE = "FruitJuice"
    SPORTS_DRINK = "SportsDrink"
    GUM = "Gum"


@dataclass(frozen=True)
class VendingItem:
    """Price and remaining quantity for one selection."""
    price: float
    quantity: float


class VendingMachine:
    """
    Holds the inventory and the amount deposited, and enforces the
    preconditions of a purchase. The set of stocked selections is fixed
    when the machine is built.
    """

    selection: Tuple[VendingSelection, ...] = tuple(VendingSelection)

    def __init__(
        self,
        inventory: Mapping[VendingSelection, VendingItem],
        amount_deposited: float = DEFAULT_DEPOSIT,
    ) -> None:
        if not (math.isfinite(amount_deposited) and amount_deposited >= 0):
            raise InvalidAmount("Initial balance must be a finite, non-negative amount.")
        self.inventory: Dict[VendingSelection, VendingItem] = dict(inventory)
        self.amount_deposited = float(amount_deposited)
        self._lock = Lock()

    @property
    def balance(self) -> float:
        return self.amount_deposited

    def deposit(self, amount: float) -> None:
        if not math.isfinite(amount):
            raise InvalidAmount("Deposit amount must be a finite number.")
        if amount < 0:
            raise InvalidAmount("Deposit amount cannot be negative.")
        with self._lock:
            self.amount_deposited += amount
        logger.info("Deposit accepted", extra={"extra": {"amount": amount}})

    def item_for_current_selection(self, selection: VendingSelection) -> Optional[VendingItem]:
        return self.inventory.get(selection)

    def vend(self, selection: VendingSelection, quantity: float) -> VendingItem:
        """
        Dispense ``quantity`` units of ``selection`` and charge the balance.

        Raises:
            InvalidSelection: the selection is not in the inventory.
            OutOfStock: the item has no units left.
            InvalidAmount: ``quantity`` is not a finite positive number.
            StockInsufficient: fewer units remain than requested.
            InsufficientFunds: the balance is short; ``required`` holds the
                shortfall.

        Returns:
            The updated item as stored in the inventory.
        """
        name = getattr(selection, "value", selection)
        with self._lock:
            item = self.inventory.get(selection)
            if item is None:
                logger.debug("Vend rejected: invalid selection", extra={"extra": {"selection": name}})
                raise InvalidSelection(f"{name} is not available")

            if not item.quantity > 0:
                logger.debug("Vend rejected: out of stock", extra={"extra": {"selection": name}})
                raise OutOfStock(f"{name} is out of stock")

            if not math.isfinite(quantity) or quantity <= 0:
                raise InvalidAmount("Quantity must be a finite positive number.")

            if item.quantity - quantity < 0:
                logger.debug(
                    "Vend rejected: stock insufficient",
                    extra={"extra": {"selection": name, "quantity": quantity}},
                )
                raise StockInsufficient(f"Only {item.quantity:g} {name} left")

            total_price = item.price * quantity
            if self.amount_deposited < total_price:
                required = total_price - self.amount_deposited
                logger.debug(
                    "Vend rejected: insufficient funds",
                    extra={"extra": {"selection": name, "amount": required}},
                )
                raise InsufficientFunds(required=required)

            updated = replace(item, quantity=item.quantity - quantity)
            self.inventory[selection] = updated
            self.amount_deposited -= total_price

        logger.info(
            "Vended item",
            extra={"extra": {"selection": name, "quantity": quantity, "amount": total_price}},
        )
        return updated
