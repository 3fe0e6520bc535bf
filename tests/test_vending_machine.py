# --- path/bootstrap (keep this at the very top) ---
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

for p in (SRC, ROOT):
    if p.is_dir() and str(p) not in sys.path:
        sys.path.insert(0, str(p))
# --- end path/bootstrap ---

import random
import unittest

from vending_machine import (
    InsufficientFunds,
    InvalidAmount,
    InvalidSelection,
    OutOfStock,
    StockInsufficient,
    VendingItem,
    VendingMachine,
    VendingMachineError,
    VendingSelection as S,
)


def snapshot(machine):
    return dict(machine.inventory), machine.balance


class TestVend(unittest.TestCase):
    """Purchase rules: check order, shortfall and state changes."""

    def setUp(self):
        self.machine = VendingMachine(
            {
                S.SODA: VendingItem(price=1.5, quantity=20),
                S.CHIPS: VendingItem(price=1.0, quantity=0),
                S.GUM: VendingItem(price=0.75, quantity=10),
                S.WATER: VendingItem(price=1.0, quantity=2),
            },
            amount_deposited=1000.0,
        )

    def test_successful_vend_updates_stock_and_balance(self):
        item = self.machine.vend(S.SODA, 1.0)
        self.assertEqual(item.quantity, 19)
        self.assertEqual(self.machine.item_for_current_selection(S.SODA).quantity, 19)
        self.assertEqual(self.machine.balance, 998.5)
        self.assertEqual(self.machine.amount_deposited, 998.5)

    def test_successful_vend_leaves_other_items_untouched(self):
        before = dict(self.machine.inventory)
        self.machine.vend(S.WATER, 2)
        for sel in (S.SODA, S.CHIPS, S.GUM):
            self.assertEqual(self.machine.inventory[sel], before[sel])
        self.assertEqual(self.machine.inventory[S.WATER].quantity, 0)
        self.assertEqual(self.machine.balance, 998.0)

    def test_price_is_preserved_on_vend(self):
        self.machine.vend(S.GUM, 4)
        self.assertEqual(self.machine.inventory[S.GUM].price, 0.75)

    def test_invalid_selection(self):
        before = snapshot(self.machine)
        with self.assertRaises(InvalidSelection):
            self.machine.vend(S.COOKIE, 1)
        self.assertEqual(snapshot(self.machine), before)

    def test_out_of_stock_regardless_of_quantity_or_balance(self):
        for qty in (1.0, 0, -3, 500):
            with self.assertRaises(OutOfStock):
                self.machine.vend(S.CHIPS, qty)
        broke = VendingMachine({S.CHIPS: VendingItem(price=1.0, quantity=0)}, amount_deposited=0.0)
        with self.assertRaises(OutOfStock):
            broke.vend(S.CHIPS, 1.0)

    def test_stock_insufficient(self):
        before = snapshot(self.machine)
        with self.assertRaises(StockInsufficient):
            self.machine.vend(S.WATER, 3)
        self.assertEqual(snapshot(self.machine), before)

    def test_stock_reported_before_funds(self):
        machine = VendingMachine({S.WATER: VendingItem(price=1.0, quantity=2)}, amount_deposited=0.0)
        with self.assertRaises(StockInsufficient):
            machine.vend(S.WATER, 5)

    def test_insufficient_funds_carries_shortfall(self):
        machine = VendingMachine({S.GUM: VendingItem(price=0.75, quantity=10)}, amount_deposited=0.0)
        with self.assertRaises(InsufficientFunds) as ctx:
            machine.vend(S.GUM, 1.0)
        self.assertAlmostEqual(ctx.exception.required, 0.75)
        self.assertEqual(machine.inventory[S.GUM].quantity, 10)
        self.assertEqual(machine.balance, 0.0)

    def test_insufficient_funds_partial_balance(self):
        machine = VendingMachine({S.SODA: VendingItem(price=1.5, quantity=20)}, amount_deposited=2.0)
        with self.assertRaises(InsufficientFunds) as ctx:
            machine.vend(S.SODA, 3)
        self.assertAlmostEqual(ctx.exception.required, 1.5 * 3 - 2.0)
        self.assertEqual(machine.inventory[S.SODA].quantity, 20)
        self.assertEqual(machine.balance, 2.0)

    def test_exact_funds_succeed(self):
        machine = VendingMachine({S.GUM: VendingItem(price=0.75, quantity=10)}, amount_deposited=1.5)
        machine.vend(S.GUM, 2)
        self.assertEqual(machine.balance, 0.0)
        self.assertEqual(machine.inventory[S.GUM].quantity, 8)

    def test_non_positive_quantity_rejected(self):
        before = snapshot(self.machine)
        for qty in (0, -1):
            with self.assertRaises(InvalidAmount):
                self.machine.vend(S.SODA, qty)
        self.assertEqual(snapshot(self.machine), before)

    def test_errors_share_base_class(self):
        for exc in (InvalidSelection, OutOfStock, StockInsufficient, InvalidAmount):
            self.assertTrue(issubclass(exc, VendingMachineError))
        self.assertTrue(issubclass(InsufficientFunds, VendingMachineError))
        self.assertTrue(issubclass(InvalidAmount, ValueError))

    def test_random_operations_keep_invariants(self):
        rng = random.Random(1234)
        selections = list(S)
        for _ in range(500):
            if rng.random() < 0.3:
                self.machine.deposit(rng.choice([0, 0.25, 1, 5]))
            else:
                try:
                    self.machine.vend(rng.choice(selections), rng.choice([1, 2, 5, 50]))
                except VendingMachineError:
                    pass
            self.assertGreaterEqual(self.machine.balance, 0)
            for item in self.machine.inventory.values():
                self.assertGreaterEqual(item.quantity, 0)
        self.assertEqual(set(self.machine.inventory), {S.SODA, S.CHIPS, S.GUM, S.WATER})


class TestLedger(unittest.TestCase):
    """Deposit, lookup and construction."""

    def test_deposit_increases_balance(self):
        machine = VendingMachine({}, amount_deposited=0.0)
        machine.deposit(2.5)
        machine.deposit(0)
        self.assertEqual(machine.balance, 2.5)

    def test_negative_deposit_rejected(self):
        machine = VendingMachine({}, amount_deposited=1.0)
        with self.assertRaises(InvalidAmount):
            machine.deposit(-1)
        self.assertEqual(machine.balance, 1.0)

    def test_default_balance(self):
        self.assertEqual(VendingMachine({}).balance, 1000.0)

    def test_negative_initial_balance_rejected(self):
        with self.assertRaises(InvalidAmount):
            VendingMachine({}, amount_deposited=-5)

    def test_item_lookup_absent_returns_none(self):
        machine = VendingMachine({S.SODA: VendingItem(1.5, 20)})
        self.assertEqual(machine.item_for_current_selection(S.SODA), VendingItem(1.5, 20))
        self.assertIsNone(machine.item_for_current_selection(S.GUM))

    def test_inventory_is_copied(self):
        source = {S.SODA: VendingItem(1.5, 20)}
        machine = VendingMachine(source)
        source[S.GUM] = VendingItem(0.75, 10)
        machine.vend(S.SODA, 1)
        self.assertNotIn(S.GUM, machine.inventory)
        self.assertEqual(source[S.SODA].quantity, 20)

    def test_selection_lists_every_product(self):
        machine = VendingMachine({})
        self.assertEqual(len(machine.selection), 12)
        self.assertEqual(machine.selection[0], S.SODA)
        self.assertEqual(machine.selection[-1], S.GUM)

    def test_selection_cannot_be_mutated_across_machines(self):
        first, second = VendingMachine({}), VendingMachine({})
        self.assertIsInstance(first.selection, tuple)
        with self.assertRaises(AttributeError):
            first.selection.append(S.SODA)
        self.assertEqual(len(second.selection), 12)

    def test_invalid_selection_message_uses_product_name(self):
        machine = VendingMachine({})
        with self.assertRaises(InvalidSelection) as ctx:
            machine.vend(S.COOKIE, 1)
        self.assertEqual(str(ctx.exception), "Cookie is not available")


NON_FINITE = (float("nan"), float("inf"), float("-inf"))


class TestNonFiniteAmounts(unittest.TestCase):
    """NaN and infinity never reach the balance or the stock."""

    def setUp(self):
        self.machine = VendingMachine({S.SODA: VendingItem(price=1.5, quantity=20)}, amount_deposited=10.0)

    def test_deposit_rejects_non_finite(self):
        for amount in NON_FINITE:
            with self.assertRaises(InvalidAmount):
                self.machine.deposit(amount)
        self.assertEqual(self.machine.balance, 10.0)

    def test_vend_rejects_non_finite_quantity(self):
        for qty in NON_FINITE:
            with self.assertRaises(InvalidAmount):
                self.machine.vend(S.SODA, qty)
        self.assertEqual(self.machine.inventory[S.SODA].quantity, 20)
        self.assertEqual(self.machine.balance, 10.0)

    def test_out_of_stock_still_wins_over_non_finite_quantity(self):
        machine = VendingMachine({S.CHIPS: VendingItem(price=1.0, quantity=0)})
        with self.assertRaises(OutOfStock):
            machine.vend(S.CHIPS, float("nan"))

    def test_initial_balance_rejects_non_finite(self):
        for amount in NON_FINITE:
            with self.assertRaises(InvalidAmount):
                VendingMachine({}, amount_deposited=amount)

    def test_random_operations_with_non_finite_inputs_keep_invariants(self):
        rng = random.Random(99)
        amounts = [0, 0.5, 2, float("nan"), float("inf"), -1]
        for _ in range(300):
            try:
                if rng.random() < 0.4:
                    self.machine.deposit(rng.choice(amounts))
                else:
                    self.machine.vend(S.SODA, rng.choice(amounts))
            except VendingMachineError:
                pass
            self.assertGreaterEqual(self.machine.balance, 0)
            self.assertGreaterEqual(self.machine.inventory[S.SODA].quantity, 0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
