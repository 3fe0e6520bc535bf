"""
Command‑line interface for the vending machine.

This script wires the ``VendingApp`` class into an interactive CLI
loop.  It prompts the user for input, invokes methods on the
``VendingApp`` instance and prints results.  Separating the CLI from
the ledger keeps the latter testable and free from I/O code.
"""

import sys

import logging_config
from app import VendingApp
from inventory import InventoryError


def interactive_cli() -> None:
    """Provide a simple command‑line interface to the vending machine."""
    logging_config.configure_logging()
    try:
        app = VendingApp()
    except InventoryError as e:
        print(f"Could not load inventory: {e}")
        return

    def print_menu() -> None:
        print("\n-- Vending Machine --")
        print("1. List Items")
        print("2. Deposit")
        print("3. Vend")
        print("4. Show Balance")
        print("0. Exit")

    while True:
        print_menu()
        choice = input("Select an option: ").strip()
        if choice == "1":
            print("\nSelections:")
            for selection, item in app.list_items():
                if item is None:
                    print(f"{selection.value} - not stocked")
                else:
                    print(f"{selection.value} - ${item.price:.2f} (Left: {item.quantity:g})")
        elif choice == "2":
            try:
                amount = float(input("Amount: "))
            except ValueError:
                print("Please enter a valid amount.")
                continue
            ok, msg = app.deposit(amount)
            print(msg)
        elif choice == "3":
            name = input("Selection: ").strip()
            try:
                qty = float(input("Quantity: "))
            except ValueError:
                print("Please enter a valid quantity.")
                continue
            ok, msg = app.vend(name, qty)
            print(msg)
        elif choice == "4":
            print(f"Balance: ${app.balance:.2f}")
        elif choice == "0":
            print("Exiting vending machine.")
            break
        else:
            print("Invalid option. Please try again.")


def main() -> None:
    try:
        interactive_cli()
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting.")
        sys.exit(0)


if __name__ == "__main__":
    main()
