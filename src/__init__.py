"""Top‑level package for the vending machine.

The ledger and its purchase rules live in :mod:`vending_machine`, inventory
loading in :mod:`inventory` and the presentation-facing wrapper in :mod:`app`.
"""
