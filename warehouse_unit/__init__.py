"""Warehouse logistics twin: production pool, carriers, storage ledger and shop."""

__version__ = "0.1.0"
