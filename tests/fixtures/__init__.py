"""Test fixtures for in-memory implementations."""

from .in_memory_ledger import TestLedgerClient, TestNotaryClient, make_receipt

__all__ = [
    "TestLedgerClient",
    "TestNotaryClient",
    "make_receipt",
]
