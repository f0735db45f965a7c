"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .ledger_client_protocol import LedgerClientProtocol, NotaryClientProtocol

__all__ = ["LedgerClientProtocol", "NotaryClientProtocol"]
