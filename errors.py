"""
Exceptions raised by the GroupLedger core
"""
from __future__ import annotations


class LedgerError(Exception):
    """Base exception for ledger computations"""
    pass


class InvalidInputError(LedgerError, ValueError):
    """Raised when a computation receives malformed input (NaN/inf money, unknown split, empty split)"""
    pass


class ValidationError(LedgerError, ValueError):
    """Raised when a record breaks a write-path rule"""
    pass
