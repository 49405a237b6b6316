"""
Custom exceptions for the benchmark harness.
"""
from __future__ import annotations

from typing import Optional


class ContractViolation(AssertionError):
    """
    Raised when a backend breaks the Store contract.

    This is a fail-fast error: it signals a backend bug, never a transient
    condition, so the run stops instead of retrying.
    """

    def __init__(self, kind: str, phase: str, detail: str):
        """
        Initialize contract violation.

        Args:
            kind: Label of the offending backend.
            phase: Benchmark phase during which the violation was detected.
            detail: Human-readable description of the broken invariant.
        """
        self.kind = kind
        self.phase = phase
        self.detail = detail
        super().__init__(f"{kind} violated the store contract during {phase}: {detail}")


class BackendOperationError(RuntimeError):
    """
    Raised by a store running under the strict failure policy when the
    underlying engine fails a single operation.
    """

    def __init__(self, kind: str, operation: str, key: Optional[str] = None):
        self.kind = kind
        self.operation = operation
        self.key = key
        target = f" key={key!r}" if key is not None else ""
        super().__init__(f"{kind} failed {operation}{target}")


__all__ = ["BackendOperationError", "ContractViolation"]
