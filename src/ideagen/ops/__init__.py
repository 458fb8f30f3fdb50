"""
Operations layer.

Transport-agnostic functions shared by the CLI and the API.  Each takes an
:class:`OperationContext` and returns an :class:`OperationResult`.
"""

from ideagen.ops.context import OperationContext
from ideagen.ops.result import OperationError, OperationResult

__all__ = [
    "OperationContext",
    "OperationError",
    "OperationResult",
]
