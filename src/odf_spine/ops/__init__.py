"""
Operations layer: transport-agnostic frame and roster operations.

- All functions accept ``OperationContext`` as first argument
- All functions return ``OperationResult[T]`` (never raise)
- The API and CLI are thin renderings of these results

Usage::

    from odf_spine.ops import OperationContext
    from odf_spine.ops.frames import get_frame
    from odf_spine.storage import MemoryFrameStore

    ctx = OperationContext(store=MemoryFrameStore())
    result = get_frame(ctx, "North", "A")
    result.error.code   # 'NOT_FOUND'
"""

from odf_spine.ops.context import OperationContext
from odf_spine.ops.result import OperationError, OperationResult

__all__ = [
    "OperationContext",
    "OperationError",
    "OperationResult",
]
