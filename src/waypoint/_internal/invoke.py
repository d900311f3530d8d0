"""Invoke helper: call sync or async controllers uniformly.

Controllers can be ``def`` or ``async def``. Every place that calls
user code goes through ``invoke`` so the sync/async check lives in
exactly one place.
"""

import inspect
from typing import Any


async def invoke(fn: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *fn* and await the result if it is awaitable."""
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
