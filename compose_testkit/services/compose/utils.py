"""Shared helpers for the compose services."""

import asyncio
from typing import Any, Callable


async def run_in_executor(func: Callable[..., Any], *args: Any) -> Any:
    """
    Run a blocking function in the default thread pool executor.

    Args:
        func: Blocking function to run
        *args: Arguments to pass to the function

    Returns:
        Result of the function
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)
