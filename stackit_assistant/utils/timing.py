"""
Latency measurement for remote assistant calls.
"""
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass


@dataclass
class Elapsed:
    seconds: float = 0.0


@asynccontextmanager
async def async_timer():
    """
    Measure the wall time of the enclosed block.
    
    The result is filled in on exit, including when the block raises,
    so timeouts and failed calls are still reported with their latency:
    
        async with async_timer() as elapsed:
            reply = await client.send(...)
        metrics.record_remote_call("success", elapsed.seconds)
    """
    elapsed = Elapsed()
    start = time.perf_counter()
    try:
        yield elapsed
    finally:
        elapsed.seconds = time.perf_counter() - start
