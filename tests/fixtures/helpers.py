"""Test helper utilities."""

import asyncio
import json
import socket
from typing import Any, Optional


def find_free_port(start_port: int = 9000, end_port: int = 9100) -> Optional[int]:
    """Find a free port in the given range."""
    for port in range(start_port, end_port):
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
                sock.bind(("localhost", port))
                return port
        except OSError:
            continue
    return None


def frame(msg_type: str, payload: Any = None) -> str:
    """Encode an inbound frame the way a browser client would."""
    return json.dumps({"type": msg_type, "payload": payload if payload is not None else {}})


async def wait_for_condition(
    condition_func,
    timeout: float = 5.0,
    interval: float = 0.05,
    error_message: str = "Condition not met within timeout",
):
    """Wait for a condition to become true."""
    start_time = asyncio.get_running_loop().time()
    while asyncio.get_running_loop().time() - start_time < timeout:
        if await condition_func() if asyncio.iscoroutinefunction(condition_func) else condition_func():
            return True
        await asyncio.sleep(interval)
    raise TimeoutError(error_message)
