"""Application-wide identifier utilities."""

from __future__ import annotations

import secrets
import threading
import time

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_state = {"millis": 0, "counter": 0}
_state_lock = threading.Lock()


def _base36(value: int) -> str:
    digits: list[str] = []
    while True:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
        if not value:
            break
    return "".join(reversed(digits))


def _next_counter(now_millis: int) -> int:
    with _state_lock:
        if now_millis == _state["millis"]:
            _state["counter"] += 1
        else:
            _state["millis"] = now_millis
            _state["counter"] = 0
        return _state["counter"]


def generate_cuid(length: int = 24) -> str:
    """Generate a sortable, collision-resistant lowercase id with a `c` prefix.

    Layout: `c` + base36 milliseconds + 4-char base36 counter + random tail.
    Ids generated later in the same process sort after earlier ones.
    """
    now_millis = int(time.time() * 1000)
    counter = _next_counter(now_millis)
    body_length = max(length - 1, 8)
    head = f"{_base36(now_millis)}{_base36(counter).rjust(4, '0')}"
    tail = "".join(secrets.choice(_BASE36) for _ in range(max(body_length - len(head), 0)))
    return f"c{(head + tail)[:body_length]}"
