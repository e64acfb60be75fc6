"""
Issue id generation.

Ids are 24 hex characters: 16 for a nanosecond timestamp followed by 8
random ones. The timestamp part never repeats or goes backwards within a
process, so sorting ids as strings gives insertion order.
"""

import secrets
import threading
import time

_lock = threading.Lock()
_last_ns = 0


def new_issue_id() -> str:
    global _last_ns
    with _lock:
        now = time.time_ns()
        _last_ns = now if now > _last_ns else _last_ns + 1
        stamp = _last_ns
    return f"{stamp:016x}{secrets.token_hex(4)}"
