import threading
import time
import uuid

_lock = threading.Lock()
_last_ms = 0


def generate_idea_id() -> str:
    """
    ``idea_<millis>_<random>``.

    The time part never goes backwards within a process (wall-clock steps
    back are clamped); the random part separates ideas created in the same
    millisecond.
    """
    global _last_ms
    with _lock:
        _last_ms = max(_last_ms, time.time_ns() // 1_000_000)
        millis = _last_ms
    return f"idea_{millis}_{uuid.uuid4().hex[:9]}"
