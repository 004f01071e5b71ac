"""
Call logging for external collaborators (knowledge base, PDF converters).

Each call appends one JSON line to $SOW_CALL_LOG_DIR/collaborator_calls.log:
{"ts": timestamp, "collaborator": name, "operation": method, "latency_ms": X, "status": ...}
"""

import json
import logging
import os
import time
from datetime import datetime
from functools import wraps

logger = logging.getLogger(__name__)

CALL_LOG_FILENAME = "collaborator_calls.log"


def _call_log_path() -> str:
    log_dir = os.getenv("SOW_CALL_LOG_DIR", "logs")
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        log_dir = "/tmp/logs"
        os.makedirs(log_dir, exist_ok=True)
    if not os.access(log_dir, os.W_OK):
        log_dir = "/tmp/logs"
        os.makedirs(log_dir, exist_ok=True)
    return os.path.join(log_dir, CALL_LOG_FILENAME)


def _write_entry(entry: dict) -> None:
    try:
        with open(_call_log_path(), "a") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError as e:
        logger.warning(f"Could not write collaborator call log: {e}")


def log_call(func):
    """
    Decorator recording timing and outcome of a collaborator method.

    The instance's ``collaborator_name`` attribute names the collaborator.
    Exceptions are logged and re-raised unchanged.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        start_time = time.time()
        collaborator = getattr(self, "collaborator_name", type(self).__name__)

        try:
            result = func(self, *args, **kwargs)
        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            _write_entry(
                {
                    "ts": datetime.now().isoformat(),
                    "collaborator": collaborator,
                    "operation": func.__name__,
                    "latency_ms": latency_ms,
                    "status": "failed",
                    "error": str(e),
                }
            )
            raise

        latency_ms = int((time.time() - start_time) * 1000)
        entry = {
            "ts": datetime.now().isoformat(),
            "collaborator": collaborator,
            "operation": func.__name__,
            "latency_ms": latency_ms,
            "status": "ok",
        }
        if isinstance(result, (bytes, bytearray)):
            entry["bytes_out"] = len(result)
        _write_entry(entry)
        return result

    return wrapper
