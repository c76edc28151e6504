"""JSON logging, secret scrubbing and trace ids for every corgo process."""

from __future__ import annotations

from shared.logging.config import RedactingFilter, setup_logging
from shared.logging.structured import JsonFormatter, get_trace_id, set_trace_id

__all__ = ["JsonFormatter", "RedactingFilter", "get_trace_id", "set_trace_id", "setup_logging"]
