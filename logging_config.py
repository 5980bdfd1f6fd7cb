"""Logging configuration with optional Supabase log shipping.

This module provides:
- PlainFormatter for stderr output
- JSONFormatter for structured entries ([TAG] prefix parsed out)
- SupabaseHandler that batches entries into the "logs" table
"""

import atexit
import logging
import re
import sys
import threading
import time
from queue import Queue, Empty
from typing import Optional


class JSONFormatter(logging.Formatter):
    """Turns a record into a dict row for the logs table."""

    def __init__(self, service_name: str = None):
        super().__init__()
        self.service_name = service_name or "unknown"

    def format(self, record: logging.LogRecord) -> dict:
        # [TAG] message
        tag = None
        message = record.getMessage()
        tag_match = re.match(r'\[([A-Z_]+)\]\s*(.*)', message)
        if tag_match:
            tag = tag_match.group(1)
            message = tag_match.group(2)

        log_entry = {
            "service": self.service_name,
            "level": record.levelname,
            "tag": tag,
            "message": message,
            "module": record.module,
            "extra": {
                "function": record.funcName,
                "line": record.lineno,
            }
        }

        if record.exc_info:
            log_entry["extra"]["exception"] = self.formatException(record.exc_info)

        return log_entry


class PlainFormatter(logging.Formatter):
    """Plain text formatter for stderr output."""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


class SupabaseHandler(logging.Handler):
    """Logging handler that batches logs and sends them to Supabase.

    Flush occurs every flush_interval seconds or when batch_size is reached.
    """

    def __init__(
        self,
        supabase_client,
        service_name: str,
        batch_size: int = 20,
        flush_interval: float = 10.0,
    ):
        super().__init__()
        self.supabase = supabase_client
        self.service_name = service_name
        self.batch_size = batch_size
        self.flush_interval = flush_interval

        self._queue: Queue = Queue()
        self._shutdown = threading.Event()
        self._flush_thread = threading.Thread(target=self._flush_worker, daemon=True)
        self._flush_thread.start()

        atexit.register(self.close)

    def emit(self, record: logging.LogRecord):
        """Queue a log record for batched sending."""
        try:
            if isinstance(self.formatter, JSONFormatter):
                log_entry = self.formatter.format(record)
            else:
                log_entry = JSONFormatter(self.service_name).format(record)

            self._queue.put(log_entry)

            if self._queue.qsize() >= self.batch_size:
                self._flush()

        except Exception:
            self.handleError(record)

    def _flush_worker(self):
        while not self._shutdown.is_set():
            time.sleep(self.flush_interval)
            if not self._queue.empty():
                self._flush()

    def _flush(self):
        """Send queued logs to Supabase."""
        logs = []
        try:
            while len(logs) < self.batch_size * 2:
                try:
                    logs.append(self._queue.get_nowait())
                except Empty:
                    break

            if logs and self.supabase:
                self.supabase.table("logs").insert(logs).execute()

        except Exception as e:
            # stderr only, logging here would recurse
            print(f"[WARNING] Failed to send logs to Supabase: {e}", file=sys.stderr)

    def close(self):
        """Flush remaining logs and stop the background thread."""
        self._shutdown.set()
        self._flush()
        super().close()


_supabase_handler: Optional[SupabaseHandler] = None


def setup_logging(service_name: str = "mailchimp-connect", supabase_client=None) -> logging.Logger:
    """Configure root logging.

    Args:
        service_name: Name recorded on every shipped log entry.
        supabase_client: Supabase client for remote logging, or None.

    Returns:
        Configured root logger.
    """
    global _supabase_handler

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.INFO)
    stderr_handler.setFormatter(PlainFormatter())
    root_logger.addHandler(stderr_handler)

    supabase_enabled = False
    if supabase_client:
        try:
            _supabase_handler = SupabaseHandler(
                supabase_client=supabase_client,
                service_name=service_name,
            )
            _supabase_handler.setLevel(logging.INFO)
            _supabase_handler.setFormatter(JSONFormatter(service_name))
            root_logger.addHandler(_supabase_handler)
            supabase_enabled = True
        except Exception as e:
            print(f"[WARNING] Supabase logging setup failed: {e}", file=sys.stderr)

    # Outbound Mailchimp calls go through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    if supabase_enabled:
        logger.info(f"[STARTUP] Supabase logging enabled for service: {service_name}")
    else:
        logger.info("[STARTUP] Supabase logging disabled (no client)")

    return root_logger


def flush_logs():
    """Manually flush any pending logs to Supabase."""
    if _supabase_handler:
        _supabase_handler._flush()
