"""In-process event telemetry: handlers, timed spans, a worker pool and a test mailbox."""

__version__ = "0.1.0"

__all__ = ["config", "handler", "pool", "provider", "mailbox", "log_handler"]