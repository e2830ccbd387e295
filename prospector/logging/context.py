"""Context propagation for structured logging.

Fields pushed here (``run_id``, ``connector``, ...) are merged into every log
record emitted inside the scope. Context lives in a ``ContextVar``; work
handed to a thread pool must be wrapped with :func:`bind_log_context` so the
worker sees the submitting thread's fields.
"""

import contextvars
from contextvars import ContextVar, Token
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge fields into the logging context.

    Returns:
        Token for restoring the previous state with pop_log_context()

    Example:
        >>> token = push_log_context(run_id="abc123", connector="github")
        >>> pop_log_context(token)
    """
    current = LogContextVar.get()
    return LogContextVar.set({**current, **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context to the state captured by ``token``."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop all context fields. Mostly useful in tests."""
    LogContextVar.set({})


def bind_log_context(func: Callable[..., T], **fields) -> Callable[..., T]:
    """Wrap ``func`` so it runs in a copy of the current context plus ``fields``.

    Used when submitting work to an executor: contextvars are not inherited by
    pool threads, so the snapshot is taken here, on the submitting thread.

    Args:
        func: Callable to run later, possibly on another thread
        **fields: Extra context fields visible only inside the call

    Returns:
        Callable with the same signature as ``func``
    """
    ctx = contextvars.copy_context()

    def _run(*args, **kwargs):
        def _call():
            with log_context(**fields):
                return func(*args, **kwargs)

        # A Context may only be entered by one thread at a time
        return ctx.copy().run(_call)

    return _run


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(run_id="abc123"):
        ...     logger.info("Aggregation started")  # includes run_id
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
