"""
UI Thread Executor
==================
Single-thread task executor that owns all editor-state access. Work submitted
from any thread runs on the one worker thread; work submitted from the worker
itself runs inline so nested calls cannot deadlock.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional


class UIThreadExecutor:
    """Marshals callables onto a single dedicated worker thread."""

    def __init__(self, thread_name: str = 'editor-ui'):
        self.thread_name = thread_name
        self._executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=thread_name
        )
        self._thread_ident: Optional[int] = None
        self._lock = threading.Lock()
        self.logger = logging.getLogger('ui_thread')

        # Pin the worker thread identity up front
        self._executor.submit(self._record_thread).result()

    def _record_thread(self) -> None:
        self._thread_ident = threading.get_ident()

    @property
    def is_running(self) -> bool:
        return self._executor is not None

    def is_on_ui_thread(self) -> bool:
        return threading.get_ident() == self._thread_ident

    def throw_if_not_on_ui_thread(self) -> None:
        """Raise RuntimeError when called from any thread but the UI thread."""
        if not self.is_on_ui_thread():
            raise RuntimeError(
                f"Editor state accessed from thread '{threading.current_thread().name}', "
                f"expected the '{self.thread_name}' thread"
            )

    def run(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Run fn on the UI thread and wait for its result.

        Exceptions raised by fn propagate to the caller.
        """
        if self.is_on_ui_thread():
            return fn(*args, **kwargs)

        with self._lock:
            if self._executor is None:
                raise RuntimeError("UI thread executor has been shut down")
            future = self._executor.submit(fn, *args, **kwargs)

        return future.result()

    def shutdown(self) -> None:
        with self._lock:
            if self._executor is None:
                return
            self._executor.shutdown(wait=True)
            self._executor = None
        self.logger.debug(f"UI thread '{self.thread_name}' stopped")
