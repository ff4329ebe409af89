"""Single-fire readiness signal.

A run handler signals that its operation has started (for example,
a server is now listening) independently of when its final result
becomes available. The runner joins this signal with the handler
completion before producing a result.
"""

from asyncio import Future, get_running_loop
from threading import get_ident


class ReadySignal:
    """One-shot readiness signal bound to the running event loop.

    The signal is a zero-argument callable handed to run handlers.
    Calling it more than once has no further effect. It may be called
    from a foreign thread; the signal is then set on the owning loop.
    """

    def __init__(self) -> None:
        """Initialize a signal on the running event loop.

        Raises:
            RuntimeError: If no event loop is running.
        """
        self._loop = get_running_loop()
        self._thread = get_ident()
        self.future: Future[None] = self._loop.create_future()

    def __call__(self) -> None:
        """Mark the operation as ready."""
        if get_ident() == self._thread:
            self._set()
            return

        self._loop.call_soon_threadsafe(self._set)

    def _set(self) -> None:
        """Resolve the underlying future once."""
        if not self.future.done():
            self.future.set_result(None)

    def is_set(self) -> bool:
        """Check whether readiness was signalled."""
        return self.future.done() and not self.future.cancelled()

    async def wait(self) -> None:
        """Suspend until readiness is signalled."""
        await self.future
