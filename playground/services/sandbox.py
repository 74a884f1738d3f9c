"""Sandbox renderer — delivers composed documents to an isolated frame.

The isolation target is a ``SandboxFrame``: the document is served to the
browser from its own endpoint under a ``Content-Security-Policy: sandbox``
header without ``allow-same-origin``, so it runs in an opaque origin and
cannot reach the host application's storage, cookies or DOM. The only
channel back is the one-shot load signal.

Every ``render`` call allocates a new render id. Only the newest render's
signal is honoured; older waiters resolve as superseded and late signals
are ignored. A render never raises: failures are reported through the
``on_failure`` side channel and the previously loaded document stays in
the frame.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from ..core.logging_config import render_id_var
from ..exceptions import RenderFailureError

SANDBOX_CSP = "sandbox allow-scripts allow-modals allow-forms allow-popups"

logger = logging.getLogger(__name__)


class RenderStatus(str, Enum):
    LOADED = "loaded"
    TIMED_OUT = "timed_out"
    FAILED = "failed"
    SUPERSEDED = "superseded"


@dataclass(frozen=True)
class RenderResult:
    render_id: int
    status: RenderStatus
    error: Optional[RenderFailureError] = None


FailureHandler = Callable[[RenderFailureError], None]


class IsolationTarget(ABC):
    """Anything that can be handed a document to display in isolation.

    A loaded document stays pending until the renderer commits it (load
    signal or timeout) or reverts it (failure), so a failed render leaves
    the previously committed document in place.
    """

    @abstractmethod
    def load(self, document: str, render_id: int) -> None:
        """Start loading a document. May raise if the target is unavailable."""

    def commit(self, render_id: int) -> None:
        """The render loaded; make its document the current one."""

    def revert(self, render_id: int) -> None:
        """The render failed; fall back to the last committed document."""


class SandboxFrame(IsolationTarget):
    """The preview frame served at ``/preview/frame``."""

    def __init__(self, attached: bool = True):
        self.attached = attached
        # Last committed render.
        self.document: Optional[str] = None
        self.render_id = 0
        # Render waiting for its load signal.
        self.pending: Optional[str] = None
        self.pending_render_id = 0

    def attach(self) -> None:
        self.attached = True

    def detach(self) -> None:
        self.attached = False

    def load(self, document: str, render_id: int) -> None:
        if not self.attached:
            raise RuntimeError("sandbox frame is not attached")
        self.pending = document
        self.pending_render_id = render_id

    def commit(self, render_id: int) -> None:
        if self.pending is None or self.pending_render_id != render_id:
            return
        self.document = self.pending
        self.render_id = render_id
        self.pending = None

    def revert(self, render_id: int) -> None:
        if self.pending_render_id == render_id:
            self.pending = None

    @property
    def served_document(self) -> Optional[str]:
        """What ``/preview/frame`` shows: the pending render while it loads."""
        return self.pending if self.pending is not None else self.document

    @property
    def served_render_id(self) -> int:
        return self.pending_render_id if self.pending is not None else self.render_id

    def headers(self) -> Dict[str, str]:
        """Response headers that isolate the served document."""
        return {
            "Content-Security-Policy": SANDBOX_CSP,
            "X-Content-Type-Options": "nosniff",
            "Cache-Control": "no-store",
            "X-Render-Id": str(self.served_render_id),
        }


class SandboxRenderer:
    """Loads documents into an isolation target and tracks the load signal."""

    def __init__(
        self,
        target: IsolationTarget,
        timeout: float,
        on_failure: Optional[FailureHandler] = None,
    ):
        self.target = target
        self.timeout = timeout
        self.on_failure = on_failure
        self.render_id = 0
        self.last_status: Optional[RenderStatus] = None
        self.last_failure: Optional[RenderFailureError] = None
        self._pending: Optional[asyncio.Future] = None

    async def render(self, document: str) -> RenderResult:
        """Load a document and wait for its load signal or the timeout.

        Must be awaited on the event loop that delivers the signals.
        """
        self.render_id += 1
        render_id = self.render_id
        token = render_id_var.set(render_id)
        try:
            self._supersede_pending()
            waiter = asyncio.get_running_loop().create_future()
            self._pending = waiter

            try:
                self.target.load(document, render_id)
            except Exception as e:
                self._clear_pending(waiter)
                self.target.revert(render_id)
                error = self._report(render_id, "Sandbox could not load the composed document", e)
                return self._finish(RenderResult(render_id, RenderStatus.FAILED, error))

            try:
                status, error = await asyncio.wait_for(asyncio.shield(waiter), self.timeout)
            except asyncio.TimeoutError:
                logger.info("No load signal within %.2fs, assuming render complete", self.timeout)
                self.target.commit(render_id)
                status, error = RenderStatus.TIMED_OUT, None
            finally:
                self._clear_pending(waiter)

            return self._finish(RenderResult(render_id, status, error))
        finally:
            render_id_var.reset(token)

    def notify_loaded(self, render_id: int) -> bool:
        """Load-complete signal. Returns False if the signal was stale."""
        if not self._accepts(render_id):
            logger.debug("Ignoring stale load signal", extra={"signal_render_id": render_id})
            return False
        self.target.commit(render_id)
        self._pending.set_result((RenderStatus.LOADED, None))
        return True

    def notify_failed(self, render_id: int, reason: str) -> bool:
        """Load-failed signal. Returns False if the signal was stale."""
        if not self._accepts(render_id):
            logger.debug("Ignoring stale failure signal", extra={"signal_render_id": render_id})
            return False
        self.target.revert(render_id)
        error = self._report(render_id, f"Sandbox reported a load failure: {reason}")
        self._pending.set_result((RenderStatus.FAILED, error))
        return True

    @property
    def in_flight(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def _accepts(self, render_id: int) -> bool:
        return render_id == self.render_id and self.in_flight

    def _supersede_pending(self) -> None:
        if self.in_flight:
            self._pending.set_result((RenderStatus.SUPERSEDED, None))
        self._pending = None

    def _clear_pending(self, waiter: asyncio.Future) -> None:
        if self._pending is waiter:
            self._pending = None

    def _finish(self, result: RenderResult) -> RenderResult:
        # Superseded renders must not overwrite the newest render's status.
        if result.render_id == self.render_id:
            self.last_status = result.status
        logger.debug("Render finished", extra={"status": result.status.value})
        return result

    def _report(
        self, render_id: int, message: str, original_error: Optional[Exception] = None
    ) -> RenderFailureError:
        error = RenderFailureError(render_id, message, original_error)
        self.last_failure = error
        logger.error(
            message,
            extra={"error_code": error.error_code.value, "details": error.details},
        )
        if self.on_failure is not None:
            try:
                self.on_failure(error)
            except Exception:
                logger.exception("Render failure handler raised")
        return error

    def status(self) -> Tuple[int, Optional[RenderStatus], Optional[str]]:
        """(render id, last status, last failure message)."""
        return (
            self.render_id,
            self.last_status,
            self.last_failure.message if self.last_failure else None,
        )
