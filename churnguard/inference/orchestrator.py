"""
Pipeline Orchestration
======================

State holder between a pipeline and the rendering layer.

States move ``IDLE -> PENDING -> RESOLVED | FAILED`` and back to ``PENDING``
on the next invocation. The orchestrator is the only writer of its snapshot.
Every invocation is stamped with a monotonic request id; an outcome is applied
only if its id is still the latest, so late responses from superseded
requests are discarded.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from loguru import logger

from churnguard.inference.errors import InferenceError, PipelineBusy, PipelineClosed

TInput = TypeVar("TInput")
TOutput = TypeVar("TOutput")

Listener = Callable[["PipelineSnapshot"], None]


class PipelineState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


class ConcurrencyPolicy(str, Enum):
    """What a new invocation does while another is in flight."""

    SUPERSEDE = "supersede"
    REJECT = "reject"


@dataclass(frozen=True)
class PipelineSnapshot(Generic[TOutput]):
    """Immutable view of one orchestrator, read by the rendering layer."""

    state: PipelineState = PipelineState.IDLE
    result: Optional[TOutput] = None
    error: Optional[BaseException] = None
    request_id: int = 0

    @property
    def is_loading(self) -> bool:
        return self.state == PipelineState.PENDING

    @property
    def has_failed(self) -> bool:
        return self.state == PipelineState.FAILED

    @property
    def error_kind(self) -> Optional[str]:
        if self.error is None:
            return None
        return getattr(self.error, "kind", "unexpected_error")

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return str(self.error) or type(self.error).__name__


class PipelineOrchestrator(Generic[TInput, TOutput]):
    """Run a pipeline call with at most one request in flight."""

    def __init__(
        self,
        call: Callable[[Optional[TInput]], Awaitable[TOutput]],
        policy: ConcurrencyPolicy = ConcurrencyPolicy.SUPERSEDE,
        name: str = "pipeline",
    ):
        self._call = call
        self.policy = policy
        self.name = name
        self._snapshot: PipelineSnapshot = PipelineSnapshot()
        self._settled: PipelineSnapshot = self._snapshot
        self._sequence = 0
        self._task: Optional[asyncio.Future] = None
        self._listeners: List[Listener] = []
        self._closed = False

    @property
    def snapshot(self) -> PipelineSnapshot:
        return self._snapshot

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback for every state transition.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def invoke(self, payload: Optional[TInput] = None) -> PipelineSnapshot:
        """
        Run the pipeline and settle the snapshot.

        Args:
            payload: Pipeline input (None for input-less pipelines)

        Returns:
            The snapshot after this invocation; if the request was superseded
            or cancelled, the current snapshot instead

        Raises:
            PipelineClosed: The orchestrator was closed
            PipelineBusy: A request is in flight and the policy is REJECT
        """
        if self._closed:
            raise PipelineClosed(f"{self.name} orchestrator is closed")

        if self.in_flight:
            if self.policy == ConcurrencyPolicy.REJECT:
                raise PipelineBusy(f"{self.name} request {self._sequence} still in flight")
            logger.info(f"[{self.name}] superseding request {self._sequence}")
            self._task.cancel()

        self._sequence += 1
        request_id = self._sequence
        logger.debug(f"[{self.name}] request {request_id} pending")
        self._publish(PipelineSnapshot(
            state=PipelineState.PENDING,
            result=self._snapshot.result,
            request_id=request_id,
        ))

        task = asyncio.ensure_future(self._call(payload))
        self._task = task

        try:
            result = await task
        except asyncio.CancelledError:
            if request_id == self._sequence:
                # The invoker itself was cancelled
                logger.info(f"[{self.name}] request {request_id} cancelled by caller")
                self._task = None
                self._publish(self._settled)
                raise
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                # Superseded, but the invoker is being cancelled too
                raise
            return self._snapshot
        except InferenceError as e:
            outcome = PipelineSnapshot(state=PipelineState.FAILED, error=e, request_id=request_id)
        except Exception as e:
            logger.exception(f"[{self.name}] unexpected error in request {request_id}")
            outcome = PipelineSnapshot(state=PipelineState.FAILED, error=e, request_id=request_id)
        else:
            outcome = PipelineSnapshot(state=PipelineState.RESOLVED, result=result, request_id=request_id)

        return self._apply(request_id, outcome)

    def cancel(self) -> bool:
        """
        Cancel the in-flight request and restore the last settled snapshot.

        Returns:
            True if a request was cancelled
        """
        if not self.in_flight:
            return False

        logger.info(f"[{self.name}] cancelling request {self._sequence}")
        self._sequence += 1
        self._task.cancel()
        self._task = None
        self._publish(self._settled)
        return True

    def close(self):
        """Cancel any in-flight request and refuse further invocations."""
        self.cancel()
        self._closed = True
        self._listeners.clear()

    def _apply(self, request_id: int, outcome: PipelineSnapshot) -> PipelineSnapshot:
        if request_id != self._sequence:
            logger.info(
                f"[{self.name}] discarding stale {outcome.state.value} response "
                f"for request {request_id} (latest is {self._sequence})"
            )
            return self._snapshot

        self._task = None
        self._settled = outcome
        self._publish(outcome)
        return outcome

    def _publish(self, snapshot: PipelineSnapshot):
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)


__all__ = [
    "PipelineState",
    "ConcurrencyPolicy",
    "PipelineSnapshot",
    "PipelineOrchestrator",
]
