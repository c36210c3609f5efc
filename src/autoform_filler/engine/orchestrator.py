"""
Fill Orchestrator - Repeated fill passes until the form settles.

Client-side frameworks often render a form in pieces, so one pass
under-fills. The orchestrator runs a pass immediately, then re-runs one
whenever the DOM has been quiet for `debounce_ms` after a mutation burst,
and checks the stop policy every `poll_ms`:

    IDLE -> RUNNING -> SETTLED | TIMED_OUT | MAX_PASSES
                    -> FAILED (unexpected error, re-raised)

Only the orchestrator loop runs passes. Mutation callbacks and the
debounce timer just set an event, so two passes never overlap.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from autoform_filler.config.settings import FillSettings
from autoform_filler.engine.collector import FieldCollector
from autoform_filler.engine.labeler import build_signature
from autoform_filler.engine.mapper import FieldMapper
from autoform_filler.engine.writer import ValueWriter
from autoform_filler.exceptions import FillInProgressError
from autoform_filler.interfaces.browser import IFormPage, IMutationSubscription
from autoform_filler.profile.models import Profile

logger = logging.getLogger(__name__)


class FillState(Enum):
    """Lifecycle of one fill session."""
    IDLE = "idle"
    RUNNING = "running"
    SETTLED = "settled"
    TIMED_OUT = "timed_out"
    MAX_PASSES = "max_passes"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self not in (FillState.IDLE, FillState.RUNNING)


@dataclass(frozen=True)
class StopPolicy:
    """
    When to stop re-filling.

    Attributes:
        settle_ms: Stop after this long without a newly filled field
        timeout_ms: Stop after this long in total
        max_passes: Stop after this many passes
    """
    settle_ms: int = 1500
    timeout_ms: int = 15000
    max_passes: int = 25

    @classmethod
    def from_settings(cls, settings: FillSettings) -> "StopPolicy":
        return cls(
            settle_ms=settings.settle_ms,
            timeout_ms=settings.timeout_ms,
            max_passes=settings.max_passes,
        )

    def evaluate(self, elapsed_ms: float, idle_ms: float, passes: int) -> Optional[FillState]:
        """
        Decide whether to stop.

        Args:
            elapsed_ms: Time since the session started
            idle_ms: Time since a field was last newly filled
            passes: Passes run so far

        Returns:
            The terminal state to stop in, or None to keep running
        """
        if elapsed_ms >= self.timeout_ms:
            return FillState.TIMED_OUT
        if passes >= self.max_passes:
            return FillState.MAX_PASSES
        if idle_ms >= self.settle_ms:
            return FillState.SETTLED
        return None


@dataclass
class PassResult:
    """Outcome of one sweep over the fillable controls."""
    filled: int = 0
    total: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass
class FillSession:
    """Counters for one fill invocation."""
    started_at: float
    last_progress_at: float
    state: FillState = FillState.IDLE
    filled: int = 0
    max_total: int = 0
    passes: int = 0


@dataclass
class FillReport:
    """
    Aggregate result of a fill invocation.

    Attributes:
        state: Terminal state
        filled: Fields newly written across all passes
        total: Largest fillable-field count seen, including a final recount
        passes: Passes run
        elapsed_ms: Wall-clock duration
    """
    state: FillState
    filled: int
    total: int
    passes: int
    elapsed_ms: float = 0.0
    field_names: Dict[str, int] = field(default_factory=dict)

    def summary(self) -> str:
        """Human-readable one-liner for the UI."""
        pass_word = "pass" if self.passes == 1 else "passes"
        return (
            f"Filled {self.filled} of {self.total} fields in {self.passes} {pass_word} "
            f"({self.state.value.replace('_', ' ')})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "filled": self.filled,
            "total": self.total,
            "passes": self.passes,
            "elapsed_ms": round(self.elapsed_ms),
            "fields": dict(self.field_names),
        }


class FillOrchestrator:
    """
    Drives fill passes over a page until the stop policy fires.

    Example:
        >>> orchestrator = FillOrchestrator(page, FillSettings(settle_ms=2000))
        >>> report = await orchestrator.run(profile)
        >>> print(report.summary())
        Filled 7 of 9 fields in 3 passes (settled)
    """

    def __init__(
        self,
        page: IFormPage,
        settings: Optional[FillSettings] = None,
        collector: Optional[FieldCollector] = None,
        mapper: Optional[FieldMapper] = None,
        writer: Optional[ValueWriter] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.page = page
        self.settings = settings or FillSettings()
        self.policy = StopPolicy.from_settings(self.settings)
        self.collector = collector or FieldCollector()
        self.mapper = mapper or FieldMapper()
        self.writer = writer or ValueWriter()
        self._clock = clock
        self.session: Optional[FillSession] = None

    @property
    def state(self) -> FillState:
        return self.session.state if self.session else FillState.IDLE

    def _elapsed_ms(self, since: float) -> float:
        return (self._clock() - since) * 1000

    async def run(self, profile: Profile) -> FillReport:
        """
        Fill the page from a profile.

        Returns:
            Aggregate report once the session stops

        Raises:
            FillInProgressError: A session is already running on this orchestrator
        """
        if self.state == FillState.RUNNING:
            raise FillInProgressError("A fill is already running on this page")

        now = self._clock()
        session = FillSession(started_at=now, last_progress_at=now, state=FillState.RUNNING)
        self.session = session
        field_names: Dict[str, int] = {}

        loop = asyncio.get_running_loop()
        pass_requested = asyncio.Event()
        debounce: Optional[asyncio.TimerHandle] = None
        subscription: Optional[IMutationSubscription] = None

        def on_mutation(count: int) -> None:
            nonlocal debounce
            if session.state != FillState.RUNNING:
                return
            if debounce is not None:
                debounce.cancel()
            debounce = loop.call_later(self.settings.debounce_ms / 1000, pass_requested.set)

        logger.info(f"Fill started on {self.page.url}")

        try:
            # Controls rendered during pass 1 must arm the debounce
            subscription = await self.page.observe_mutations(on_mutation)
            await self._run_pass(profile, session, field_names)

            while True:
                outcome = self.policy.evaluate(
                    elapsed_ms=self._elapsed_ms(session.started_at),
                    idle_ms=self._elapsed_ms(session.last_progress_at),
                    passes=session.passes,
                )
                if outcome is not None:
                    session.state = outcome
                    break

                try:
                    await asyncio.wait_for(pass_requested.wait(), timeout=self.settings.poll_ms / 1000)
                except asyncio.TimeoutError:
                    continue

                pass_requested.clear()
                await self._run_pass(profile, session, field_names)
        finally:
            # Still RUNNING here means an exception is propagating
            if session.state == FillState.RUNNING:
                session.state = FillState.FAILED
            if debounce is not None:
                debounce.cancel()
            if subscription is not None:
                await subscription.dispose()

        final_total = await self.collector.count_fillable(self.page)
        session.max_total = max(session.max_total, final_total)

        report = FillReport(
            state=session.state,
            filled=session.filled,
            total=session.max_total,
            passes=session.passes,
            elapsed_ms=self._elapsed_ms(session.started_at),
            field_names=field_names,
        )
        logger.info(report.summary())
        return report

    async def _run_pass(self, profile: Profile, session: FillSession, field_names: Dict[str, int]) -> PassResult:
        result = await self.run_pass(profile, field_names)

        session.passes += 1
        session.max_total = max(session.max_total, result.total)
        if result.filled:
            session.filled += result.filled
            session.last_progress_at = self._clock()

        logger.debug(
            f"Pass {session.passes}: filled {result.filled}, "
            f"{result.total} fillable, {result.failed} failed"
        )
        return result

    async def run_pass(self, profile: Profile, field_names: Optional[Dict[str, int]] = None) -> PassResult:
        """
        One sweep over the currently fillable controls.

        A control that throws while being written is counted as failed and
        the sweep moves on.
        """
        result = PassResult()

        async for element, snapshot in self.collector.iter_fillable(self.page):
            result.total += 1

            signature = build_signature(snapshot)
            rule = self.mapper.match_rule(signature)
            value = self.mapper.value_for(rule, profile) if rule else None
            if value is None:
                result.skipped += 1
                continue

            try:
                written = await self.writer.write(element, snapshot, value)
            except Exception as e:
                result.failed += 1
                logger.debug(f"Write to '{signature}' failed: {e}")
                continue

            if written:
                result.filled += 1
                if field_names is not None:
                    field_names[rule.field] = field_names.get(rule.field, 0) + 1

        return result
