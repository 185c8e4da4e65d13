"""SubmissionOrchestrator — drives one complete fill-and-submit run.

State machine (strict DAG, every run terminates)::

    init -> navigating -> filling -> submitting -> challenge_check
    challenge_check -> challenge_handling   (challenge visible)
    challenge_check -> awaiting_completion  (absent or inconclusive probe)
    challenge_handling -> classifying | challenge_failed
    awaiting_completion -> classifying | navigation_timeout
    classifying -> submitted | ambiguous_completion

Any state may also end in ``error``.  Each handler returns either the next
``RunState`` or a terminal ``OutcomeKind``.  Failures are raised as
``RunError`` subclasses and converted into a ``RunOutcome`` at the
``run()`` boundary, so a failed run never propagates to the scheduler.

The browser session is acquired per run from the ``SessionProvider`` and
released on every exit path.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from survey_autofill.constants import (
    ACTION_TIMEOUT,
    CHALLENGE_PROBE_TIMEOUT,
    CHALLENGE_RESOLUTION_TIMEOUT,
    COMPLETION_TIMEOUT,
    NAVIGATION_TIMEOUT,
    QUESTION_PAUSE_RANGE,
)
from survey_autofill.errors import (
    ChallengeFailedError,
    FillError,
    NavigationError,
    NavigationTimeoutError,
    RunError,
)
from survey_autofill.interfaces import FormSession, SessionProvider
from survey_autofill.models.config import SurveyConfig
from survey_autofill.models.enums import ChallengeProbe, FillResult, OutcomeKind, RunState
from survey_autofill.models.ledger import AnswerLedger
from survey_autofill.models.outcome import RunOutcome
from survey_autofill.models.question import MultiChoiceQuestion, Question, TextQuestion
from survey_autofill.synthesizer import AnswerSynthesizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Timeouts:
    """Wait budgets for one run, in seconds."""

    navigation: float = NAVIGATION_TIMEOUT
    challenge_probe: float = CHALLENGE_PROBE_TIMEOUT
    challenge_resolution: float = CHALLENGE_RESOLUTION_TIMEOUT
    completion: float = COMPLETION_TIMEOUT
    # Per click / fill, including submit
    action: float = ACTION_TIMEOUT


@dataclass
class _RunContext:
    """Mutable per-run state; never shared between runs."""

    run_index: int
    ledger: AnswerLedger = field(default_factory=AnswerLedger)
    states: list[RunState] = field(default_factory=list)
    challenge_probe: ChallengeProbe | None = None
    final_url: str | None = None
    detail: str | None = None


_Handler = Callable[[FormSession, _RunContext], Awaitable["RunState | OutcomeKind"]]


class SubmissionOrchestrator:
    """Runs the navigate / fill / submit / classify protocol once per call.

    Args:
        config: validated, read-only survey config
        sessions: provider of fresh browser sessions
        synthesizer: answer synthesizer (built from ``rng`` if omitted)
        timeouts: per-wait budgets
        pause_range: (min, max) seconds of pause after each question
        rng: random source for pauses and, by default, for answers
    """

    def __init__(
        self,
        config: SurveyConfig,
        sessions: SessionProvider,
        *,
        synthesizer: AnswerSynthesizer | None = None,
        timeouts: Timeouts | None = None,
        pause_range: tuple[float, float] = QUESTION_PAUSE_RANGE,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._sessions = sessions
        self._rng = rng or random.Random()
        self._synthesizer = synthesizer or AnswerSynthesizer(rng=self._rng)
        self._timeouts = timeouts or Timeouts()
        self._pause_range = pause_range
        self._handlers: dict[RunState, _Handler] = {
            RunState.NAVIGATING: self._navigate,
            RunState.FILLING: self._fill,
            RunState.SUBMITTING: self._submit,
            RunState.CHALLENGE_CHECK: self._check_challenge,
            RunState.CHALLENGE_HANDLING: self._handle_challenge,
            RunState.AWAITING_COMPLETION: self._await_completion,
            RunState.CLASSIFYING: self._classify,
        }

    @property
    def timeouts(self) -> Timeouts:
        return self._timeouts

    # ==================================================================
    # Run boundary
    # ==================================================================

    async def run(self, run_index: int = 1) -> RunOutcome:
        """Execute one run and return its outcome.  Never raises."""
        ctx = _RunContext(run_index=run_index)
        started = time.monotonic()

        try:
            async with self._sessions.open() as session:
                kind = await self._drive(session, ctx)
        except RunError as exc:
            kind = exc.outcome_kind
            ctx.detail = str(exc)
            logger.error("Run %d ended with %s: %s", run_index, kind.value, exc)
        except Exception as exc:
            kind = OutcomeKind.ERROR
            ctx.detail = f"{type(exc).__name__}: {exc}"
            logger.exception("Run %d failed unexpectedly", run_index)

        outcome = RunOutcome(
            kind=kind,
            run_index=run_index,
            detail=ctx.detail,
            final_url=ctx.final_url,
            answers=ctx.ledger.as_dict(),
            states=list(ctx.states),
            challenge_probe=ctx.challenge_probe,
            elapsed_seconds=round(time.monotonic() - started, 3),
        )
        logger.debug("Run %d visited states: %s", run_index, [s.value for s in outcome.states])
        return outcome

    async def _drive(self, session: FormSession, ctx: _RunContext) -> OutcomeKind:
        """Step through the handlers until one returns a terminal outcome."""
        state = RunState.INIT
        ctx.states.append(state)
        nxt: RunState | OutcomeKind = RunState.NAVIGATING

        while isinstance(nxt, RunState):
            if nxt.rank <= state.rank:
                raise RuntimeError(f"Illegal transition {state.value} -> {nxt.value}")
            state = nxt
            ctx.states.append(state)
            nxt = await self._handlers[state](session, ctx)

        return nxt

    # ==================================================================
    # State handlers
    # ==================================================================

    async def _navigate(self, session: FormSession, ctx: _RunContext) -> RunState:
        url = self._config.survey_url
        logger.info("Run %d: opening %s", ctx.run_index, url)
        try:
            await session.goto(url, timeout=self._timeouts.navigation)
        except RunError:
            raise
        except Exception as exc:
            raise NavigationError(f"Could not open {url}: {exc}") from exc
        return RunState.FILLING

    async def _fill(self, session: FormSession, ctx: _RunContext) -> RunState:
        logger.info("Run %d: filling %d questions", ctx.run_index, len(self._config.questions))
        for question in self._config.questions:
            await self._fill_question(session, ctx, question)
            await asyncio.sleep(self._rng.uniform(*self._pause_range))
        return RunState.SUBMITTING

    async def _fill_question(
        self, session: FormSession, ctx: _RunContext, question: Question
    ) -> None:
        answer = self._synthesizer.synthesize(question, ctx.ledger, self._config.conditional_rules)

        if self._is_unanswerable(question, answer):
            if question.optional:
                logger.warning("  - Q%s: no selectable option, skipping optional question", question.id)
                return
            raise FillError(f"Q{question.id}: no selectable option (adjusted weights total <= 0)")

        ctx.ledger.record(question.id, answer)

        budget = self._timeouts.action
        try:
            if isinstance(question, TextQuestion):
                result = await session.enter_text(question.id, answer, timeout=budget)
            elif isinstance(answer, list):
                result = await session.select_options(question.id, answer, timeout=budget) if answer else FillResult.OK
            else:
                result = await session.select_options(question.id, [answer], timeout=budget)
        except RunError:
            raise
        except Exception as exc:
            raise FillError(f"Q{question.id}: {exc}") from exc

        if result == FillResult.NOT_FOUND:
            if question.optional:
                logger.warning("  - Q%s: control not found, skipping optional question", question.id)
                return
            raise FillError(f"Q{question.id}: control not found")

        logger.info("  - Q%s (%s): %s", question.id, question.type, answer)

    @staticmethod
    def _is_unanswerable(question: Question, answer) -> bool:
        """True if synthesis produced nothing where something was required."""
        if answer is None:
            return True
        if isinstance(question, MultiChoiceQuestion):
            return not answer and question.min_answers > 0
        return False

    async def _submit(self, session: FormSession, ctx: _RunContext) -> RunState:
        logger.info("Run %d: submitting", ctx.run_index)
        try:
            await session.submit(timeout=self._timeouts.action)
        except RunError:
            raise
        except Exception as exc:
            raise FillError(f"Submit failed: {exc}") from exc
        return RunState.CHALLENGE_CHECK

    async def _check_challenge(self, session: FormSession, ctx: _RunContext) -> RunState:
        probe = await session.probe_challenge(timeout=self._timeouts.challenge_probe)
        ctx.challenge_probe = probe

        if probe == ChallengeProbe.VISIBLE:
            logger.info("Run %d: verification challenge detected", ctx.run_index)
            return RunState.CHALLENGE_HANDLING
        if probe == ChallengeProbe.INCONCLUSIVE:
            logger.warning(
                "Run %d: challenge probe inconclusive after %ss, treating as no challenge",
                ctx.run_index, self._timeouts.challenge_probe,
            )
        return RunState.AWAITING_COMPLETION

    async def _handle_challenge(self, session: FormSession, ctx: _RunContext) -> RunState:
        budget = self._timeouts.challenge_resolution
        try:
            resolved = await session.resolve_challenge(timeout=budget)
        except Exception as exc:
            raise ChallengeFailedError(f"Challenge resolution failed: {exc}") from exc
        if not resolved:
            raise ChallengeFailedError(f"Challenge not resolved within {budget}s")
        logger.info("Run %d: challenge resolved, page moved on", ctx.run_index)
        return RunState.CLASSIFYING

    async def _await_completion(self, session: FormSession, ctx: _RunContext) -> RunState:
        budget = self._timeouts.completion
        if not await session.wait_for_transition(timeout=budget):
            raise NavigationTimeoutError(f"No page transition within {budget}s after submit; run abandoned")
        return RunState.CLASSIFYING

    async def _classify(self, session: FormSession, ctx: _RunContext) -> OutcomeKind:
        url = await session.current_url()
        ctx.final_url = url

        if any(pattern in url for pattern in self._config.completion_patterns):
            logger.info("Run %d: submitted, landed on %s", ctx.run_index, url)
            return OutcomeKind.SUBMITTED

        ctx.detail = f"Unrecognised destination after submit: {url}"
        logger.warning("Run %d: submission status unclear, current page %s", ctx.run_index, url)
        return OutcomeKind.AMBIGUOUS_COMPLETION
