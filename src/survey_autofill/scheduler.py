"""RunScheduler — repeats the orchestrator sequentially.

Runs never overlap: each one gets its own browser session, and a jittered
delay separates consecutive runs.  Every run executes regardless of how the
previous ones ended.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import Counter
from dataclasses import dataclass, field

from survey_autofill.constants import RUN_DELAY_RANGE
from survey_autofill.models.enums import OutcomeKind
from survey_autofill.models.outcome import RunOutcome
from survey_autofill.orchestrator import SubmissionOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcomes of all runs, in execution order."""

    outcomes: list[RunOutcome] = field(default_factory=list)

    @property
    def counts(self) -> dict[OutcomeKind, int]:
        tally = Counter(o.kind for o in self.outcomes)
        return {kind: tally.get(kind, 0) for kind in OutcomeKind}

    @property
    def submitted(self) -> int:
        return self.counts[OutcomeKind.SUBMITTED]

    def log_summary(self) -> None:
        logger.info("All %d runs finished", len(self.outcomes))
        for kind, count in self.counts.items():
            if count:
                logger.info("  %-22s %d", kind.value, count)


class RunScheduler:
    """Executes ``submission_count`` runs one after another.

    Args:
        orchestrator: performs a single run
        submission_count: number of runs (>= 1)
        delay_range: (min, max) seconds waited between runs
        rng: random source for the delay jitter
    """

    def __init__(
        self,
        orchestrator: SubmissionOrchestrator,
        submission_count: int,
        *,
        delay_range: tuple[float, float] = RUN_DELAY_RANGE,
        rng: random.Random | None = None,
    ) -> None:
        if submission_count < 1:
            raise ValueError(f"submission_count must be >= 1, got {submission_count}")
        self._orchestrator = orchestrator
        self._count = submission_count
        self._delay_range = delay_range
        self._rng = rng or random.Random()

    async def run(self) -> RunSummary:
        summary = RunSummary()
        for index in range(1, self._count + 1):
            logger.info("================== [ Run %d / %d ] ==================", index, self._count)
            outcome = await self._orchestrator.run(run_index=index)
            summary.outcomes.append(outcome)

            if index < self._count:
                delay = self._rng.uniform(*self._delay_range)
                logger.info("Next run starts in %.1fs", delay)
                await asyncio.sleep(delay)

        summary.log_summary()
        return summary
