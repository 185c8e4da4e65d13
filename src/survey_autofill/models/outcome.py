"""Run outcome models — the contract between the orchestrator and the scheduler.

Every run yields exactly one ``RunOutcome``.  The scheduler only logs and
counts them; no outcome gates later runs.
"""

from typing import Optional

from pydantic import BaseModel, Field

from survey_autofill.models.enums import ChallengeProbe, OutcomeKind, RunState


class RunOutcome(BaseModel):
    """Structured result of one run."""

    kind: OutcomeKind
    run_index: int = 1
    # Error cause or diagnostic text (None for clean submissions)
    detail: Optional[str] = None
    # Location reached after the post-submit transition, if any
    final_url: Optional[str] = None
    # Ledger snapshot: {question_id: value | [values]}
    answers: dict = Field(default_factory=dict)
    # Non-terminal states visited, in order
    states: list[RunState] = Field(default_factory=list)
    challenge_probe: Optional[ChallengeProbe] = None
    elapsed_seconds: float = 0.0

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUBMITTED

    @property
    def is_failure(self) -> bool:
        """Ambiguous completions are uncertain, not failures."""
        return self.kind not in (OutcomeKind.SUBMITTED, OutcomeKind.AMBIGUOUS_COMPLETION)
