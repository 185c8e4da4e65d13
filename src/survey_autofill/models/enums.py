"""Enumerations shared by the orchestrator, the collaborators, and outcomes."""

import enum


class OutcomeKind(str, enum.Enum):
    """Terminal result of one run.

    Only ``SUBMITTED`` is a confirmed success.  ``AMBIGUOUS_COMPLETION`` means
    the page moved on but to an unrecognised destination; it is recorded as
    uncertain, not as a failure.
    """

    SUBMITTED = "submitted"
    AMBIGUOUS_COMPLETION = "ambiguous_completion"
    CHALLENGE_FAILED = "challenge_failed"
    NAVIGATION_TIMEOUT = "navigation_timeout"
    ERROR = "error"


class RunState(str, enum.Enum):
    """Non-terminal states of the submission state machine.

    Declaration order is the only order in which states may be visited:
        init -> navigating -> filling -> submitting -> challenge_check
        challenge_check -> challenge_handling | awaiting_completion
        challenge_handling | awaiting_completion -> classifying
    """

    INIT = "init"
    NAVIGATING = "navigating"
    FILLING = "filling"
    SUBMITTING = "submitting"
    CHALLENGE_CHECK = "challenge_check"
    CHALLENGE_HANDLING = "challenge_handling"
    AWAITING_COMPLETION = "awaiting_completion"
    CLASSIFYING = "classifying"

    @property
    def rank(self) -> int:
        """Position in declaration order; transitions must strictly increase it."""
        return list(RunState).index(self)


class ChallengeProbe(str, enum.Enum):
    """Result of the bounded post-submit challenge probe.

    ``INCONCLUSIVE`` covers probe timeouts and probe errors.  It is routed like
    ``ABSENT`` but kept distinct so a slow-to-render challenge shows up in the
    run's outcome instead of silently looking like "no challenge".
    """

    VISIBLE = "visible"
    ABSENT = "absent"
    INCONCLUSIVE = "inconclusive"


class FillResult(str, enum.Enum):
    """Per-invocation result of a form-fill operation."""

    OK = "ok"
    NOT_FOUND = "not_found"
