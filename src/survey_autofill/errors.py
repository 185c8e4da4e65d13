"""Exception taxonomy for the survey autofill SDK.

Two families:

  - ``ConfigError`` is fatal.  It is raised before any run starts and the
    console entry point turns it into a diagnostic and a non-zero exit.
  - ``RunError`` subclasses terminate a single run.  The orchestrator
    catches them at its boundary and converts them into a ``RunOutcome``
    using the ``outcome_kind`` each class carries, so one failed run never
    stops the scheduler.
"""

from __future__ import annotations

from survey_autofill.models.enums import OutcomeKind


class SurveyAutofillError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(SurveyAutofillError):
    """Missing or invalid configuration; aborts before any run."""


class SchemaExtractionError(SurveyAutofillError):
    """The live form did not yield a usable question schema."""


class RunError(SurveyAutofillError):
    """An error that ends the current run with a structured outcome."""

    outcome_kind: OutcomeKind = OutcomeKind.ERROR


class NavigationError(RunError):
    """The survey page could not be opened."""


class FillError(RunError):
    """A required control was missing or did not respond."""


class ChallengeFailedError(RunError):
    """A verification challenge appeared but was not resolved in time."""

    outcome_kind = OutcomeKind.CHALLENGE_FAILED


class NavigationTimeoutError(RunError):
    """No post-submit page transition happened within the completion bound."""

    outcome_kind = OutcomeKind.NAVIGATION_TIMEOUT
