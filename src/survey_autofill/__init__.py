"""survey_autofill — weighted answer synthesis and form submission SDK.

Public API:
    SubmissionOrchestrator — runs one navigate / fill / submit / classify cycle
    RunScheduler           — repeats the orchestrator sequentially with jitter
    AnswerSynthesizer      — picks an answer per question kind
    RuleEngine             — applies dependency rules to option weights
    select_one / select_many — weighted sampling primitives

Config:
    SurveyConfig           — validated, read-only survey configuration
    load_config            — read + validate a JSON/YAML config (ConfigError on failure)

Collaborator interfaces (implemented by ``survey_browser``):
    SessionProvider, FormSession, PageNavigator, FormFiller, ChallengeDetector
"""

from survey_autofill.config import load_config
from survey_autofill.errors import (
    ChallengeFailedError,
    ConfigError,
    FillError,
    NavigationError,
    NavigationTimeoutError,
    RunError,
    SchemaExtractionError,
    SurveyAutofillError,
)
from survey_autofill.evaluator import RuleEngine, adjust_weights
from survey_autofill.interfaces import (
    ChallengeDetector,
    FormFiller,
    FormSession,
    PageNavigator,
    SessionProvider,
)
from survey_autofill.models import (
    AnswerLedger,
    ChallengeProbe,
    DependencyRule,
    FillResult,
    OutcomeKind,
    RunOutcome,
    RunState,
    SurveyConfig,
)
from survey_autofill.orchestrator import SubmissionOrchestrator, Timeouts
from survey_autofill.sampler import select_many, select_one
from survey_autofill.scheduler import RunScheduler, RunSummary
from survey_autofill.synthesizer import AnswerSynthesizer

__all__ = [
    # Engine
    "SubmissionOrchestrator",
    "Timeouts",
    "RunScheduler",
    "RunSummary",
    "AnswerSynthesizer",
    "RuleEngine",
    "adjust_weights",
    "select_one",
    "select_many",
    # Config / models
    "SurveyConfig",
    "load_config",
    "AnswerLedger",
    "DependencyRule",
    "RunOutcome",
    "OutcomeKind",
    "RunState",
    "ChallengeProbe",
    "FillResult",
    # Interfaces
    "SessionProvider",
    "FormSession",
    "PageNavigator",
    "FormFiller",
    "ChallengeDetector",
    # Errors
    "SurveyAutofillError",
    "ConfigError",
    "SchemaExtractionError",
    "RunError",
    "NavigationError",
    "FillError",
    "ChallengeFailedError",
    "NavigationTimeoutError",
]
