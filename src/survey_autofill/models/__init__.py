"""Public model re-exports for survey_autofill.

Consumers should import from ``survey_autofill.models`` rather than
reaching into sub-modules directly.
"""

# --- Enums ---
from survey_autofill.models.enums import (
    ChallengeProbe,
    FillResult,
    OutcomeKind,
    RunState,
)

# --- Questions ---
from survey_autofill.models.question import (
    BaseQuestion,
    ChoiceQuestion,
    LongTextQuestion,
    MultiChoiceQuestion,
    Question,
    ShortTextQuestion,
    SingleChoiceQuestion,
    TextQuestion,
    normalize_kind,
    parse_question,
    question_mapper,
)

# --- Rules / ledger ---
from survey_autofill.models.ledger import Answer, AnswerLedger
from survey_autofill.models.rule import DependencyRule, RuleCondition, RuleEffect

# --- Config / schema / outcome ---
from survey_autofill.models.config import SurveyConfig
from survey_autofill.models.outcome import RunOutcome
from survey_autofill.models.schema import ExtractedQuestion

__all__ = [
    # Enums
    "ChallengeProbe",
    "FillResult",
    "OutcomeKind",
    "RunState",
    # Questions
    "BaseQuestion",
    "ChoiceQuestion",
    "LongTextQuestion",
    "MultiChoiceQuestion",
    "Question",
    "ShortTextQuestion",
    "SingleChoiceQuestion",
    "TextQuestion",
    "normalize_kind",
    "parse_question",
    "question_mapper",
    # Rules / ledger
    "Answer",
    "AnswerLedger",
    "DependencyRule",
    "RuleCondition",
    "RuleEffect",
    # Config / schema / outcome
    "SurveyConfig",
    "RunOutcome",
    "ExtractedQuestion",
]
