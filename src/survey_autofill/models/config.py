"""SurveyConfig — the read-only configuration shared by every run.

Accepted layout (JSON or YAML)::

    surveyUrl: https://www.wjx.cn/vm/XXXX.aspx
    submissionCount: 10
    questions: [...]
    conditionalRules: [...]
    completionPatterns: [finish.aspx, ...]   # optional

Older config files nest some settings under ``general``
(``general.surveyUrl``, ``general.submissionCount``,
``general.conditionalRules``).  Values found there fill the top-level
fields that are absent; top-level values always win.
"""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from survey_autofill.constants import DEFAULT_COMPLETION_PATTERNS
from survey_autofill.models.question import Question, normalize_kind
from survey_autofill.models.rule import DependencyRule

# Keys under ``general`` that may backfill a top-level field: alias -> field name
_GENERAL_KEYS = {
    "surveyUrl": "survey_url",
    "submissionCount": "submission_count",
    "conditionalRules": "conditional_rules",
    "completionPatterns": "completion_patterns",
}


class SurveyConfig(BaseModel):
    """Validated survey configuration."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    survey_url: str = Field(alias="surveyUrl", min_length=1)
    submission_count: int = Field(default=1, alias="submissionCount", ge=1)
    questions: List[Question] = Field(default_factory=list)
    conditional_rules: List[DependencyRule] = Field(default_factory=list, alias="conditionalRules")
    completion_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_COMPLETION_PATTERNS),
        alias="completionPatterns",
    )

    @model_validator(mode="before")
    @classmethod
    def _lift_general(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        general = data.pop("general", None) or {}
        if not isinstance(general, dict):
            raise ValueError(f"general must be a mapping, got {type(general).__name__}")
        for alias, name in _GENERAL_KEYS.items():
            if alias in data or name in data:
                continue
            if general.get(alias) is not None:
                data[alias] = general[alias]

        # Normalise kind labels before the discriminated union sees them
        questions = data.get("questions")
        if isinstance(questions, list):
            data["questions"] = [
                {**q, "type": normalize_kind(q.get("type"))} if isinstance(q, dict) else q
                for q in questions
            ]
        return data

    @field_validator("questions")
    @classmethod
    def _unique_ids(cls, questions: List[Question]) -> List[Question]:
        seen: set[str] = set()
        for q in questions:
            if q.id in seen:
                raise ValueError(f"duplicate question id {q.id!r}")
            seen.add(q.id)
        return questions

    def question_ids(self) -> list[str]:
        """Question ids in schema order."""
        return [q.id for q in self.questions]
