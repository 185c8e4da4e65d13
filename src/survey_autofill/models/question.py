"""Question models for survey answer synthesis.

Each question kind maps to one form control family and one synthesis rule:

  Choice kinds (weighted, subject to dependency rules):
    - single_choice: radio group, exactly one option is drawn
    - multi_choice: checkbox group, a bounded number of distinct options

  Text kinds (uniform draw from a word bank, rules never apply):
    - short_text: single-line input
    - long_text: textarea

The discriminated ``Question`` union uses ``type`` as its discriminator.
The ``question_mapper`` dict maps type strings to their Pydantic classes.

Config files use camelCase keys (``minAnswers``,
``wordBank``); the models accept those through aliases as well as the
snake_case field names.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from survey_autofill.constants import QUESTION_KIND_ALIASES

Weight = Annotated[float, Field(ge=0)]


# --- Base question type ---

class BaseQuestion(BaseModel):
    """Fields shared by all question kinds.

    ``optional`` marks controls the form may legitimately not render (e.g.
    questions hidden by the form's own skip logic); a "not found" from the
    form filler is tolerated only for those.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    title: str = ""
    optional: bool = False


class ChoiceQuestion(BaseQuestion):
    """A question answered by drawing from weighted options."""

    # option value -> weight; insertion order is the sampling scan order
    options: Dict[str, Weight]

    @model_validator(mode="after")
    def _chk_options(self):
        if not self.options:
            raise ValueError(f"question {self.id}: options must not be empty")
        return self

    @property
    def total_weight(self) -> float:
        return sum(self.options.values())


class TextQuestion(BaseQuestion):
    """A question answered with one entry of an ordered word bank."""

    word_bank: List[str] = Field(alias="wordBank", min_length=1)


# --- Concrete kinds ---

class SingleChoiceQuestion(ChoiceQuestion):
    """Pick exactly one option."""

    type: Literal["single_choice"] = "single_choice"


class MultiChoiceQuestion(ChoiceQuestion):
    """Pick between ``min_answers`` and ``max_answers`` distinct options."""

    type: Literal["multi_choice"] = "multi_choice"
    min_answers: int = Field(default=1, alias="minAnswers", ge=0)
    max_answers: Optional[int] = Field(default=None, alias="maxAnswers", ge=0)

    @model_validator(mode="after")
    def _chk_bounds(self):
        # Default to "any number of options" if not explicitly provided
        if self.max_answers is None:
            self.max_answers = len(self.options)
        if not 0 <= self.min_answers <= self.max_answers <= len(self.options):
            raise ValueError(
                f"question {self.id}: need 0 <= minAnswers ({self.min_answers}) "
                f"<= maxAnswers ({self.max_answers}) <= option count ({len(self.options)})"
            )
        return self


class ShortTextQuestion(TextQuestion):
    """Single-line text input."""

    type: Literal["short_text"] = "short_text"


class LongTextQuestion(TextQuestion):
    """Multi-line text area."""

    type: Literal["long_text"] = "long_text"


# --- Discriminated union of all question kinds ---

Question = Annotated[
    Union[
        SingleChoiceQuestion,
        MultiChoiceQuestion,
        ShortTextQuestion,
        LongTextQuestion,
    ],
    Field(discriminator="type"),
]

# Maps type string -> Pydantic class for dynamic deserialization.
question_mapper = {
    "single_choice": SingleChoiceQuestion,
    "multi_choice": MultiChoiceQuestion,
    "short_text": ShortTextQuestion,
    "long_text": LongTextQuestion,
}


def normalize_kind(raw: Any) -> Any:
    """Map a config kind label (e.g. ``单选题``, ``checkbox``) to its canonical name.

    Unknown labels are returned unchanged so validation reports them.
    """
    if isinstance(raw, str):
        return QUESTION_KIND_ALIASES.get(raw.strip(), raw)
    return raw


def parse_question(data: dict) -> Question:
    """Build the right question model from a raw config dict.

    Raises:
        ValueError: if the ``type`` label is unknown.
        pydantic.ValidationError: if the fields do not fit the kind.
    """
    kind = normalize_kind(data.get("type"))
    cls = question_mapper.get(kind)
    if cls is None:
        raise ValueError(f"Unknown question type {data.get('type')!r} for question {data.get('id')!r}")
    return cls.model_validate({**data, "type": kind})
