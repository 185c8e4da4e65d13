"""Dependency rule models.

A rule raises or lowers one option's weight on a later question depending on
the answer already recorded for an earlier question in the same run::

    {
      "condition": {"questionId": "1", "selectedOptions": ["1", "2"]},
      "effect": {"targetQuestionId": "5", "targetOption": "3", "weightMultiplier": 4}
    }

Rules may only look backwards in schema order; a rule whose source question
has not been answered yet simply does not fire.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class RuleCondition(BaseModel):
    """Fires when the source question's answer hits any of ``selected_options``."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    question_id: str = Field(alias="questionId")
    selected_options: List[str] = Field(alias="selectedOptions")


class RuleEffect(BaseModel):
    """Multiplies the weight of ``target_option`` on ``target_question_id``."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    target_question_id: str = Field(alias="targetQuestionId")
    target_option: str = Field(alias="targetOption")
    weight_multiplier: float = Field(default=1.0, alias="weightMultiplier", ge=0)


class DependencyRule(BaseModel):
    """A condition on an earlier answer paired with a weight effect."""

    condition: RuleCondition
    effect: RuleEffect
