"""AnswerSynthesizer — picks an answer for one question.

Dispatch by question kind:

  - single_choice: rule-adjusted weights, one weighted draw
  - multi_choice: rule-adjusted weights, ``min_answers..max_answers`` distinct draws
  - short_text / long_text: uniform draw from the word bank (no weighting)

The synthesizer has no side effects.  The caller records the answer in the
ledger before the next question is synthesized, since later rules may
depend on it.
"""

from __future__ import annotations

import logging
import random
from typing import Sequence

from survey_autofill.evaluator import RuleEngine
from survey_autofill.models.ledger import AnswerLedger
from survey_autofill.models.question import (
    MultiChoiceQuestion,
    Question,
    SingleChoiceQuestion,
    TextQuestion,
)
from survey_autofill.models.rule import DependencyRule
from survey_autofill.sampler import select_many, select_one

logger = logging.getLogger(__name__)


class AnswerSynthesizer:
    """Combines the rule engine and the weighted sampler per question kind.

    Args:
        rng: random source; pass a seeded ``random.Random`` for reproducible runs
        engine: rule engine (a fresh :class:`RuleEngine` by default)
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        engine: RuleEngine | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._engine = engine or RuleEngine()

    def synthesize(
        self,
        question: Question,
        ledger: AnswerLedger,
        rules: Sequence[DependencyRule] = (),
    ) -> str | list[str] | None:
        """Return an answer for ``question``.

        Returns ``None`` (single-choice) or an empty list (multi-choice) when
        the adjusted weights leave nothing to choose from.
        """
        if isinstance(question, TextQuestion):
            return self._rng.choice(question.word_bank)

        weights = self._engine.adjust_weights(question.id, question.options, ledger, rules)

        if isinstance(question, SingleChoiceQuestion):
            return select_one(weights, self._rng)
        if isinstance(question, MultiChoiceQuestion):
            return select_many(weights, question.min_answers, question.max_answers, self._rng)

        logger.warning("synthesize() called with unsupported question type: %s", type(question).__name__)
        return None
