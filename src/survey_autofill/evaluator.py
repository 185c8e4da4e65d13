"""RuleEngine — applies dependency rules to a question's option weights.

Before a choice question is sampled, the synthesizer asks the engine for
adjusted weights.  Every rule whose effect targets the question is checked
against the run's ledger:

  - source question not answered yet: the rule does not fire
  - multi-choice answer: fires if it shares any option with the condition
  - single answer: fires if it is one of the condition's options

Firing rules multiply the target option's weight, in rule-list order, so
several rules on the same option compose multiplicatively.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from survey_autofill.models.ledger import Answer, AnswerLedger
from survey_autofill.models.rule import DependencyRule

logger = logging.getLogger(__name__)


class RuleEngine:
    """Evaluates dependency rules against a run's answer ledger."""

    def adjust_weights(
        self,
        question_id: str,
        base_weights: Mapping[str, float],
        ledger: AnswerLedger,
        rules: Sequence[DependencyRule],
    ) -> dict[str, float]:
        """Return a new weight mapping with all firing rules applied.

        Args:
            question_id: the question about to be answered
            base_weights: configured option -> weight mapping (never mutated)
            ledger: answers recorded earlier in the current run
            rules: all configured dependency rules, in config order

        Returns:
            A fresh dict in the same option order as ``base_weights``.
        """
        adjusted = dict(base_weights)

        for rule in rules:
            if rule.effect.target_question_id != question_id:
                continue

            source_id = rule.condition.question_id
            answer = ledger.get(source_id)
            if not self._condition_met(answer, rule.condition.selected_options):
                continue

            target = rule.effect.target_option
            if target not in adjusted:
                logger.warning(
                    "Rule Q%s -> Q%s targets unknown option %r; ignored",
                    source_id, question_id, target,
                )
                continue

            adjusted[target] *= rule.effect.weight_multiplier
            logger.info(
                "Rule applied: Q%s answered %s, Q%s option %s weight now %s",
                source_id, answer, question_id, target, adjusted[target],
            )

        return adjusted

    @staticmethod
    def _condition_met(answer: Answer | None, required: Sequence[str]) -> bool:
        """True if the recorded answer satisfies the rule's required options.

        An unanswered source (None) or an empty multi-choice answer never
        satisfies a condition.
        """
        if answer is None:
            return False
        if isinstance(answer, tuple):
            return not set(answer).isdisjoint(required)
        return answer in required


_default_engine = RuleEngine()


def adjust_weights(
    question_id: str,
    base_weights: Mapping[str, float],
    ledger: AnswerLedger,
    rules: Sequence[DependencyRule],
) -> dict[str, float]:
    """Module-level shortcut for :meth:`RuleEngine.adjust_weights`."""
    return _default_engine.adjust_weights(question_id, base_weights, ledger, rules)
