"""AnswerLedger — the answers recorded so far within a single run.

The ledger is what dependency rules are evaluated against.  It is owned by
exactly one run: created empty when the run starts, appended to as each
question is answered, and dropped when the run ends.
"""

from __future__ import annotations

from typing import Iterator, Union

# str for single-choice and text answers; distinct option values in draw
# order for multi-choice answers.
Answer = Union[str, tuple[str, ...]]


class AnswerLedger:
    """Append-only mapping of question id -> recorded answer."""

    def __init__(self) -> None:
        self._answers: dict[str, Answer] = {}

    def record(self, question_id: str, answer: str | list[str] | tuple[str, ...]) -> None:
        """Record the answer for a question.

        Raises:
            ValueError: if the question already has an answer in this run.
        """
        if question_id in self._answers:
            raise ValueError(f"Question {question_id} already answered in this run")
        if isinstance(answer, (list, tuple)):
            answer = tuple(answer)
        self._answers[question_id] = answer

    def get(self, question_id: str) -> Answer | None:
        return self._answers.get(question_id)

    def as_dict(self) -> dict[str, str | list[str]]:
        """Plain snapshot suitable for logging and outcomes."""
        return {
            qid: list(value) if isinstance(value, tuple) else value
            for qid, value in self._answers.items()
        }

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._answers

    def __iter__(self) -> Iterator[str]:
        return iter(self._answers)

    def __len__(self) -> int:
        return len(self._answers)

    def __repr__(self) -> str:
        return f"AnswerLedger({self._answers!r})"
