"""Config file I/O — load, generate, and save survey configs.

Usage::

    config = load_config("config.json")       # raises ConfigError if unusable

    schema = load_schema("survey_structure.json")
    data = default_config(schema, "https://www.wjx.cn/vm/XXXX.aspx")
    save_config(data, "config.json")

``yaml.safe_load`` parses both YAML and JSON, so either format is accepted
on read.  On write, ``.json`` paths get JSON and everything else YAML.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import ValidationError

from survey_autofill.constants import (
    DEFAULT_MAX_ANSWERS,
    DEFAULT_MIN_ANSWERS,
    DEFAULT_WORD_BANK,
)
from survey_autofill.errors import ConfigError
from survey_autofill.models.config import SurveyConfig
from survey_autofill.models.schema import ExtractedQuestion

logger = logging.getLogger(__name__)


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML (or JSON) file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_config(path: Path | str) -> SurveyConfig:
    """Read and validate a survey config.

    Raises:
        ConfigError: if the file is missing, unparsable, or fails validation
            (e.g. no ``surveyUrl``).
    """
    try:
        raw = load_yaml(path)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    return parse_config(raw, source=str(path))


def parse_config(raw: Any, source: str = "<config>") -> SurveyConfig:
    """Validate already-parsed config data."""
    if not isinstance(raw, dict):
        raise ConfigError(f"{source}: expected a mapping at top level, got {type(raw).__name__}")
    try:
        config = SurveyConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"{source}: invalid config\n{exc}") from exc

    logger.info(
        "Config loaded from %s: %d questions, %d rules, %d submissions",
        source, len(config.questions), len(config.conditional_rules), config.submission_count,
    )
    _warn_forward_rules(config)
    return config


def _warn_forward_rules(config: SurveyConfig) -> None:
    """Log rules that can never fire because their source is not answered first."""
    order = {qid: i for i, qid in enumerate(config.question_ids())}
    for rule in config.conditional_rules:
        src = order.get(rule.condition.question_id)
        dst = order.get(rule.effect.target_question_id)
        if src is None or dst is None:
            logger.warning(
                "Rule Q%s -> Q%s references an unknown question; it will never fire",
                rule.condition.question_id, rule.effect.target_question_id,
            )
        elif src >= dst:
            logger.warning(
                "Rule Q%s -> Q%s looks forward in schema order; it will never fire",
                rule.condition.question_id, rule.effect.target_question_id,
            )


# ---------------------------------------------------------------------------
# Default config generation from an extracted schema
# ---------------------------------------------------------------------------

def default_config(
    schema: Iterable[ExtractedQuestion],
    survey_url: str,
    *,
    submission_count: int = 1,
    default_min: int = DEFAULT_MIN_ANSWERS,
    default_max: int = DEFAULT_MAX_ANSWERS,
    word_bank: list[str] | None = None,
) -> dict:
    """Build a raw config with equal weights for every option.

    The result is meant to be saved and then edited by hand (weights, word
    banks, rules, submission count).
    """
    return {
        "surveyUrl": survey_url,
        "submissionCount": submission_count,
        "questions": default_questions(
            schema, default_min=default_min, default_max=default_max, word_bank=word_bank,
        ),
        "conditionalRules": [],
    }


def default_questions(
    schema: Iterable[ExtractedQuestion],
    *,
    default_min: int = DEFAULT_MIN_ANSWERS,
    default_max: int = DEFAULT_MAX_ANSWERS,
    word_bank: list[str] | None = None,
) -> list[dict]:
    """Config entries for each extracted question; unknown kinds are skipped."""
    bank = list(word_bank or DEFAULT_WORD_BANK)
    entries: list[dict] = []

    for q in schema:
        entry: dict[str, Any] = {"id": q.id, "title": q.title, "type": q.type}
        if q.type in ("single_choice", "multi_choice"):
            if not q.options:
                logger.warning("Q%s has no options; left out of the config", q.id)
                continue
            entry["options"] = {value: 1 for value in q.options}
            if q.type == "multi_choice":
                # Clamp so the generated bounds are always valid for this question
                count = len(q.options)
                entry["minAnswers"] = min(default_min, count)
                entry["maxAnswers"] = max(entry["minAnswers"], min(default_max, count))
        elif q.type in ("short_text", "long_text"):
            entry["wordBank"] = list(bank)
        else:
            logger.warning("Q%s has unsupported type %r; left out of the config", q.id, q.type)
            continue
        entries.append(entry)

    return entries


def merge_schema(existing: dict, schema: Iterable[ExtractedQuestion], survey_url: str) -> dict:
    """Replace the questions of an existing raw config, keeping its other settings.

    Multi-choice defaults come from the existing config's ``general`` block
    (``defaultMinAnswers`` / ``defaultMaxAnswers``) when present.
    """
    general = existing.get("general") or {}
    merged = dict(existing)
    merged["questions"] = default_questions(
        schema,
        default_min=general.get("defaultMinAnswers", DEFAULT_MIN_ANSWERS),
        default_max=general.get("defaultMaxAnswers", DEFAULT_MAX_ANSWERS),
    )
    if not merged.get("surveyUrl"):
        merged["surveyUrl"] = survey_url
    return merged


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

def save_config(data: Any, path: Path | str) -> Path:
    """Write a raw config; JSON for ``.json`` paths, YAML otherwise."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            json.dump(data, f, ensure_ascii=False, indent=2)
        else:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
    logger.info("Config written to %s", path)
    return path


def save_schema(schema: Iterable[ExtractedQuestion], path: Path | str) -> Path:
    """Persist an extracted schema (same format rules as :func:`save_config`)."""
    return save_config([q.model_dump() for q in schema], path)


def load_schema(path: Path | str) -> list[ExtractedQuestion]:
    """Read a schema saved by :func:`save_schema`.

    Raises:
        ConfigError: if the file is missing or malformed.
    """
    try:
        raw = load_yaml(path)
        return [ExtractedQuestion.model_validate(item) for item in raw or []]
    except (OSError, yaml.YAMLError, ValidationError, TypeError) as exc:
        raise ConfigError(f"Cannot read schema {path}: {exc}") from exc
