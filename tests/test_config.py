"""Config models and config file I/O.

Covers alias handling (camelCase keys of the on-disk layout),
kind label normalisation, ``general`` block lifting, validation failures
surfaced as ConfigError, and default config generation from an extracted
schema.
"""

import json
import logging

import pytest
import yaml
from pydantic import ValidationError

from survey_autofill.config import (
    default_config,
    load_config,
    load_schema,
    merge_schema,
    parse_config,
    save_config,
    save_schema,
)
from survey_autofill.constants import DEFAULT_COMPLETION_PATTERNS, DEFAULT_WORD_BANK
from survey_autofill.errors import ConfigError
from survey_autofill.models.enums import OutcomeKind
from survey_autofill.models.ledger import AnswerLedger
from survey_autofill.models.outcome import RunOutcome
from survey_autofill.models.question import (
    LongTextQuestion,
    MultiChoiceQuestion,
    ShortTextQuestion,
    SingleChoiceQuestion,
    parse_question,
)
from survey_autofill.models.schema import ExtractedQuestion

URL = "https://www.wjx.cn/vm/abc123.aspx"


def _raw(**extra):
    data = {
        "surveyUrl": URL,
        "submissionCount": 3,
        "questions": [
            {"id": 1, "title": "Gender", "type": "单选题", "options": {"1": 1, "2": 2}},
            {"id": 2, "type": "多选题", "options": {"1": 1, "2": 1, "3": 1}, "minAnswers": 1, "maxAnswers": 2},
            {"id": 3, "type": "填空题", "wordBank": ["ok", "fine"]},
            {"id": 4, "type": "textarea", "wordBank": ["long answer"]},
        ],
        "conditionalRules": [
            {
                "condition": {"questionId": 1, "selectedOptions": [1]},
                "effect": {"targetQuestionId": 2, "targetOption": 3, "weightMultiplier": 4},
            }
        ],
    }
    data.update(extra)
    return data


# =====================================================================
# Question models
# =====================================================================


class TestQuestionModels:

    def test_kind_labels_normalised(self):
        cfg = parse_config(_raw())
        kinds = [type(q) for q in cfg.questions]
        assert kinds == [SingleChoiceQuestion, MultiChoiceQuestion, ShortTextQuestion, LongTextQuestion]

    def test_numeric_ids_coerced_to_str(self):
        cfg = parse_config(_raw())
        assert cfg.question_ids() == ["1", "2", "3", "4"]
        r = cfg.conditional_rules[0]
        assert r.condition.question_id == "1"
        assert r.condition.selected_options == ["1"]
        assert r.effect.target_option == "3"
        assert r.effect.weight_multiplier == 4

    def test_multi_choice_max_defaults_to_option_count(self):
        q = parse_question({"id": "9", "type": "checkbox", "options": {"a": 1, "b": 1, "c": 1}})
        assert q.min_answers == 1
        assert q.max_answers == 3

    @pytest.mark.parametrize("lo,hi", [(3, 2), (1, 4)])
    def test_multi_choice_invalid_bounds(self, lo, hi):
        with pytest.raises(ValidationError):
            MultiChoiceQuestion(id="1", options={"a": 1, "b": 1, "c": 1}, minAnswers=lo, maxAnswers=hi)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            SingleChoiceQuestion(id="1", options={"a": -1})

    def test_empty_options_rejected(self):
        with pytest.raises(ValidationError):
            SingleChoiceQuestion(id="1", options={})

    def test_empty_word_bank_rejected(self):
        with pytest.raises(ValidationError):
            ShortTextQuestion(id="1", wordBank=[])

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError, match="Unknown question type"):
            parse_question({"id": "1", "type": "matrix"})

    def test_total_weight(self):
        assert SingleChoiceQuestion(id="1", options={"a": 1.5, "b": 2}).total_weight == 3.5


# =====================================================================
# SurveyConfig validation
# =====================================================================


class TestSurveyConfig:

    def test_defaults(self):
        cfg = parse_config({"surveyUrl": URL})
        assert cfg.submission_count == 1
        assert cfg.questions == []
        assert cfg.conditional_rules == []
        assert cfg.completion_patterns == DEFAULT_COMPLETION_PATTERNS

    def test_general_block_backfills_missing_fields(self):
        cfg = parse_config({
            "general": {"surveyUrl": URL, "submissionCount": 5, "conditionalRules": []},
            "questions": [],
        })
        assert cfg.survey_url == URL
        assert cfg.submission_count == 5

    def test_top_level_wins_over_general(self):
        cfg = parse_config(_raw(general={"surveyUrl": "https://elsewhere", "submissionCount": 9}))
        assert cfg.survey_url == URL
        assert cfg.submission_count == 3

    @pytest.mark.parametrize("general", ["oops", ["surveyUrl", URL], 3])
    def test_non_mapping_general_is_config_error(self, general):
        with pytest.raises(ConfigError, match="general must be a mapping"):
            parse_config({"surveyUrl": URL, "general": general, "questions": []})

    def test_missing_survey_url_is_config_error(self):
        with pytest.raises(ConfigError, match="invalid config"):
            parse_config({"questions": []})

    def test_empty_survey_url_is_config_error(self):
        with pytest.raises(ConfigError):
            parse_config({"surveyUrl": ""})

    def test_zero_submission_count_rejected(self):
        with pytest.raises(ConfigError):
            parse_config({"surveyUrl": URL, "submissionCount": 0})

    def test_duplicate_ids_rejected(self):
        raw = _raw()
        raw["questions"].append({"id": "1", "type": "text", "wordBank": ["x"]})
        with pytest.raises(ConfigError, match="duplicate question id"):
            parse_config(raw)

    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigError, match="expected a mapping"):
            parse_config(["not", "a", "mapping"])

    def test_config_is_frozen(self):
        cfg = parse_config(_raw())
        with pytest.raises(ValidationError):
            cfg.submission_count = 10

    def test_forward_rule_warned(self, caplog):
        raw = _raw(conditionalRules=[{
            "condition": {"questionId": "3", "selectedOptions": ["ok"]},
            "effect": {"targetQuestionId": "1", "targetOption": "1", "weightMultiplier": 2},
        }])
        with caplog.at_level(logging.WARNING):
            parse_config(raw)
        assert "looks forward" in caplog.text

    def test_unknown_rule_question_warned(self, caplog):
        raw = _raw(conditionalRules=[{
            "condition": {"questionId": "99", "selectedOptions": ["1"]},
            "effect": {"targetQuestionId": "2", "targetOption": "1"},
        }])
        with caplog.at_level(logging.WARNING):
            cfg = parse_config(raw)
        assert "unknown question" in caplog.text
        assert cfg.conditional_rules[0].effect.weight_multiplier == 1.0


# =====================================================================
# File I/O
# =====================================================================


class TestConfigFiles:

    def test_load_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(_raw(), ensure_ascii=False), encoding="utf-8")
        cfg = load_config(path)
        assert cfg.survey_url == URL
        assert len(cfg.questions) == 4

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump(_raw(), allow_unicode=True), encoding="utf-8")
        assert load_config(str(path)).submission_count == 3

    def test_missing_file_is_config_error(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "nope.json")

    def test_unparsable_file_is_config_error(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("surveyUrl: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_save_json_keeps_unicode(self, tmp_path):
        path = save_config({"wordBank": ["收获很大"]}, tmp_path / "out.json")
        assert "收获很大" in path.read_text(encoding="utf-8")

    def test_save_yaml_round_trips(self, tmp_path):
        path = save_config(_raw(), tmp_path / "out.yaml")
        assert load_config(path).question_ids() == ["1", "2", "3", "4"]

    def test_schema_save_and_load(self, tmp_path):
        schema = [
            ExtractedQuestion(id="1", index=0, title="Gender", type="single_choice", options={"1": "M", "2": "F"}),
            ExtractedQuestion(id="2", index=1, title="Notes", type="short_text"),
        ]
        path = save_schema(schema, tmp_path / "survey_structure.json")
        assert load_schema(path) == schema

    def test_malformed_schema_is_config_error(self, tmp_path):
        path = tmp_path / "survey_structure.json"
        path.write_text(json.dumps([{"title": "no id"}]), encoding="utf-8")
        with pytest.raises(ConfigError):
            load_schema(path)


# =====================================================================
# Default config generation
# =====================================================================


class TestDefaultConfig:

    @pytest.fixture
    def schema(self):
        return [
            ExtractedQuestion(id="1", index=0, title="Gender", type="single_choice", options={"1": "M", "2": "F"}),
            ExtractedQuestion(id="2", index=1, title="Hobbies", type="multi_choice", options={"1": "a", "2": "b"}),
            ExtractedQuestion(id="3", index=2, title="Comment", type="long_text"),
            ExtractedQuestion(id="4", index=3, title="Matrix", type=None),
            ExtractedQuestion(id="5", index=4, title="Broken", type="single_choice"),
        ]

    def test_equal_weights_and_clamped_bounds(self, schema):
        data = default_config(schema, URL)
        assert data["surveyUrl"] == URL
        assert data["submissionCount"] == 1
        assert data["conditionalRules"] == []
        q1, q2, q3 = data["questions"]
        assert q1["options"] == {"1": 1, "2": 1}
        assert (q2["minAnswers"], q2["maxAnswers"]) == (1, 2)
        assert q3["wordBank"] == DEFAULT_WORD_BANK

    def test_unsupported_and_empty_questions_skipped(self, schema):
        ids = [q["id"] for q in default_config(schema, URL)["questions"]]
        assert ids == ["1", "2", "3"]

    def test_generated_config_validates(self, schema):
        cfg = parse_config(default_config(schema, URL, submission_count=4, word_bank=["hi"]))
        assert cfg.submission_count == 4
        assert cfg.questions[2].word_bank == ["hi"]

    def test_merge_keeps_settings_and_uses_general_defaults(self, schema):
        existing = {
            "surveyUrl": "",
            "submissionCount": 7,
            "general": {"defaultMinAnswers": 2, "defaultMaxAnswers": 2},
            "conditionalRules": [{"keep": True}],
        }
        merged = merge_schema(existing, schema, URL)
        assert merged["surveyUrl"] == URL
        assert merged["submissionCount"] == 7
        assert merged["conditionalRules"] == [{"keep": True}]
        q2 = merged["questions"][1]
        assert (q2["minAnswers"], q2["maxAnswers"]) == (2, 2)
        assert "questions" not in existing


# =====================================================================
# Ledger and outcome
# =====================================================================


class TestLedger:

    def test_record_and_snapshot(self):
        ledger = AnswerLedger()
        ledger.record("1", "A")
        ledger.record("2", ["x", "y"])
        assert ledger.get("2") == ("x", "y")
        assert "1" in ledger and "3" not in ledger
        assert list(ledger) == ["1", "2"]
        assert len(ledger) == 2
        assert ledger.as_dict() == {"1": "A", "2": ["x", "y"]}

    def test_duplicate_record_raises(self):
        ledger = AnswerLedger()
        ledger.record("1", "A")
        with pytest.raises(ValueError, match="already answered"):
            ledger.record("1", "B")

    def test_missing_answer_is_none(self):
        assert AnswerLedger().get("1") is None


class TestRunOutcome:

    @pytest.mark.parametrize("kind,success,failure", [
        (OutcomeKind.SUBMITTED, True, False),
        (OutcomeKind.AMBIGUOUS_COMPLETION, False, False),
        (OutcomeKind.CHALLENGE_FAILED, False, True),
        (OutcomeKind.NAVIGATION_TIMEOUT, False, True),
        (OutcomeKind.ERROR, False, True),
    ])
    def test_success_and_failure_flags(self, kind, success, failure):
        outcome = RunOutcome(kind=kind)
        assert outcome.is_success is success
        assert outcome.is_failure is failure
