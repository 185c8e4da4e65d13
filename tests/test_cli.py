"""Console entry point tests — offline commands only (no browser)."""

import json

import pytest

from helpers.builders import config, multi, rule, short_text, single
from survey_autofill.config import save_schema
from survey_autofill.models.schema import ExtractedQuestion
from survey_runner.app import build_parser, main, preview_answers
from survey_runner.config import load_settings

URL = "https://www.wjx.cn/vm/abc123.aspx"


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "surveyUrl": URL,
        "questions": [
            {"id": "1", "type": "radio", "options": {"A": 1, "B": 1}},
            {"id": "2", "type": "text", "wordBank": ["ok"]},
        ],
    }), encoding="utf-8")
    return path


class TestPreview:

    def test_counts_every_sample(self):
        cfg = config([single("1", {"A": 1, "B": 3}), multi("2", {"x": 1, "y": 1}, lo=1, hi=2)])
        tallies = preview_answers(cfg, 200, seed=5)
        assert sum(tallies["1"].values()) == 200
        assert 200 <= sum(tallies["2"].values()) <= 400

    def test_even_weights_split_evenly(self):
        cfg = config([single("1", {"A": 1, "B": 1})])
        tallies = preview_answers(cfg, 4000, seed=11)["1"]
        assert set(tallies) == {"A", "B"}
        assert 0.45 < tallies["A"] / 4000 < 0.55

    def test_rules_apply_in_preview(self):
        cfg = config(
            [single("1", {"A": 1}), single("2", {"x": 1, "y": 1})],
            rules=[rule("1", ["A"], "2", "x", 0)],
        )
        assert dict(preview_answers(cfg, 50, seed=1)["2"]) == {"y": 50}

    def test_unanswerable_counted_as_none(self):
        cfg = config([single("1", {"A": 0}, optional=True), short_text("2", ["w"])])
        tallies = preview_answers(cfg, 10)
        assert tallies["1"]["<none>"] == 10
        assert tallies["2"]["w"] == 10

    def test_seed_reproducible(self):
        cfg = config([single("1", {"A": 1, "B": 1, "C": 1})])
        assert preview_answers(cfg, 100, seed=3) == preview_answers(cfg, 100, seed=3)


class TestMain:

    def test_preview_command(self, config_file, capsys):
        assert main(["-c", str(config_file), "preview", "-n", "20", "--seed", "2"]) == 0
        out = capsys.readouterr().out
        assert "Q1 [single_choice]" in out
        assert "Q2 [short_text]" in out

    def test_missing_config_exits_1(self, tmp_path):
        assert main(["-c", str(tmp_path / "missing.json"), "preview"]) == 1

    def test_invalid_config_exits_1(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"questions": []}), encoding="utf-8")
        assert main(["-c", str(path), "run"]) == 1

    def test_init_config(self, tmp_path, monkeypatch):
        structure = tmp_path / "survey_structure.json"
        save_schema([ExtractedQuestion(id="1", index=1, type="single_choice", options={"1": "Yes", "2": "No"})], structure)
        monkeypatch.setenv("SURVEY_STRUCTURE_PATH", str(structure))
        out = tmp_path / "config.json"

        assert main(["-c", str(out), "init-config", "--url", URL]) == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["surveyUrl"] == URL
        assert data["questions"][0]["options"] == {"1": 1, "2": 1}

        # Existing config is kept unless --force is given
        assert main(["-c", str(out), "init-config", "--url", URL]) == 1
        assert main(["-c", str(out), "init-config", "--url", URL, "--force"]) == 0

    def test_init_config_requires_url(self, tmp_path):
        assert main(["-c", str(tmp_path / "config.json"), "init-config"]) == 1

    @pytest.mark.parametrize("count", ["0", "-1", "two"])
    def test_run_rejects_count_below_one(self, config_file, capsys, count):
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(config_file), "run", "--count", count])
        assert exc_info.value.code == 2
        assert "--count" in capsys.readouterr().err

    def test_parser_run_flags(self):
        args = build_parser().parse_args(["run", "-n", "3", "--seed", "7", "--headed"])
        assert (args.command, args.count, args.seed, args.headed) == ("run", 3, 7, True)


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("SURVEY_CONFIG_PATH", "SURVEY_HEADLESS", "SURVEY_SEED", "SURVEY_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        settings = load_settings()
        assert settings.config_path == "config.json"
        assert settings.headless is True
        assert settings.seed is None
        assert settings.log_level == "INFO"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SURVEY_HEADLESS", "false")
        monkeypatch.setenv("SURVEY_SEED", "42")
        monkeypatch.setenv("SURVEY_LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.headless is False
        assert settings.seed == 42
        assert settings.log_level == "DEBUG"
