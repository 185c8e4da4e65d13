"""Console entry point: ``survey-autofill``.

Sub-commands::

    survey-autofill extract       # read the live form, write survey_structure.json, update config
    survey-autofill init-config   # write a default config from survey_structure.json
    survey-autofill preview -n 500   # offline answer frequencies (no browser)
    survey-autofill run           # fill and submit submissionCount times
    survey-autofill capture       # record one manual submission request

A ``ConfigError`` is fatal: it is logged and the process exits with status 1
before any run starts.  Individual run failures never change the exit status;
they are reported in the final summary.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from collections import Counter
from dataclasses import replace
from pathlib import Path

import yaml

from survey_autofill.config import (
    default_config,
    load_config,
    load_schema,
    load_yaml,
    merge_schema,
    save_config,
    save_schema,
)
from survey_autofill.errors import ConfigError, SurveyAutofillError
from survey_autofill.models.config import SurveyConfig
from survey_autofill.models.ledger import AnswerLedger
from survey_autofill.orchestrator import SubmissionOrchestrator
from survey_autofill.scheduler import RunScheduler, RunSummary
from survey_autofill.synthesizer import AnswerSynthesizer

from survey_runner.config import RunnerSettings, load_settings

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------

async def run_submissions(
    config: SurveyConfig,
    *,
    headless: bool = True,
    count: int | None = None,
    seed: int | None = None,
) -> RunSummary:
    """Run the configured number of submissions with a Playwright browser."""
    from survey_browser.session import PlaywrightSessionProvider

    rng = random.Random(seed)
    total = config.submission_count if count is None else count
    logger.info("Config loaded; %d submissions to %s", total, config.survey_url)

    orchestrator = SubmissionOrchestrator(config, PlaywrightSessionProvider(headless=headless), rng=rng)
    scheduler = RunScheduler(orchestrator, total, rng=rng)
    return await scheduler.run()


def preview_answers(
    config: SurveyConfig, samples: int, *, seed: int | None = None
) -> dict[str, Counter]:
    """Synthesize ``samples`` full ledgers offline and count answers per question.

    Mirrors the fill order of a real run, so dependency rules apply exactly
    as they would in the browser.
    """
    synthesizer = AnswerSynthesizer(rng=random.Random(seed))
    tallies: dict[str, Counter] = {q.id: Counter() for q in config.questions}

    for _ in range(samples):
        ledger = AnswerLedger()
        for question in config.questions:
            answer = synthesizer.synthesize(question, ledger, config.conditional_rules)
            if answer is None:
                tallies[question.id]["<none>"] += 1
                continue
            ledger.record(question.id, answer)
            values = answer if isinstance(answer, list) else [answer]
            tallies[question.id].update(values)
    return tallies


def _print_preview(config: SurveyConfig, tallies: dict[str, Counter], samples: int) -> None:
    for question in config.questions:
        print(f"Q{question.id} [{question.type}] {question.title}")
        for value, count in sorted(tallies[question.id].items(), key=lambda kv: -kv[1]):
            print(f"    {value!s:<24} {count:6d}  {100.0 * count / samples:5.1f}%")


async def extract_command(settings: RunnerSettings, url: str | None) -> int:
    """Extract the live schema, save it, and merge it into the config."""
    from survey_browser.extractor import extract_survey

    config_path = Path(settings.config_path)
    existing: dict = {}
    if config_path.exists():
        try:
            existing = load_yaml(config_path) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Cannot read {config_path}: {exc}") from exc
        if not isinstance(existing, dict):
            raise ConfigError(f"{config_path}: expected a mapping at top level")
    survey_url = url or existing.get("surveyUrl") or (existing.get("general") or {}).get("surveyUrl")
    if not survey_url:
        logger.error('Set "surveyUrl" in %s or pass --url, then retry', config_path)
        return 1

    schema = await extract_survey(survey_url, headless=settings.headless)
    save_schema(schema, settings.structure_path)
    logger.info("Survey structure saved to %s", settings.structure_path)

    data = merge_schema(existing, schema, survey_url) if existing else default_config(schema, survey_url)
    save_config(data, config_path)
    logger.info("Questions in %s updated; edit weights and word banks before running", config_path)
    return 0


def init_config_command(settings: RunnerSettings, url: str | None, force: bool) -> int:
    """Write a default config from a previously extracted structure file."""
    config_path = Path(settings.config_path)
    if config_path.exists() and not force:
        logger.error("%s already exists; pass --force to overwrite", config_path)
        return 1
    if not url:
        logger.error("--url is required to generate a config")
        return 1

    schema = load_schema(settings.structure_path)
    save_config(default_config(schema, url), config_path)
    logger.info("Generated %s; review surveyUrl, weights, word banks and submissionCount", config_path)
    return 0


async def capture_command(settings: RunnerSettings, timeout: float) -> int:
    from survey_browser.capture import capture_submit_request

    config = load_config(settings.config_path)
    captured = await capture_submit_request(config.survey_url, timeout=timeout)
    save_config(captured.model_dump(), settings.capture_path)
    logger.info("Captured request saved to %s", settings.capture_path)
    return 0


# ------------------------------------------------------------------
# CLI plumbing
# ------------------------------------------------------------------

def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="survey-autofill",
        description="Fill and submit a web questionnaire with weighted, rule-driven answers.",
    )
    parser.add_argument("-c", "--config", help="Config file (default: $SURVEY_CONFIG_PATH or config.json)")
    parser.add_argument("--log-level", help="Logging level (default: $SURVEY_LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Fill and submit the survey submissionCount times")
    run.add_argument("-n", "--count", type=_positive_int, help="Override submissionCount (>= 1)")
    run.add_argument("--seed", type=int, help="Seed for reproducible answers")
    run.add_argument("--headed", action="store_true", help="Show the browser window")

    extract = sub.add_parser("extract", help="Extract the question schema from the live form")
    extract.add_argument("--url", help="Survey URL (default: surveyUrl from the config)")
    extract.add_argument("--headed", action="store_true", help="Show the browser window")

    init = sub.add_parser("init-config", help="Write a default config from the structure file")
    init.add_argument("--url", help="Survey URL to put into the config")
    init.add_argument("--force", action="store_true", help="Overwrite an existing config")

    preview = sub.add_parser("preview", help="Show answer frequencies without a browser")
    preview.add_argument("-n", "--samples", type=int, default=1000, help="Number of simulated runs (default: 1000)")
    preview.add_argument("--seed", type=int, help="Seed for reproducible output")

    capture = sub.add_parser("capture", help="Record one manual submission request")
    capture.add_argument("--timeout", type=float, default=600.0, help="Seconds to wait (default: 600)")

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    if args.config:
        settings = replace(settings, config_path=args.config)
    if getattr(args, "headed", False):
        settings = replace(settings, headless=False)
    configure_logging(args.log_level or settings.log_level)

    try:
        if args.command == "run":
            config = load_config(settings.config_path)
            seed = args.seed if args.seed is not None else settings.seed
            summary = asyncio.run(
                run_submissions(config, headless=settings.headless, count=args.count, seed=seed)
            )
            logger.info("%d of %d runs confirmed submitted", summary.submitted, len(summary.outcomes))
            return 0

        if args.command == "preview":
            config = load_config(settings.config_path)
            seed = args.seed if args.seed is not None else settings.seed
            _print_preview(config, preview_answers(config, args.samples, seed=seed), args.samples)
            return 0

        if args.command == "extract":
            return asyncio.run(extract_command(settings, args.url))

        if args.command == "init-config":
            return init_config_command(settings, args.url, args.force)

        if args.command == "capture":
            return asyncio.run(capture_command(settings, args.timeout))

    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 1
    except SurveyAutofillError as exc:
        logger.error("%s", exc)
        return 1

    return 2


def cli() -> None:
    """Console-script entry point: ``survey-autofill``."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
