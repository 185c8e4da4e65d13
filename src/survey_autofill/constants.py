"""Survey autofill constants shared across the SDK.

These values are referenced by the orchestrator, scheduler, config loader,
and the Playwright collaborators.  They mirror the behaviour of the target
questionnaire platform (completion page names, default answer pools).

Timeouts and delay windows can be overridden via environment variables so
that slow networks or stricter targets can be accommodated without code
changes.  All durations are in seconds.
"""

import os

# --- Per-run wait budgets ---
# Initial page load (networkidle).  Overridable via SURVEY_NAVIGATION_TIMEOUT.
NAVIGATION_TIMEOUT = float(os.getenv("SURVEY_NAVIGATION_TIMEOUT", "60"))

# Quick visibility probe for the verification challenge after submit.
CHALLENGE_PROBE_TIMEOUT = float(os.getenv("SURVEY_CHALLENGE_PROBE_TIMEOUT", "1"))

# Page transition after the challenge's resolution action was triggered.
CHALLENGE_RESOLUTION_TIMEOUT = float(os.getenv("SURVEY_CHALLENGE_RESOLUTION_TIMEOUT", "30"))

# Natural post-submit transition when no challenge was shown.  Runs that
# miss it are abandoned, not retried.
COMPLETION_TIMEOUT = float(os.getenv("SURVEY_COMPLETION_TIMEOUT", "1"))

# Each click / fill on the form.  A control that matches but never becomes
# actionable within this budget counts as missing.
ACTION_TIMEOUT = float(os.getenv("SURVEY_ACTION_TIMEOUT", "5"))

# --- Human pacing ---
# Pause after each answered question, drawn uniformly from this window.
QUESTION_PAUSE_RANGE: tuple[float, float] = (
    float(os.getenv("SURVEY_QUESTION_PAUSE_MIN", "0.05")),
    float(os.getenv("SURVEY_QUESTION_PAUSE_MAX", "0.35")),
)

# Jittered delay between consecutive runs (never after the last run).
RUN_DELAY_RANGE: tuple[float, float] = (
    float(os.getenv("SURVEY_RUN_DELAY_MIN", "1.0")),
    float(os.getenv("SURVEY_RUN_DELAY_MAX", "2.0")),
)

# URL fragments of the platform's "thank you" pages.  A post-submit URL that
# contains none of these is classified as an ambiguous completion.
DEFAULT_COMPLETION_PATTERNS: list[str] = [
    "finish.aspx",
    "report.aspx",
    "completemobile2.aspx",
]

# Answers used for text questions when a default config is generated.
DEFAULT_WORD_BANK: list[str] = [
    "非常有意义",
    "建议很好",
    "希望学校多举办此类活动",
    "收获很大",
]

# Multi-choice bounds written into generated configs.
DEFAULT_MIN_ANSWERS = 1
DEFAULT_MAX_ANSWERS = 4

# Canonical question kinds and the labels accepted for them in config files.
QUESTION_KIND_ALIASES: dict[str, str] = {
    "single_choice": "single_choice",
    "single": "single_choice",
    "radio": "single_choice",
    "单选题": "single_choice",
    "multi_choice": "multi_choice",
    "multiple": "multi_choice",
    "checkbox": "multi_choice",
    "多选题": "multi_choice",
    "short_text": "short_text",
    "text": "short_text",
    "填空题": "short_text",
    "long_text": "long_text",
    "textarea": "long_text",
    "多行文本题": "long_text",
}

# POST body marker that identifies the form's submission request.
SUBMIT_REQUEST_MARKER = "submitdata="
