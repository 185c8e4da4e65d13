"""survey_browser — Playwright implementations of the survey collaborators.

    PlaywrightSessionProvider / PlaywrightFormSession — per-run browser session
    extract_schema / extract_survey                  — question schema from a live form
    capture_submit_request                           — record one manual submission
    FormSelectors                                    — markup selectors for the platform
"""

from survey_browser.capture import CapturedRequest, capture_submit_request
from survey_browser.extractor import extract_schema, extract_survey
from survey_browser.selectors import FormSelectors
from survey_browser.session import PlaywrightFormSession, PlaywrightSessionProvider

__all__ = [
    "CapturedRequest",
    "FormSelectors",
    "PlaywrightFormSession",
    "PlaywrightSessionProvider",
    "capture_submit_request",
    "extract_schema",
    "extract_survey",
]
