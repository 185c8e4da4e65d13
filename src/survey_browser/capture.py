"""Submission request capture.

Opens a visible browser on the survey and waits for the user to fill and
submit it by hand.  The first POST whose body carries the platform's
``submitdata=`` field is returned, which documents the exact wire format the
form submits.  The wait is a single predicate wait with a timeout; closing
the browser early aborts it.
"""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Request
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright
from pydantic import BaseModel

from survey_autofill.constants import SUBMIT_REQUEST_MARKER
from survey_autofill.errors import SurveyAutofillError

logger = logging.getLogger(__name__)

# Manual fill-in takes a while; 10 minutes by default.
CAPTURE_TIMEOUT = 600.0


class CapturedRequest(BaseModel):
    """The captured submission request."""

    url: str
    headers: dict[str, str]
    post_data: Optional[str] = None


def is_submit_request(request: Request, marker: str = SUBMIT_REQUEST_MARKER) -> bool:
    """True for POST requests whose body contains ``marker``."""
    if request.method != "POST":
        return False
    body = request.post_data
    if body and marker in body:
        return True
    logger.debug("Ignoring non-target POST request: %s", request.url)
    return False


async def capture_submit_request(
    url: str,
    *,
    timeout: float = CAPTURE_TIMEOUT,
    headless: bool = False,
    marker: str = SUBMIT_REQUEST_MARKER,
) -> CapturedRequest:
    """Wait for a manual submission of the form at ``url`` and return its request.

    Raises:
        SurveyAutofillError: if nothing was submitted within ``timeout`` or
            the browser was closed first.
    """
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=headless)
        try:
            page = await browser.new_page()
            async with page.expect_request(
                lambda r: is_submit_request(r, marker), timeout=timeout * 1000,
            ) as request_info:
                await page.goto(url)
                logger.info("Browser opened on the survey; fill it in and submit it once by hand")
            request = await request_info.value
            captured = CapturedRequest(
                url=request.url,
                headers=await request.all_headers(),
                post_data=request.post_data,
            )
            logger.info("Captured submission request to %s", captured.url)
            return captured
        except PlaywrightTimeoutError as exc:
            raise SurveyAutofillError(f"No submission captured within {timeout:.0f}s") from exc
        except PlaywrightError as exc:
            raise SurveyAutofillError(f"Capture aborted (browser closed?): {exc}") from exc
        finally:
            if browser.is_connected():
                await browser.close()
