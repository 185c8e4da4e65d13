"""Playwright implementation of the form session collaborators.

``PlaywrightSessionProvider.open()`` launches a fresh Chromium for every run
and closes it on every exit path.  ``PlaywrightFormSession`` maps the
orchestrator's abstract operations onto the platform's markup.

Post-submit transitions are observed with a single predicate wait
(``page.wait_for_url(url != submitted_from)``) rather than a navigation
listener, so a transition that already finished while the challenge probe
ran is still seen.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from survey_autofill.errors import NavigationError
from survey_autofill.interfaces import FormSession, SessionProvider
from survey_autofill.models.enums import ChallengeProbe, FillResult

from survey_browser.selectors import FormSelectors, css_string

logger = logging.getLogger(__name__)


def _ms(seconds: float) -> float:
    return seconds * 1000


class PlaywrightFormSession(FormSession):
    """Drives one Playwright page through a single run."""

    def __init__(self, page: Page, selectors: FormSelectors | None = None) -> None:
        self._page = page
        self._selectors = selectors or FormSelectors()
        self._submitted_from: str | None = None

    @property
    def page(self) -> Page:
        return self._page

    # ------------------------------------------------------------------
    # PageNavigator
    # ------------------------------------------------------------------

    async def goto(self, url: str, timeout: float) -> None:
        try:
            await self._page.goto(url, wait_until="networkidle", timeout=_ms(timeout))
        except PlaywrightError as exc:
            raise NavigationError(f"Could not open {url}: {exc}") from exc

    async def submit(self, timeout: float) -> None:
        self._submitted_from = self._page.url
        await self._page.locator(self._selectors.submit_button).click(timeout=_ms(timeout))

    async def wait_for_transition(self, timeout: float) -> bool:
        origin = self._submitted_from or self._page.url
        if self._page.url != origin:
            return True
        try:
            await self._page.wait_for_url(lambda url: url != origin, wait_until="load", timeout=_ms(timeout))
        except PlaywrightTimeoutError:
            return False
        return True

    async def current_url(self) -> str:
        return self._page.url

    # ------------------------------------------------------------------
    # FormFiller
    # ------------------------------------------------------------------

    def _container(self, question_id: str):
        return self._page.locator(self._selectors.question_container.format(question_id=question_id))

    async def select_options(self, question_id: str, values: Sequence[str], timeout: float) -> FillResult:
        container = self._container(question_id)
        if await container.count() == 0:
            return FillResult.NOT_FOUND

        for value in values:
            option = container.locator(self._selectors.option.format(value=css_string(value)))
            if await option.count() == 0:
                logger.debug("Q%s: option %r not rendered", question_id, value)
                return FillResult.NOT_FOUND
            # The real input is hidden behind the platform's styled widget
            try:
                await option.first.click(force=True, timeout=_ms(timeout))
            except PlaywrightTimeoutError:
                logger.debug("Q%s: option %r not clickable within %ss", question_id, value, timeout)
                return FillResult.NOT_FOUND
        return FillResult.OK

    async def enter_text(self, question_id: str, text: str, timeout: float) -> FillResult:
        field = self._container(question_id).locator(self._selectors.text_input)
        if await field.count() == 0:
            return FillResult.NOT_FOUND
        try:
            await field.first.fill(text, timeout=_ms(timeout))
        except PlaywrightTimeoutError:
            logger.debug("Q%s: text field not editable within %ss", question_id, timeout)
            return FillResult.NOT_FOUND
        return FillResult.OK

    # ------------------------------------------------------------------
    # ChallengeDetector
    # ------------------------------------------------------------------

    async def probe_challenge(self, timeout: float) -> ChallengeProbe:
        """Wait up to ``timeout`` for the challenge control to become visible.

        A timeout with the control absent from the DOM means no challenge.
        A timeout with the control attached but hidden, or a probe error, is
        inconclusive: the challenge may simply not have rendered yet.
        """
        challenge = self._page.locator(self._selectors.challenge)
        try:
            await challenge.first.wait_for(state="visible", timeout=_ms(timeout))
            return ChallengeProbe.VISIBLE
        except PlaywrightTimeoutError:
            pass
        except PlaywrightError as exc:
            logger.debug("Challenge probe error: %s", exc)
            return ChallengeProbe.INCONCLUSIVE

        try:
            attached = await challenge.count() > 0
        except PlaywrightError:
            return ChallengeProbe.INCONCLUSIVE
        return ChallengeProbe.INCONCLUSIVE if attached else ChallengeProbe.ABSENT

    async def resolve_challenge(self, timeout: float) -> bool:
        """Click the challenge button; the platform submits by itself once it passes."""
        deadline = time.monotonic() + timeout
        await self._page.locator(self._selectors.challenge_button).first.click(timeout=_ms(timeout))
        # Playwright treats timeout=0 as "wait forever"
        return await self.wait_for_transition(max(deadline - time.monotonic(), 0.001))


class PlaywrightSessionProvider(SessionProvider):
    """Opens one Chromium browser per run.

    Args:
        headless: run without a visible window
        selectors: markup selectors for the target platform
    """

    def __init__(self, *, headless: bool = True, selectors: FormSelectors | None = None) -> None:
        self._headless = headless
        self._selectors = selectors or FormSelectors()

    @asynccontextmanager
    async def open(self) -> AsyncIterator[PlaywrightFormSession]:
        async with async_playwright() as pw:
            logger.info("Launching browser (headless=%s)", self._headless)
            browser = await pw.chromium.launch(headless=self._headless)
            try:
                context = await browser.new_context()
                page = await context.new_page()
                yield PlaywrightFormSession(page, self._selectors)
            finally:
                await browser.close()
                logger.info("Browser closed")
