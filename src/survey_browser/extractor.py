"""Schema extraction — reads the question list from a live form.

Each question container carries its id in the ``topic`` attribute.  The kind
is inferred from the controls it holds:

    radio      -> single_choice
    checkbox   -> multi_choice
    text input -> short_text
    textarea   -> long_text

Option values come from the hidden inputs referenced by each label's
``for`` attribute; the label text becomes the option's display label.
"""

from __future__ import annotations

import logging

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from survey_autofill.constants import NAVIGATION_TIMEOUT
from survey_autofill.errors import SchemaExtractionError
from survey_autofill.models.schema import ExtractedQuestion

from survey_browser.selectors import FormSelectors
from survey_browser.session import PlaywrightSessionProvider

logger = logging.getLogger(__name__)

# Checked in order; first control family present decides the kind.
_KIND_PROBES: list[tuple[str, str]] = [
    ('input[type="radio"]', "single_choice"),
    ('input[type="checkbox"]', "multi_choice"),
    ('input[type="text"]', "short_text"),
    ("textarea", "long_text"),
]

# Wait for the question root to render after page load.
QUESTION_ROOT_TIMEOUT = 15.0


async def extract_schema(
    page: Page,
    selectors: FormSelectors | None = None,
    *,
    timeout: float = QUESTION_ROOT_TIMEOUT,
) -> list[ExtractedQuestion]:
    """Parse all questions on an already-loaded form page, in page order.

    Raises:
        SchemaExtractionError: if the question root never appears or holds
            no questions (URL wrong or markup changed).
    """
    selectors = selectors or FormSelectors()
    try:
        await page.wait_for_selector(selectors.question_root, timeout=timeout * 1000)
    except PlaywrightError as exc:
        raise SchemaExtractionError(f"Question container {selectors.question_root} not found: {exc}") from exc

    items = await page.locator(selectors.question_item).all()
    if not items:
        raise SchemaExtractionError("No questions found; check the URL or whether the page layout changed")
    logger.info("Found %d questions", len(items))

    schema: list[ExtractedQuestion] = []
    for index, item in enumerate(items, start=1):
        question = await _extract_question(page, item, index, selectors)
        schema.append(question)
        logger.info("    - parsed Q%s: [%s]", question.id, question.type or "unknown")
    return schema


async def _extract_question(
    page: Page, item: Locator, index: int, selectors: FormSelectors
) -> ExtractedQuestion:
    qid = await item.get_attribute("topic") or str(index)

    title = ""
    title_loc = item.locator(selectors.question_title)
    if await title_loc.count() > 0:
        title = (await title_loc.first.inner_text()).strip()

    kind = None
    for probe, candidate in _KIND_PROBES:
        if await item.locator(probe).count() > 0:
            kind = candidate
            break

    options: dict[str, str] = {}
    if kind in ("single_choice", "multi_choice"):
        for label in await item.locator(selectors.option_label).all():
            for_id = await label.get_attribute("for")
            if not for_id:
                continue
            value = await page.locator(f"#{for_id}").get_attribute("value")
            if value is None:
                continue
            options[value] = (await label.inner_text()).strip()

    return ExtractedQuestion(id=qid, index=index, title=title, type=kind, options=options)


async def extract_survey(
    url: str,
    *,
    headless: bool = True,
    selectors: FormSelectors | None = None,
    navigation_timeout: float = NAVIGATION_TIMEOUT,
) -> list[ExtractedQuestion]:
    """Open ``url`` in a fresh browser and extract its question schema."""
    provider = PlaywrightSessionProvider(headless=headless, selectors=selectors)
    async with provider.open() as session:
        logger.info("Navigating to %s", url)
        await session.goto(url, timeout=navigation_timeout)
        return await extract_schema(session.page, selectors)
