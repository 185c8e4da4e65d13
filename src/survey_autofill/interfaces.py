"""Abstract interfaces for the browser-side collaborators.

These ABCs define the contract the orchestrator drives.  The SDK itself
holds no browser code; ``survey_browser`` ships the Playwright
implementation and the tests ship in-memory fakes.

Typical integration flow::

    provider: SessionProvider = PlaywrightSessionProvider(headless=True)
    orchestrator = SubmissionOrchestrator(config, provider)

    # one run: the provider opens a fresh session and always closes it
    outcome = await orchestrator.run()

Every wait takes its own timeout in seconds.  There is no external
cancellation; a collaborator returns (or raises) once its bound elapses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Sequence

from survey_autofill.models.enums import ChallengeProbe, FillResult


class PageNavigator(ABC):
    """Page-level navigation of the survey form."""

    @abstractmethod
    async def goto(self, url: str, timeout: float) -> None:
        """Open the survey page.

        Raises
        ------
        NavigationError
            If the page does not load within ``timeout``.
        """
        ...

    @abstractmethod
    async def submit(self, timeout: float) -> None:
        """Trigger the form's submit action, waiting at most ``timeout`` for it."""
        ...

    @abstractmethod
    async def wait_for_transition(self, timeout: float) -> bool:
        """Wait for the page to leave the location it was submitted from.

        Returns
        -------
        bool
            True if the transition happened (possibly already before the
            call), False once ``timeout`` elapsed without one.
        """
        ...

    @abstractmethod
    async def current_url(self) -> str:
        """Location currently shown by the session."""
        ...


class FormFiller(ABC):
    """Applies synthesized answers to the live form, addressed by question id."""

    @abstractmethod
    async def select_options(self, question_id: str, values: Sequence[str], timeout: float) -> FillResult:
        """Select one or more options by value.

        Returns ``FillResult.NOT_FOUND`` if the question container or any of
        the option controls is absent or not actionable within ``timeout``.
        """
        ...

    @abstractmethod
    async def enter_text(self, question_id: str, text: str, timeout: float) -> FillResult:
        """Type ``text`` into the question's input or textarea."""
        ...


class ChallengeDetector(ABC):
    """Detects and triggers the form's verification challenge."""

    @abstractmethod
    async def probe_challenge(self, timeout: float) -> ChallengeProbe:
        """Check, within ``timeout``, whether a challenge control is visible."""
        ...

    @abstractmethod
    async def resolve_challenge(self, timeout: float) -> bool:
        """Trigger the challenge's resolution action.

        Returns
        -------
        bool
            True if the resulting page transition happened within
            ``timeout``, False otherwise.
        """
        ...


class FormSession(PageNavigator, FormFiller, ChallengeDetector):
    """One exclusively-owned browser session, used for exactly one run."""


class SessionProvider(ABC):
    """Factory for per-run form sessions."""

    @abstractmethod
    def open(self) -> AbstractAsyncContextManager[FormSession]:
        """Acquire a fresh session.

        The returned async context manager must release the underlying
        browser on every exit path, including exceptions.
        """
        ...
