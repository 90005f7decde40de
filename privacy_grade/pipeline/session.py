"""
Page session: applies classification verdicts to the requests of one
page load and keeps that page's grade.

A request-capture driver creates one session per page, hands every
intercepted ``(url, resource_type)`` pair to :meth:`PageSession.handle_request`,
continues, redirects or aborts the request as told, reports the final
navigation through :meth:`PageSession.record_navigation`, and reads the
grade when the page is done.

Each session logs inside its own ``contextvars`` context, so sessions
that overlap in one thread or task keep separate log files and timers.
"""

from __future__ import annotations

import itertools
from typing import Literal, Protocol
from urllib import parse

import pydantic

from privacy_grade import config
from privacy_grade.analysis.grade import GradeState
from privacy_grade.analysis.trackers import TrackerClassifier
from privacy_grade.data.store import ListStore
from privacy_grade.models.grade import BlockedTracker, GradeEvent, GradeResult
from privacy_grade.models.verdict import Verdict
from privacy_grade.utils import logger, url
from privacy_grade.utils.errors import SessionClosedError, get_error_message
from privacy_grade.utils.serialization import CAMEL_CASE_CONFIG, to_camel_dict

log = logger.create_logger("PageSession")

RequestAction = Literal["continue", "redirect", "abort"]

_session_ids = itertools.count(1)


class HttpsAdvisor(Protocol):
    """Suggests an HTTPS replacement for a request URL."""

    def upgrade(self, url: str) -> str | None:
        """Return the upgraded URL, or ``None`` when no upgrade is known."""
        ...


class RequestDecision(pydantic.BaseModel):
    """What the driver should do with one intercepted request."""

    model_config = pydantic.ConfigDict(**CAMEL_CASE_CONFIG, frozen=True)

    action: RequestAction
    url: str
    verdict: Verdict | None = None


class PageSession:
    """Request handling and grading for a single page load.

    Args:
        page_url: URL of the page being loaded.
        classifier: Shared tracker classifier.
        store: Lists used for grading.
        https_advisor: Optional HTTPS upgrade advisor.
        settings: Engine settings; defaults to :func:`config.get_settings`.
        special_page: Override browser-internal page detection.
    """

    def __init__(
        self,
        page_url: str,
        classifier: TrackerClassifier,
        store: ListStore,
        https_advisor: HttpsAdvisor | None = None,
        settings: config.Settings | None = None,
        special_page: bool | None = None,
    ) -> None:
        self.page_url = page_url
        self.session_id = next(_session_ids)
        self._classifier = classifier
        self._https_advisor = https_advisor
        self._settings = settings or config.get_settings()
        self._closed = False
        self.requests: list[tuple[str, str]] = []

        hostname = url.extract_hostname(page_url) or ""
        if special_page is None:
            special_page = url.is_special_page(page_url)
        self._grade = GradeState(special_page, hostname, store)

        self._timer_label = f"session {self.session_id} ({hostname or 'unknown'})"
        self._log_context = logger.session_context()
        self._log_context.run(self._start, hostname, special_page)

    def _start(self, hostname: str, special_page: bool) -> None:
        logger.start_log_file(hostname or "session", str(self.session_id))
        log.start_timer(self._timer_label)
        log.info(
            "Page session started",
            {
                "sessionId": self.session_id,
                "pageUrl": self.page_url,
                "domain": self._grade.domain,
                "specialPage": special_page,
            },
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def grade_state(self) -> GradeState:
        self._require_open()
        return self._grade

    def _require_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"page session for {self.page_url} is closed")

    def handle_request(self, request_url: str, resource_type: str) -> RequestDecision:
        """Decide what happens to one outbound request.

        Document requests pass through untouched. Every other request
        is recorded, optionally upgraded to HTTPS, classified, and
        blocking verdicts are counted toward the grade.

        Raises:
            SessionClosedError: If the session was closed.
        """
        self._require_open()
        return self._log_context.run(self._handle_request, request_url, resource_type)

    def _handle_request(self, request_url: str, resource_type: str) -> RequestDecision:
        if resource_type == "document":
            return RequestDecision(action="continue", url=request_url)

        self.requests.append((request_url, resource_type))

        target = request_url
        if self._settings.upgrade_https and self._https_advisor is not None:
            try:
                upgraded = self._https_advisor.upgrade(request_url)
            except Exception as err:
                log.warn("HTTPS upgrade lookup failed", {"url": request_url, "error": get_error_message(err)})
                upgraded = None
            if upgraded and upgraded != request_url:
                target = upgraded

        verdict = self._classifier.classify(target, self.page_url, resource_type)
        if verdict is None or not verdict.block:
            return RequestDecision(action="continue", url=target, verdict=verdict)

        self._grade.update(
            GradeEvent(tracker_blocked=BlockedTracker(parent_company=verdict.parent_company, url=verdict.url))
        )

        if self._settings.allow_trackers:
            return RequestDecision(action="continue", url=target, verdict=verdict)
        if verdict.redirect_url:
            log.debug("Tracker redirected to surrogate", to_camel_dict(verdict))
            return RequestDecision(action="redirect", url=verdict.redirect_url, verdict=verdict)

        log.debug("Tracker blocked", to_camel_dict(verdict))
        return RequestDecision(action="abort", url=target, verdict=verdict)

    def record_navigation(self, navigated_url: str) -> None:
        """Record the URL the page finally loaded from.

        Raises:
            SessionClosedError: If the session was closed.
        """
        self._require_open()
        try:
            scheme = parse.urlsplit(navigated_url).scheme.lower()
        except ValueError:
            scheme = ""
        if scheme == "https":
            self._grade.update(GradeEvent(has_https=True))

    def grade(self) -> GradeResult:
        """Return the current before/after grade.

        Raises:
            SessionClosedError: If the session was closed.
        """
        self._require_open()
        return self._grade.compute_grade()

    def close(self) -> GradeResult:
        """End the session and return its final grade.

        Raises:
            SessionClosedError: If the session was already closed.
        """
        result = self.grade()
        self._closed = True
        self._log_context.run(self._finish, result)
        return result

    def _finish(self, result: GradeResult) -> None:
        log.end_timer(self._timer_label, "Page session finished")
        log.info(
            "Final grade",
            {
                "sessionId": self.session_id,
                "domain": self._grade.domain,
                "requests": len(self.requests),
                "blocked": self._grade.total_blocked,
                "before": result.before,
                "after": result.after,
            },
        )
        logger.end_log_file()
