"""Route orchestrator — captures, diffs and packages routes one at a time."""

from __future__ import annotations

import asyncio
import logging
import time

from page_comparer.archive.zip_sink import ArchiveEntry, ZipArchiveSink
from page_comparer.capture.collector import CaptureCollector
from page_comparer.capture.sessions import DeviceSessions, RenderSessions
from page_comparer.diff.analysis import analyze_pair
from page_comparer.errors import RouteAborted, WriteFailure
from page_comparer.models.capture import (
    CaptureResult,
    PairAnalysis,
    ScreenshotMetadata,
    ViewportSizeInfo,
)
from page_comparer.models.config import ComparerConfig
from page_comparer.models.route import RouteDefinition
from page_comparer.models.run_result import (
    TERMINAL_STATES,
    DeviceComparison,
    RouteResult,
    RouteState,
)
from page_comparer.url_utils import build_route_url

logger = logging.getLogger(__name__)


class RouteOrchestrator:
    """Runs every route through capture → diff → package with bounded retries.

    Routes are processed strictly in order. Within a route, all captures run
    concurrently and must all settle before diffing starts; device pairs are
    then diffed concurrently in worker threads. Entries are staged in memory
    and committed to the archive in one batch, so a failed attempt never
    leaves partial output behind.
    """

    def __init__(
        self,
        config: ComparerConfig,
        sessions: RenderSessions,
        sink: ZipArchiveSink,
    ):
        self.config = config
        self.sessions = sessions
        self.sink = sink
        self.max_retries = config.max_retries
        self.results: list[RouteResult] = []

    async def run_routes(self, routes: list[RouteDefinition]) -> list[RouteResult]:
        """Process routes sequentially; the first aborted route stops the run.

        Raises:
            RouteAborted: a route failed on every attempt. Routes after it
                are left unprocessed.
            WriteFailure: the archive rejected a write.
        """
        self.results = []
        for index, route in enumerate(routes):
            logger.info("Comparing route [%d/%d]: %s (%s)",
                        index + 1, len(routes), route.name, route.path)
            result = await self.run_route(route)
            self.results.append(result)
            if result.state == RouteState.ABORTED:
                skipped = len(routes) - index - 1
                if skipped:
                    logger.error("Aborting run, %d route(s) not processed", skipped)
                raise RouteAborted(route.name, result.attempts, result.error)
        return list(self.results)

    async def run_route(self, route: RouteDefinition) -> RouteResult:
        """Drive one route through its states until it is done or aborted."""
        result = RouteResult(name=route.name, path=route.path)
        start = time.time()
        captures: dict[str, tuple[CaptureResult, CaptureResult]] = {}
        analyses: dict[str, PairAnalysis] = {}

        while result.state not in TERMINAL_STATES:
            try:
                match result.state:
                    case RouteState.PENDING | RouteState.RETRYING:
                        if result.state == RouteState.RETRYING and self.config.retry_delay_seconds:
                            await asyncio.sleep(self.config.retry_delay_seconds)
                        result.attempts += 1
                        captures, analyses = {}, {}
                        self._transition(result, RouteState.CAPTURING)

                    case RouteState.CAPTURING:
                        captures = await self._capture_all(route)
                        self._transition(result, RouteState.DIFFING)

                    case RouteState.DIFFING:
                        analyses = await self._diff_all(captures)
                        self._transition(result, RouteState.PACKAGING)

                    case RouteState.PACKAGING:
                        entries = self._build_entries(route, captures, analyses)
                        self.sink.commit(entries)
                        result.devices = [
                            DeviceComparison(
                                device=name,
                                difference_percentage=round(analysis.diff.difference_percentage, 2),
                                different_pixels=analysis.diff.different_pixels,
                                total_pixels=analysis.diff.total_pixels,
                            )
                            for name, analysis in analyses.items()
                        ]
                        result.error = None
                        self._transition(result, RouteState.DONE)

            except WriteFailure:
                raise
            except Exception as e:
                result.error = str(e)
                if result.attempts >= self.max_retries:
                    logger.error("Route %s failed on attempt %d/%d: %s",
                                 route.name, result.attempts, self.max_retries, e)
                    self._transition(result, RouteState.ABORTED)
                else:
                    logger.warning("Route %s failed on attempt %d/%d, retrying: %s",
                                   route.name, result.attempts, self.max_retries, e)
                    self._transition(result, RouteState.RETRYING)

        result.duration_seconds = round(time.time() - start, 2)
        if result.state == RouteState.DONE:
            logger.info("Route %s done in %.1fs (%s)", route.name, result.duration_seconds,
                        ", ".join(f"{d.device}: {d.difference_percentage:.2f}%"
                                  for d in result.devices))
        return result

    @staticmethod
    def _transition(result: RouteResult, state: RouteState) -> None:
        logger.debug("Route %s: %s -> %s (attempt %d)",
                     result.name, result.state.value, state.value, result.attempts)
        result.state = state

    async def _capture_all(
        self, route: RouteDefinition,
    ) -> dict[str, tuple[CaptureResult, CaptureResult]]:
        """Capture before and after for every device concurrently.

        Every capture is allowed to settle before a failure is raised, so a
        retry never navigates a page that is still busy with this attempt.
        """
        jobs = []
        for session in self.sessions.devices:
            collector = CaptureCollector(device=session.profile.name)
            jobs.append(collector.capture(session.before_page, self.config.before_url, route))
            jobs.append(collector.capture(session.after_page, self.config.after_url, route))

        outcomes = await asyncio.gather(*jobs, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

        captures = {}
        for i, session in enumerate(self.sessions.devices):
            captures[session.profile.name] = (outcomes[2 * i], outcomes[2 * i + 1])
        return captures

    async def _diff_all(
        self, captures: dict[str, tuple[CaptureResult, CaptureResult]],
    ) -> dict[str, PairAnalysis]:
        names = list(captures)
        analyses = await asyncio.gather(*(
            asyncio.to_thread(
                analyze_pair,
                *captures[name],
                tolerance=self.config.tolerance,
                margin=self.config.margin,
                whiteness_threshold=self.config.whiteness_threshold,
            )
            for name in names
        ))
        return dict(zip(names, analyses))

    def _build_entries(
        self,
        route: RouteDefinition,
        captures: dict[str, tuple[CaptureResult, CaptureResult]],
        analyses: dict[str, PairAnalysis],
    ) -> list[ArchiveEntry]:
        entries: list[ArchiveEntry] = []
        for session in self.sessions.devices:
            name = session.profile.name
            before, after = captures[name]
            metadata = self._build_metadata(route, session, analyses[name])
            entries.extend(self._device_entries(
                route.name, session.profile.entry_prefix, before, after,
                analyses[name], metadata,
            ))
        return entries

    def _build_metadata(
        self, route: RouteDefinition, session: DeviceSessions, analysis: PairAnalysis,
    ) -> ScreenshotMetadata:
        profile = session.profile
        return ScreenshotMetadata(
            page_name=route.name,
            before_url=build_route_url(self.config.before_url, route.path),
            after_url=build_route_url(self.config.after_url, route.path),
            timestamp=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            device_type=profile.label,
            viewport=ViewportSizeInfo(width=profile.width, height=profile.height),
            user_agent=profile.user_agent,
            difference_percentage=round(analysis.diff.difference_percentage),
            total_pixels=analysis.diff.total_pixels,
            different_pixels=analysis.diff.different_pixels,
        )

    @staticmethod
    def _device_entries(
        folder: str,
        prefix: str,
        before: CaptureResult,
        after: CaptureResult,
        analysis: PairAnalysis,
        metadata: ScreenshotMetadata,
    ) -> list[ArchiveEntry]:
        files: list[tuple[str, bytes | str]] = [
            ("before.png", before.screenshot),
            ("after.png", after.screenshot),
            ("compare.png", analysis.compare_image),
            ("diff.png", analysis.diff_image),
            ("diff-shifted.png", analysis.shifted_diff_image),
            ("before-aria.txt", before.aria_snapshot),
            ("after-aria.txt", after.aria_snapshot),
            ("before-dom.html", before.dom_snapshot),
            ("after-dom.html", after.dom_snapshot),
            ("metadata.json", metadata.model_dump_json(indent=2, by_alias=True)),
        ]
        return [
            ArchiveEntry(folder=folder, file_name=f"{prefix}{file_name}", content=content)
            for file_name, content in files
        ]
