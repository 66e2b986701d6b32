"""Pipeline orchestrator — owns the browser, render sessions and output archive."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid

from playwright.async_api import async_playwright

from page_comparer.archive.zip_sink import ZipArchiveSink
from page_comparer.capture.sessions import launch_browser, open_sessions
from page_comparer.executor.route_orchestrator import RouteOrchestrator
from page_comparer.models.config import ComparerConfig
from page_comparer.models.route import RouteDefinition
from page_comparer.models.run_result import RunResult
from page_comparer.reporter.json_report import generate_json_report

logger = logging.getLogger(__name__)


class Orchestrator:
    """Coordinates a full before/after comparison run."""

    def __init__(self, config: ComparerConfig, routes: list[RouteDefinition] | None = None):
        self.config = config
        self.routes = routes if routes is not None else config.route_definitions()
        self.run_id = f"run_{uuid.uuid4().hex[:8]}"

    def run_full_pipeline(self) -> RunResult:
        """Compare every route and write the archive and run report."""
        return asyncio.run(self._run_pipeline())

    async def _run_pipeline(self) -> RunResult:
        start = time.time()
        run_result = RunResult(
            run_id=self.run_id,
            started_at=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            before_url=self.config.before_url,
            after_url=self.config.after_url,
            archive_path=str(self.config.archive_path),
        )
        logger.info("=== Comparing %s against %s (%d routes, %d devices) ===",
                    self.config.before_url, self.config.after_url,
                    len(self.routes), len(self.config.devices))

        try:
            async with async_playwright() as p:
                logger.debug("Launching Chromium (headless=%s)...", self.config.headless)
                browser = await launch_browser(p, headless=self.config.headless)
                try:
                    sessions = await open_sessions(browser, self.config)
                    try:
                        with ZipArchiveSink(self.config.archive_path) as sink:
                            route_orchestrator = RouteOrchestrator(self.config, sessions, sink)
                            try:
                                await route_orchestrator.run_routes(self.routes)
                            finally:
                                run_result.route_results = list(route_orchestrator.results)
                    finally:
                        await sessions.close()
                finally:
                    await browser.close()
            run_result.status = "complete"
        finally:
            if run_result.status == "running":
                run_result.status = "aborted"
            run_result.completed_at = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
            run_result.duration_seconds = round(time.time() - start, 2)
            self._report(run_result)

        logger.info("=== Run complete: %d routes in %.1fs, archive at %s ===",
                    run_result.completed_routes, run_result.duration_seconds,
                    run_result.archive_path)
        return run_result

    def _report(self, run_result: RunResult) -> None:
        try:
            generate_json_report(run_result, self.config.report_path)
            logger.info("Run report: %s", self.config.report_path)
        except OSError as e:
            logger.warning("Could not write run report: %s", e)
