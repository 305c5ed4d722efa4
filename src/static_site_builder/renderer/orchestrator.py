"""Render orchestrator: renders paths, stores artifacts and crawls links."""

import asyncio
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from static_site_builder.crawl.links import LinkExtractor, relative_paths_from_html
from static_site_builder.crawl.paths import path_to_artifact_name
from static_site_builder.renderer.errors import (
    ArtifactWriteError,
    BuildError,
    BuildErrorRecord,
    LinkExtractionError,
    RenderError,
)
from static_site_builder.renderer.invoker import RendererInvoker
from static_site_builder.renderer.metrics import BuildMetrics
from static_site_builder.renderer.models import (
    BuildResult,
    GeneratedArtifact,
    RenderContext,
    RenderRequest,
    normalize_output,
)
from static_site_builder.renderer.state_machine import PathStateMachine
from static_site_builder.store.io import content_digest
from static_site_builder.store.store import ArtifactStore


logger = structlog.get_logger()

DEFAULT_MAX_CONCURRENCY = 8


@dataclass
class Frontier:
    """Crawl state of one render_paths call.

    Attributes:
        queue: Requests still to render.
        result: Result collecting artifacts, skips and errors.
        claimed: Artifact names claimed for writing.
        scheduled_names: Artifact names of every queued request.
        scheduled: Number of requests queued so far.
    """

    queue: "asyncio.Queue[RenderRequest]"
    result: BuildResult
    claimed: set[str] = field(default_factory=set)
    scheduled_names: set[str] = field(default_factory=set)
    scheduled: int = 0


class RenderOrchestrator:
    """Renders a set of paths into an artifact store.

    Paths form a frontier queue consumed by a fixed pool of asyncio
    workers. Each path goes through:
        PENDING -> RENDERING -> WRITTEN|SKIPPED|FAILED
    and, with crawling enabled, WRITTEN -> EXPANDING -> EXPANDED, which
    queues the same-site paths linked from the written HTML.

    Artifact names are claimed before writing. The claim checks the store
    and the names claimed so far in this call and records the new name
    without yielding to the event loop, so each name is written at most
    once even when several workers render pages that map to it.

    Claims, scheduled names and the page count belong to a single
    render_paths call. Only the store carries over between calls.

    A failing path is recorded as an error on the result and does not
    stop other paths.
    """

    def __init__(  # noqa: PLR0913
        self,
        invoker: RendererInvoker,
        store: ArtifactStore,
        *,
        crawl: bool = False,
        assets: Mapping[str, str] | None = None,
        build_stats: Any = None,
        locals: Mapping[str, Any] | None = None,  # noqa: A002
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        max_pages: int | None = None,
        run_id: str = "",
        metrics: BuildMetrics | None = None,
        extractor: LinkExtractor | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            invoker: Renderer to call for every path.
            store: Artifact store receiving rendered pages.
            crawl: Whether to follow links found in rendered HTML.
            assets: Chunk name to output filename mapping for the build.
            build_stats: Opaque host build statistics.
            locals: User values passed to every render call.
            max_concurrency: Number of concurrent render workers.
            max_pages: Optional cap on the number of paths scheduled.
            run_id: Build identifier for logging.
            metrics: Optional metrics instance.
            extractor: Optional link extractor for crawling.

        Raises:
            ValueError: If max_concurrency or max_pages is below 1.
        """
        if max_concurrency < 1:
            msg = f"max_concurrency must be at least 1, got {max_concurrency}"
            raise ValueError(msg)
        if max_pages is not None and max_pages < 1:
            msg = f"max_pages must be at least 1, got {max_pages}"
            raise ValueError(msg)

        self._invoker = invoker
        self._store = store
        self._crawl = crawl
        self._assets = dict(assets or {})
        self._build_stats = build_stats
        self._locals = dict(locals or {})
        self._max_concurrency = max_concurrency
        self._max_pages = max_pages
        self._run_id = run_id
        self._metrics = metrics or BuildMetrics.get_instance()
        self._extractor = extractor or LinkExtractor()

        self._log = logger.bind(run_id=run_id, component="orchestrator")

    @property
    def crawl(self) -> bool:
        """Whether links in rendered pages are followed."""
        return self._crawl

    def build_context(self, path: str) -> RenderContext:
        """Build the render context for one path.

        Args:
            path: Path being rendered.

        Returns:
            A fresh RenderContext sharing the build's assets and locals.
        """
        return RenderContext(
            path=path,
            assets=self._assets,
            build_stats=self._build_stats,
            locals=self._locals,
        )

    async def render_paths(self, paths: Sequence[str]) -> BuildResult:
        """Render paths, and every path discovered from them when crawling.

        Returns once every path has reached a terminal state. Render and
        write failures are collected on the result, never raised.

        Args:
            paths: Initial output paths.

        Returns:
            BuildResult with written artifacts, skipped names and errors.
        """
        if isinstance(paths, str):
            paths = [paths]

        start_time = time.perf_counter()
        result = BuildResult(run_id=self._run_id)
        frontier = Frontier(queue=asyncio.Queue(), result=result)

        self._log.info(
            "render_paths_started",
            path_count=len(paths),
            crawl=self._crawl,
            max_concurrency=self._max_concurrency,
        )

        for path in paths:
            self._schedule(frontier, RenderRequest(path=path), discovered=False)

        workers = [
            asyncio.create_task(self._worker(frontier))
            for _ in range(self._max_concurrency)
        ]
        try:
            await frontier.queue.join()
        finally:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        result.duration_ms = (time.perf_counter() - start_time) * 1000

        self._log.info(
            "render_paths_complete",
            pages_rendered=result.pages_rendered,
            artifacts_written=len(result.artifacts),
            artifacts_skipped=len(result.skipped),
            error_count=len(result.errors),
            duration_ms=round(result.duration_ms, 2),
        )

        return result

    async def _worker(self, frontier: Frontier) -> None:
        """Consume requests from the frontier until cancelled."""
        while True:
            request = await frontier.queue.get()
            try:
                children = await self._process(request, frontier)
                # Children are queued before task_done so join() cannot
                # return while discovered work is still pending
                dropped = sum(
                    not self._schedule(frontier, child, discovered=True)
                    for child in children
                )
                if children:
                    self._metrics.record_links(len(children), dropped)
            except Exception as e:
                self._record_error(frontier.result, RenderError(request.path, e))
            finally:
                frontier.queue.task_done()

    def _schedule(
        self,
        frontier: Frontier,
        request: RenderRequest,
        *,
        discovered: bool,
    ) -> bool:
        """Queue a request unless a discovered path is already covered.

        Configured paths are always queued. Discovered paths are dropped
        when their artifact name is already scheduled or stored, or when
        the page limit is reached.

        Returns:
            True if the request was queued.
        """
        name = path_to_artifact_name(request.path)

        if discovered:
            if name in frontier.scheduled_names or self._store.has(name):
                return False
            if self._max_pages is not None and frontier.scheduled >= self._max_pages:
                self._log.warning(
                    "crawl_limit_reached",
                    path=request.path,
                    parent=request.parent,
                    max_pages=self._max_pages,
                )
                return False

        frontier.scheduled_names.add(name)
        frontier.scheduled += 1
        frontier.queue.put_nowait(request)
        return True

    def _claim(self, frontier: Frontier, name: str) -> bool:
        """Claim an artifact name for writing.

        Returns:
            True if the caller may write the artifact.
        """
        if name in frontier.claimed or self._store.has(name):
            return False
        frontier.claimed.add(name)
        return True

    async def _process(
        self, request: RenderRequest, frontier: Frontier
    ) -> list[RenderRequest]:
        """Render one path, store its output and collect crawl links.

        A page whose links cannot be extracted stays written; the failure
        is recorded as a CRAWL error and no paths are discovered from it.

        Returns:
            Requests for the paths discovered in the written HTML.
        """
        result = frontier.result
        state = PathStateMachine(request.path, self._run_id, crawl=self._crawl)
        log = self._log.bind(path=request.path, depth=request.depth)

        state.to_rendering()
        try:
            raw_output = await self._invoker.invoke(self.build_context(request.path))
        except Exception as e:
            state.to_failed()
            self._record_error(result, RenderError(request.path, e))
            return []

        result.pages_rendered += 1
        self._metrics.record_page_rendered()

        output = normalize_output(request.path, raw_output)
        artifact_name = path_to_artifact_name(request.path)

        if len(output) > 1:
            log.warning(
                "multi_output_collapsed",
                artifact_name=artifact_name,
                output_keys=list(output),
            )

        written: list[tuple[str, str]] = []
        write_failed = False

        for key, raw_html in output.items():
            if not self._claim(frontier, artifact_name):
                log.info(
                    "artifact_exists",
                    artifact_name=artifact_name,
                    output_key=key,
                )
                result.skipped.append(artifact_name)
                self._metrics.record_artifact_skipped()
                continue

            try:
                self._store.set(artifact_name, raw_html)
            except Exception as e:
                write_failed = True
                self._record_error(
                    result, ArtifactWriteError(request.path, artifact_name, e)
                )
                continue

            bytes_written, sha256 = content_digest(raw_html)
            result.artifacts.append(
                GeneratedArtifact(
                    name=artifact_name,
                    source_path=request.path,
                    output_key=key,
                    bytes_written=bytes_written,
                    sha256=sha256,
                )
            )
            self._metrics.record_artifact_written(bytes_written)
            log.info(
                "artifact_written",
                artifact_name=artifact_name,
                output_key=key,
                bytes=bytes_written,
            )
            written.append((key, raw_html))

        if not written:
            if write_failed:
                state.to_failed()
            else:
                state.to_skipped()
            return []

        state.to_written()
        if not self._crawl:
            return []

        state.to_expanding()
        try:
            children = [
                request.child(path)
                for key, raw_html in written
                for path in relative_paths_from_html(raw_html, key, self._extractor)
            ]
        except Exception as e:
            self._record_error(result, LinkExtractionError(request.path, e))
            children = []
        state.to_expanded()

        log.debug("links_discovered", link_count=len(children))
        return children

    def _record_error(self, result: BuildResult, error: BuildError) -> None:
        """Add an error to the result, log it and count it."""
        result.errors.append(BuildErrorRecord.from_exception(error))
        self._metrics.record_failure(error.error_class.value)
        self._log.error(
            "render_failed",
            path=error.path,
            error_class=error.error_class.value,
            error=error.message,
        )
