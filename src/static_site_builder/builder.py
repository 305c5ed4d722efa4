"""Static site build step."""

import asyncio
import time
import uuid
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import structlog

from static_site_builder.config.constants import (
    COMPONENT_BUILDER,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_PATHS,
)
from static_site_builder.config.schemas import BuildConfig
from static_site_builder.renderer.assets import ChunkFiles, build_asset_map
from static_site_builder.renderer.errors import (
    BuildError,
    BuildErrorClass,
    BuildErrorRecord,
)
from static_site_builder.renderer.invoker import RendererInvoker
from static_site_builder.renderer.loader import load_renderer
from static_site_builder.renderer.metrics import BuildMetrics
from static_site_builder.renderer.models import BuildResult
from static_site_builder.renderer.orchestrator import RenderOrchestrator
from static_site_builder.renderer.state_machine import BuildState, BuildStateMachine
from static_site_builder.store.store import (
    ArtifactStore,
    DirectoryArtifactStore,
    MemoryArtifactStore,
)


logger = structlog.get_logger()


class StaticSiteBuilder:
    """Runs one static site build step.

    Implements the build state machine:
        BUILD_PENDING -> LOADING_RENDERER -> RENDERING -> BUILD_DONE|BUILD_FAILED

    Loader failures end the build before any path is rendered. Render and
    write failures of individual paths are collected on the result while
    the other paths continue. Loader, render and write errors are reported
    on the returned BuildResult.
    """

    def __init__(  # noqa: PLR0913
        self,
        renderer: str | Callable[[dict[str, Any]], Any],
        store: ArtifactStore,
        *,
        paths: Sequence[str] = DEFAULT_PATHS,
        crawl: bool = False,
        locals: Mapping[str, Any] | None = None,  # noqa: A002
        assets_by_chunk_name: Mapping[str, ChunkFiles] | None = None,
        public_path: str | None = None,
        build_stats: Any = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        max_pages: int | None = None,
        base_dir: Path | None = None,
        run_id: str | None = None,
        metrics: BuildMetrics | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            renderer: Renderer callable, or a module/file reference to load.
            store: Artifact store receiving rendered pages.
            paths: Paths to render.
            crawl: Whether to follow links found in rendered pages.
            locals: Values passed to the renderer on every call.
            assets_by_chunk_name: Host chunk name to filename(s) mapping.
            public_path: Prefix for asset filenames.
            build_stats: Opaque host build statistics.
            max_concurrency: Number of concurrent render workers.
            max_pages: Optional cap on the number of paths rendered.
            base_dir: Directory relative renderer file references resolve against.
            run_id: Build identifier (generated if omitted).
            metrics: Optional metrics instance.
        """
        self._renderer = renderer
        self._store = store
        self._paths = [paths] if isinstance(paths, str) else list(paths)
        self._crawl = crawl
        self._locals = dict(locals or {})
        self._assets = build_asset_map(assets_by_chunk_name or {}, public_path)
        self._build_stats = build_stats
        self._max_concurrency = max_concurrency
        self._max_pages = max_pages
        self._base_dir = base_dir
        self._run_id = run_id or uuid.uuid4().hex[:12]
        self._metrics = metrics or BuildMetrics.get_instance()

        self._state_machine = BuildStateMachine(self._run_id)
        self._log = logger.bind(run_id=self._run_id, component=COMPONENT_BUILDER)

    @classmethod
    def from_config(
        cls,
        config: BuildConfig,
        run_id: str | None = None,
        build_stats: Any = None,
        store: ArtifactStore | None = None,
    ) -> "StaticSiteBuilder":
        """Create a builder from a validated configuration.

        Args:
            config: Build configuration.
            run_id: Build identifier (generated if omitted).
            build_stats: Opaque host build statistics.
            store: Artifact store (defaults to a directory store on output_dir).

        Returns:
            Configured StaticSiteBuilder.
        """
        run_id = run_id or uuid.uuid4().hex[:12]
        return cls(
            renderer=config.renderer,
            store=store or DirectoryArtifactStore(config.output_dir, run_id),
            paths=config.paths,
            crawl=config.crawl,
            locals=config.locals,
            assets_by_chunk_name=config.assets,
            public_path=config.public_path,
            build_stats=build_stats,
            max_concurrency=config.max_concurrency,
            max_pages=config.max_pages,
            run_id=run_id,
        )

    @property
    def run_id(self) -> str:
        """Get the build identifier."""
        return self._run_id

    @property
    def state(self) -> BuildState:
        """Get current build state."""
        return self._state_machine.state

    @property
    def assets(self) -> dict[str, str]:
        """Get the asset map passed to the renderer."""
        return dict(self._assets)

    def _create_invoker(self) -> RendererInvoker:
        """Load the renderer and wrap it in an invoker.

        Raises:
            BuildError: If the renderer cannot be loaded.
        """
        if not isinstance(self._renderer, str):
            name = getattr(self._renderer, "__name__", type(self._renderer).__name__)
            return RendererInvoker(self._renderer, name=name)

        try:
            render_fn = load_renderer(self._renderer, self._base_dir)
        except BuildError:
            raise
        except Exception as e:
            # Any exception raised while importing the renderer module
            raise BuildError(
                error_class=BuildErrorClass.LOADER,
                message=f"Error parsing HTML renderer: {type(e).__name__}: {e}",
                details={"renderer": self._renderer},
            ) from e

        return RendererInvoker(render_fn, name=self._renderer)

    async def build_async(self) -> BuildResult:
        """Run the build step.

        Returns:
            BuildResult with written artifacts and every collected error.
        """
        start_time = time.perf_counter()
        self._log.info(
            "build_started",
            path_count=len(self._paths),
            crawl=self._crawl,
            asset_count=len(self._assets),
        )

        self._state_machine.transition(BuildState.LOADING_RENDERER)
        try:
            invoker = self._create_invoker()
        except BuildError as e:
            self._state_machine.transition(BuildState.BUILD_FAILED)
            self._metrics.record_failure(e.error_class.value)
            self._log.error(
                "renderer_load_failed",
                error_class=e.error_class.value,
                error=e.message,
            )
            return BuildResult(
                run_id=self._run_id,
                errors=[BuildErrorRecord.from_exception(e)],
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

        self._state_machine.transition(BuildState.RENDERING)
        try:
            orchestrator = RenderOrchestrator(
                invoker,
                self._store,
                crawl=self._crawl,
                assets=self._assets,
                build_stats=self._build_stats,
                locals=self._locals,
                max_concurrency=self._max_concurrency,
                max_pages=self._max_pages,
                run_id=self._run_id,
                metrics=self._metrics,
            )
            result = await orchestrator.render_paths(self._paths)
        except Exception:
            self._state_machine.transition(BuildState.BUILD_FAILED)
            self._log.exception("build_failed")
            raise

        self._state_machine.transition(BuildState.BUILD_DONE)
        result.duration_ms = (time.perf_counter() - start_time) * 1000
        self._metrics.record_build_duration(result.duration_ms)

        self._log.info(
            "build_complete",
            success=result.success,
            artifact_count=len(result.artifacts),
            total_bytes=result.total_bytes,
            error_count=len(result.errors),
            duration_ms=round(result.duration_ms, 2),
        )
        for error in result.errors:
            self._log.warning(
                "build_error_reported",
                error_class=error.error_class.value,
                path=error.path,
                error=error.message,
            )

        return result

    def build(self) -> BuildResult:
        """Run the build step on a new event loop.

        Returns:
            BuildResult with written artifacts and every collected error.
        """
        return asyncio.run(self.build_async())


def build_site(  # noqa: PLR0913
    renderer: str | Callable[[dict[str, Any]], Any],
    paths: Sequence[str] = DEFAULT_PATHS,
    *,
    store: ArtifactStore | None = None,
    output_dir: Path | None = None,
    crawl: bool = False,
    locals: Mapping[str, Any] | None = None,  # noqa: A002
    assets_by_chunk_name: Mapping[str, ChunkFiles] | None = None,
    public_path: str | None = None,
    build_stats: Any = None,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    max_pages: int | None = None,
    run_id: str | None = None,
) -> BuildResult:
    """Pure function API for a static site build.

    Args:
        renderer: Renderer callable, or a module/file reference to load.
        paths: Paths to render.
        store: Artifact store; takes precedence over output_dir.
        output_dir: Directory to write pages to when no store is given.
            With neither, pages are kept in a MemoryArtifactStore.
        crawl: Whether to follow links found in rendered pages.
        locals: Values passed to the renderer on every call.
        assets_by_chunk_name: Host chunk name to filename(s) mapping.
        public_path: Prefix for asset filenames.
        build_stats: Opaque host build statistics.
        max_concurrency: Number of concurrent render workers.
        max_pages: Optional cap on the number of paths rendered.
        run_id: Build identifier (generated if omitted).

    Returns:
        BuildResult indicating written artifacts and errors.
    """
    if store is None:
        store = (
            DirectoryArtifactStore(output_dir, run_id)
            if output_dir is not None
            else MemoryArtifactStore()
        )

    builder = StaticSiteBuilder(
        renderer,
        store,
        paths=paths,
        crawl=crawl,
        locals=locals,
        assets_by_chunk_name=assets_by_chunk_name,
        public_path=public_path,
        build_stats=build_stats,
        max_concurrency=max_concurrency,
        max_pages=max_pages,
        run_id=run_id,
    )
    return builder.build()
