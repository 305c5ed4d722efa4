"""Page rendering: renderer loading, invocation and crawl orchestration."""

from static_site_builder.renderer.assets import build_asset_map, find_asset
from static_site_builder.renderer.errors import (
    ArtifactWriteError,
    BuildError,
    BuildErrorClass,
    BuildErrorRecord,
    InvalidRendererError,
    LinkExtractionError,
    MissingSourceError,
    RenderError,
)
from static_site_builder.renderer.invoker import RendererInvoker
from static_site_builder.renderer.loader import load_renderer
from static_site_builder.renderer.metrics import BuildMetrics
from static_site_builder.renderer.models import (
    BuildResult,
    GeneratedArtifact,
    RenderContext,
    RenderRequest,
    normalize_output,
)
from static_site_builder.renderer.orchestrator import RenderOrchestrator
from static_site_builder.renderer.state_machine import (
    BuildState,
    BuildStateMachine,
    PathState,
    PathStateMachine,
)


__all__ = [
    "ArtifactWriteError",
    "BuildError",
    "BuildErrorClass",
    "BuildErrorRecord",
    "BuildMetrics",
    "BuildResult",
    "BuildState",
    "BuildStateMachine",
    "GeneratedArtifact",
    "InvalidRendererError",
    "LinkExtractionError",
    "MissingSourceError",
    "PathState",
    "PathStateMachine",
    "RenderContext",
    "RenderError",
    "RenderOrchestrator",
    "RenderRequest",
    "RendererInvoker",
    "build_asset_map",
    "find_asset",
    "load_renderer",
    "normalize_output",
]
