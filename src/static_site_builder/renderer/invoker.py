"""Renderer invocation adapter."""

import inspect
from collections.abc import Callable
from typing import Any

from static_site_builder.renderer.errors import InvalidRendererError
from static_site_builder.renderer.models import RenderContext


# A renderer takes the merged locals dict and returns HTML, an output map,
# or an awaitable of either
Renderer = Callable[[dict[str, Any]], Any]


class RendererInvoker:
    """Wraps a user-supplied renderer callable.

    Sync and async renderers are both supported. Whatever the renderer
    returns is handed back unchanged; shape normalization happens in the
    orchestrator. Exceptions propagate to the caller without retry.
    """

    def __init__(self, render_fn: object, name: str = "renderer") -> None:
        """Initialize the invoker.

        Args:
            render_fn: The renderer callable.
            name: Renderer reference used in error messages.

        Raises:
            InvalidRendererError: If render_fn is not callable.
        """
        if not callable(render_fn):
            raise InvalidRendererError(
                name, f"got {type(render_fn).__name__}, expected a callable"
            )
        self._render_fn: Renderer = render_fn
        self._name = name

    @property
    def name(self) -> str:
        """Get the renderer reference."""
        return self._name

    async def invoke(self, context: RenderContext) -> object:
        """Call the renderer for one path.

        Args:
            context: Render context for the path.

        Returns:
            The renderer's return value, awaited if it was awaitable.
        """
        output = self._render_fn(context.as_locals())
        if inspect.isawaitable(output):
            output = await output
        return output
