"""Marker resolution: the fixed-point Renderer and its value helpers.

``Renderer`` is loaded lazily; the parser, rewriter and evaluator import
`easyviewer.template.helpers`, and the Renderer imports all three.

"""

from easyviewer.template.helpers import UNDEFINED, to_display, to_text

__all__ = [
    "UNDEFINED",
    "Renderer",
    "to_display",
    "to_text",
]


def __getattr__(name: str) -> object:
    """Module-level getattr for the lazily imported Renderer."""
    if name == "Renderer":
        from easyviewer.template.core import Renderer

        globals()["Renderer"] = Renderer
        return Renderer
    raise AttributeError(f"module 'easyviewer.template' has no attribute {name!r}")
