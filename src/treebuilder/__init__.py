"""TreeBuilder - flowchart editing core with hierarchical auto-layout."""

from typing import TYPE_CHECKING

__all__ = ["Settings", "FlowchartEditor", "Flowchart"]

if TYPE_CHECKING:
    from .config.settings import Settings
    from .editor.session import FlowchartEditor
    from .flowchart.model import Flowchart


def __getattr__(name: str):
    if name == "Settings":
        from .config.settings import Settings

        return Settings
    if name == "FlowchartEditor":
        from .editor.session import FlowchartEditor

        return FlowchartEditor
    if name == "Flowchart":
        from .flowchart.model import Flowchart

        return Flowchart
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
