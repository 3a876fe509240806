from __future__ import annotations

from abc import ABC, abstractmethod

from .exceptions import FiltergraphError

__all__ = ["FilterGraphObject"]


class FilterGraphObject(ABC):
    """base class of Filter, Chain, and Graph"""

    @abstractmethod
    def compose(self) -> str:
        """compose the FFmpeg filtergraph expression"""

    def __str__(self) -> str:
        return self.compose()

    def __repr__(self):
        type_ = type(self)
        try:
            expr = self.compose()
        except FiltergraphError as e:
            expr = f"<not composable: {e}>"
        return f"""<{type_.__module__}.{type_.__qualname__} object at {hex(id(self))}>
    FFmpeg expression: \"{expr}\"
"""
