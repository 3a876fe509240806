from __future__ import annotations as _annotations

from ..errors import FFmpegcmdError


class FiltergraphError(FFmpegcmdError): ...


class FiltergraphConstructionError(FiltergraphError, ValueError): ...


class FiltergraphInvalidObject(FiltergraphError, TypeError):
    def __init__(self, expected, obj) -> None:
        super().__init__(f"expected {expected} but got {type(obj).__name__} ({obj!r})")


class FiltergraphArityError(FiltergraphError, ValueError):
    pass


class FiltergraphInvalidIndex(FiltergraphError, IndexError):
    pass


class FiltergraphDuplicatePadError(FiltergraphError):
    def __init__(self, label) -> None:
        super().__init__(
            f"pad label [{label}] is generated by more than one filtergraph of the command"
        )
