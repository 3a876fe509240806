from __future__ import annotations

from collections.abc import Mapping

from ..utils import filter as filter_utils

from .abc import FilterGraphObject
from .typing import Arity, ArityLike, as_arity
from .exceptions import *

__all__ = ["Filter"]


class Filter(FilterGraphObject, tuple):
    """FFmpeg filter definition immutable class

    :param name: FFmpeg filter name, e.g., ``"scale"``
    :type name: str
    :param options: filter options in key=value pairs, composed in their
                    insertion order, defaults to None
    :type options: dict, optional
    :param input_arity: number of input pads, ``"N"`` or ``Arity.UNBOUNDED``
                        for a variable number of inputs, defaults to 1
    :type input_arity: int, str, or Arity, optional
    :param output_arity: number of output pads, ``"N"`` or ``Arity.UNBOUNDED``
                         for a variable number of outputs, defaults to 1
    :type output_arity: int, str, or Arity, optional

    The filter name and options are not checked against FFmpeg.
    """

    def __new__(
        cls,
        name: str,
        options: Mapping | None = None,
        input_arity: ArityLike = 1,
        output_arity: ArityLike = 1,
    ):
        if isinstance(name, Filter):
            return name

        if not isinstance(name, str):
            raise FiltergraphInvalidObject("filter name str", name)
        name = name.strip()
        if not name:
            raise FiltergraphConstructionError("filter name must be a non-empty str.")

        if options is None:
            options = {}
        elif not isinstance(options, Mapping):
            raise FiltergraphInvalidObject("filter option mapping", options)

        # validate named option keys to be str
        for k in options:
            if not isinstance(k, str):
                raise FiltergraphConstructionError(
                    "All keys of the named option dict must be of type str."
                )

        return tuple.__new__(
            cls, (name, dict(options), as_arity(input_arity), as_arity(output_arity))
        )

    def __getnewargs__(self):
        return tuple(self)

    def __getitem__(self, key):
        value = tuple.__getitem__(self, key)
        return {**value} if isinstance(value, dict) else value

    @property
    def name(self) -> str:
        return tuple.__getitem__(self, 0)

    @property
    def options(self) -> dict:
        """copy of the filter options"""
        return {**tuple.__getitem__(self, 1)}

    @property
    def input_arity(self) -> Arity:
        return tuple.__getitem__(self, 2)

    @property
    def output_arity(self) -> Arity:
        return tuple.__getitem__(self, 3)

    def compose(self) -> str:
        """compose filter expression ``name=opt1=val1:opt2=val2``"""
        return filter_utils.compose_filter(self.name, tuple.__getitem__(self, 1))

    def __add__(self, other):
        from .Chain import Chain

        if isinstance(other, Filter):
            return Chain([self, other])
        return NotImplemented
