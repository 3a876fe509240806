from __future__ import annotations

from collections.abc import Sequence
import logging

from ..errors import PadAlreadyMappedError
from ..stream_spec import StreamSpecifier, FilterPadSpecifier

from .abc import FilterGraphObject
from .Filter import Filter
from .typing import Arity
from .exceptions import *

logger = logging.getLogger("ffmpegcmd")

__all__ = ["Chain"]


class Chain(FilterGraphObject):
    """List of FFmpeg filters, connected in series

    :param filters: filters of the chain (at least one)
    :type filters: Filter or seq(Filter)

    The input and output pads of the chain are those of its first and last
    filters, respectively. Its inputs are bound with :py:meth:`add_input` and its
    outputs are referenced with :py:meth:`output_pad`. Output pads are labeled
    only if referenced, as ``chain{position}_{last filter name}_{pad index}``
    where ``position`` is the index of the chain in its :py:class:`Graph`.
    """

    def __init__(self, filters: Filter | Sequence[Filter]):
        if isinstance(filters, Filter):
            filters = [filters]
        elif isinstance(filters, (str, bytes)) or not isinstance(filters, Sequence):
            raise FiltergraphInvalidObject("a sequence of Filter objects", filters)

        if not len(filters):
            raise FiltergraphConstructionError(
                "Chain requires at least one Filter object."
            )
        self._filters = self._validate_filters(filters)
        self._inputs: list[StreamSpecifier] = []
        self._consumers: dict[int, int] = {}
        self._mapped: set[int] = set()
        self._bound: set[int] = set()  # pads feeding another chain
        self._position: int | None = None

    @staticmethod
    def _validate_filters(filters):
        filters = list(filters)
        for f in filters:
            if not isinstance(f, Filter):
                raise FiltergraphInvalidObject("a Filter object", f)
        return filters

    @staticmethod
    def wrap(obj: Filter | Chain) -> Chain:
        """wrap a Filter in a Chain; a Chain is returned as is"""
        if isinstance(obj, Filter):
            return Chain([obj])
        if isinstance(obj, Chain):
            return obj
        raise FiltergraphInvalidObject("a Filter or Chain object", obj)

    def __len__(self):
        return len(self._filters)

    def __iter__(self):
        return iter(self._filters)

    def __getitem__(self, key):
        return self._filters[key]

    @property
    def filters(self) -> tuple[Filter, ...]:
        return tuple(self._filters)

    @property
    def input_node(self) -> Filter:
        return self._filters[0]

    @property
    def output_node(self) -> Filter:
        return self._filters[-1]

    @property
    def input_arity(self) -> Arity:
        return self.input_node.input_arity

    @property
    def output_arity(self) -> Arity:
        return self.output_node.output_arity

    @property
    def inputs(self) -> tuple[StreamSpecifier, ...]:
        """stream specifiers bound to the input pads"""
        return tuple(self._inputs)

    @property
    def position(self) -> int | None:
        """index of the chain in its filtergraph or None if not yet appended"""
        return self._position

    def _set_position(self, position: int):
        if self._position is not None:
            raise FiltergraphConstructionError(
                f"Chain '{self.compose_filters()}' is already a part of a filtergraph "
                f"(position {self._position})."
            )
        self._position = position

    def append_nodes(self, *nodes: Filter):
        """append filters to the end of the chain"""
        nodes = self._validate_filters(nodes)
        if not nodes:
            return
        arity = nodes[-1].output_arity
        bad = [pad for pad in self._consumers if not arity.has_pad(pad)]
        if bad:
            raise FiltergraphArityError(
                f"Cannot append {nodes[-1].name}: it has {arity} output pads while "
                f"pad {max(bad)} of the chain is referenced."
            )
        self._filters.extend(nodes)

    def prepend_nodes(self, *nodes: Filter):
        """prepend filters to the beginning of the chain"""
        nodes = self._validate_filters(nodes)
        if not nodes:
            return
        arity = nodes[0].input_arity
        if not arity.accepts(len(self._inputs)):
            raise FiltergraphArityError(
                f"Cannot prepend {nodes[0].name}: it has {arity} input pads while "
                f"{len(self._inputs)} inputs are bound to the chain."
            )
        self._filters[:0] = nodes
        self._check_underconnected()

    def add_input(self, input: StreamSpecifier):
        """bind a stream to the next input pad

        :param input: stream to connect
        """
        self.add_inputs([input])

    def add_inputs(self, inputs: Sequence[StreamSpecifier]):
        """bind streams to the next input pads

        :param inputs: streams to connect, in pad order
        """
        inputs = self.validate_inputs(inputs)
        for i in inputs:
            if isinstance(i, FilterPadSpecifier):
                i.anchor._bound.add(i.pad)
        self._inputs.extend(inputs)
        self._check_underconnected()

    def validate_inputs(self, inputs: Sequence[StreamSpecifier]) -> list[StreamSpecifier]:
        """validate streams to be bound to the chain inputs

        :param inputs: streams to be validated
        :return: validated streams
        """
        if isinstance(inputs, StreamSpecifier) or not isinstance(inputs, Sequence):
            raise FiltergraphInvalidObject("a sequence of StreamSpecifier objects", inputs)
        for i in inputs:
            if not isinstance(i, StreamSpecifier):
                raise FiltergraphInvalidObject("a StreamSpecifier object", i)

        # a pad label can be consumed only once
        pads = [(id(i.anchor), i.pad) for i in inputs if isinstance(i, FilterPadSpecifier)]
        for i in inputs:
            if isinstance(i, FilterPadSpecifier) and (
                i.anchor.is_consumed(i.pad) or pads.count((id(i.anchor), i.pad)) > 1
            ):
                raise PadAlreadyMappedError(i.anchor, i.pad)

        arity = self.input_arity
        nprovided = len(self._inputs) + len(inputs)
        if not arity.accepts(nprovided):
            raise FiltergraphArityError(
                f"Too many inputs specified: {self.input_node.name} takes {arity} inputs "
                f"but {nprovided} were given"
            )
        return list(inputs)

    def _check_underconnected(self):
        arity = self.input_arity
        if not arity.unbounded and len(self._inputs) < arity.count:
            logger.warning(
                "Not enough inputs on filter chain '%s': need %d and currently have %d",
                self.compose_filters(),
                arity.count,
                len(self._inputs),
            )

    def resolve_output_pad(self, pad: int | str | None = None) -> int:
        """validate an output pad selector and return its index

        :param pad: pad index (int or numeric str), defaults to None to pick the
                    first pad that is neither referenced nor mapped
        :return: pad index
        """

        arity = self.output_arity
        if pad is None:
            pad = 0
            while pad in self._mapped or self._consumers.get(pad, 0):
                pad += 1
            if not arity.has_pad(pad):
                if arity.count:
                    raise PadAlreadyMappedError(self)
                raise FiltergraphInvalidIndex(
                    f"{self.output_node.name} has no output pad"
                )
            return pad

        if isinstance(pad, str) and pad.isdigit():
            pad = int(pad)
        if isinstance(pad, bool) or not isinstance(pad, int):
            raise FiltergraphInvalidIndex(
                f"output pad must be specified by its index, got {pad!r}"
            )
        if not arity.has_pad(pad):
            raise FiltergraphInvalidIndex(
                f"output pad {pad} is out of range: {self.output_node.name} has {arity} output pads"
            )
        return pad

    def output_pad(self, pad: int | str | None = None) -> FilterPadSpecifier:
        """get a stream specifier referencing an output pad of this chain

        :param pad: output pad index, defaults to None to select the first pad
                    that is neither referenced nor mapped
        :return: stream specifier
        """
        return StreamSpecifier.from_filter_output(self, pad)

    def _add_consumer(self, pad: int):
        self._consumers[pad] = self._consumers.get(pad, 0) + 1

    def _remove_consumer(self, pad: int):
        n = self._consumers.get(pad, 0) - 1
        if n > 0:
            self._consumers[pad] = n
        else:
            self._consumers.pop(pad, None)

    def consumers(self, pad: int) -> int:
        """number of stream specifiers referencing the output pad"""
        return self._consumers.get(pad, 0)

    def is_mapped(self, pad: int) -> bool:
        """True if the output pad has been mapped to an output"""
        return pad in self._mapped

    def is_bound(self, pad: int) -> bool:
        """True if the output pad feeds an input of another chain"""
        return pad in self._bound

    def is_consumed(self, pad: int) -> bool:
        """True if the output pad is mapped or feeds another chain"""
        return pad in self._mapped or pad in self._bound

    def mark_output_pad_mapped(self, pad: int):
        """mark an output pad as mapped to an output

        :param pad: pad index
        """
        if self.is_consumed(pad):
            raise PadAlreadyMappedError(self, pad)
        self._mapped.add(pad)

    def _unmark_output_pad_mapped(self, pad: int):
        self._mapped.discard(pad)

    def pad_name(self, pad: int) -> str:
        """generated (unbracketed) label of an output pad"""
        if self._position is None:
            raise FiltergraphConstructionError(
                f"Chain '{self.compose_filters()}' must be "
                "appended to a filtergraph to label its output pads."
            )
        return f"chain{self._position}_{self.output_node.name}_{pad}"

    def labeled_output_pads(self) -> range:
        """indices of the output pads to be labeled

        No pad is labeled if none is referenced. Otherwise, all the pads up to the
        last referenced pad are labeled as FFmpeg assigns labels to pads in order.
        """
        used = [pad for pad, n in self._consumers.items() if n > 0]
        return range(max(used) + 1 if used else 0)

    def compose_filters(self) -> str:
        """compose the filters only, without any pad label"""
        return ",".join(f.compose() for f in self._filters)

    def compose(self) -> str:
        """compose filterchain expression ``[in0][in1]f0=...,f1=...[out0][out1]``"""
        inputs = "".join(i.compose_as_filter_input() for i in self._inputs)
        filters = self.compose_filters()
        outputs = "".join(f"[{self.pad_name(i)}]" for i in self.labeled_output_pads())
        return f"{inputs}{filters}{outputs}"
