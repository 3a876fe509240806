"""FFmpeg command compiler

:py:class:`Command` collects the inputs, filtergraphs, and outputs of one FFmpeg
invocation together with the output stream mappings, and compiles them into an
ordered argument list::

    cmd = Command()
    clip = Input("clip.mov")
    cmd.add_input(clip)

    fg = Graph()
    chain = fg.append(Filter("edgedetect"))
    chain.add_input(clip.stream())
    cmd.add_filter_graph(fg)

    cmd.add_output(Output("edges.mp4"), [chain])
    cmd.to_command()["args"]
    # ['-i', 'clip.mov', '-filter_complex', '[0]edgedetect[chain0_edgedetect_0]',
    #  '-map', '[chain0_edgedetect_0]', 'edges.mp4']

Inputs are labeled in the order they are added. Stream specifiers and pad labels
are resolved only when the command is compiled.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Union
import logging

logger = logging.getLogger("ffmpegcmd")

from ._typing import CommandDict, FFmpegOptionDict, TrackSelector
from .errors import (
    ChainNotFoundError,
    FFmpegError,
    InputNotFoundError,
    UnknownMappingSourceError,
)
from .files import Input, Output
from .filtergraph import Chain, Filter, Graph
from .filtergraph.exceptions import (
    FiltergraphDuplicatePadError,
    FiltergraphInvalidObject,
)
from .rcparams import rcParams
from .stream_spec import FilterPadSpecifier, InputStreamSpecifier, StreamSpecifier
from .utils.parser import opts_to_args, quote_arg
from . import path

__all__ = ["Command"]

MappingSource = Union[StreamSpecifier, Input, Chain]


class Command:
    """FFmpeg command builder

    :param options: global options, defaults to None
    :type options: dict, optional
    :param executable: FFmpeg executable, defaults to None to use the one found
                       by :py:func:`ffmpegcmd.path.find` (or ``"ffmpeg"`` if none
                       found)
    :type executable: str, optional
    """

    def __init__(
        self, options: FFmpegOptionDict | None = None, executable: str | None = None
    ):
        self._options: FFmpegOptionDict = {**options} if options else {}
        self.executable = executable
        self._inputs: list[Input] = []
        self._outputs: list[Output] = []
        self._graphs: list[Graph] = []
        self._attached: dict[int, Output] = {}  # id(graph) -> output
        self._mappings: list[tuple[Output, int, StreamSpecifier]] = []

    @property
    def options(self) -> FFmpegOptionDict:
        """global options"""
        return self._options

    @property
    def inputs(self) -> tuple[Input, ...]:
        return tuple(self._inputs)

    @property
    def outputs(self) -> tuple[Output, ...]:
        return tuple(self._outputs)

    @property
    def filter_graphs(self) -> tuple[Graph, ...]:
        return tuple(self._graphs)

    @property
    def mappings(self) -> tuple[tuple[Output, int, StreamSpecifier], ...]:
        """recorded ``(output, track index, source stream)`` entries in the
        order they were added"""
        return tuple(self._mappings)

    def add_input(self, input: Input) -> int:
        """add an input

        :param input: input file
        :return: label assigned to the input
        """
        if not isinstance(input, Input):
            raise TypeError(f"expected an Input object but got {type(input).__name__}")
        input._assign_label(len(self._inputs))
        self._inputs.append(input)
        return input.label

    def add_filter_graph(self, graph: Graph, on_output: Output | None = None) -> Graph:
        """add a filtergraph

        :param graph: filtergraph
        :param on_output: output to apply the filtergraph to with its ``filter``
                          option, defaults to None to add the graph to
                          ``-filter_complex``
        :return: the added filtergraph
        """
        if not isinstance(graph, Graph):
            raise FiltergraphInvalidObject("a Graph object", graph)
        if any(g is graph for g in self._graphs):
            raise ValueError("the filtergraph has already been added to the command")

        if on_output is not None:
            if not isinstance(on_output, Output):
                raise TypeError(
                    f"expected an Output object but got {type(on_output).__name__}"
                )

        self._check_bindings([graph], [*self._graphs, graph])

        if on_output is not None:
            on_output.add_options({"filter": graph})
            self._attached[id(graph)] = on_output

        self._graphs.append(graph)
        return graph

    def add_output(
        self,
        output: Output,
        mappings: Sequence[MappingSource | tuple] | MappingSource | None = None,
    ) -> Output:
        """add an output

        :param output: output file
        :param mappings: source streams to map to the output tracks in order,
                         defaults to None (FFmpeg's default stream selection).
                         Each entry is a stream specifier, an input, a
                         filterchain, or a ``(input or chain, index)`` pair.
        :return: the added output

        If any of the mappings fails, the output is not added and the command is
        left unchanged.
        """
        if not isinstance(output, Output):
            raise TypeError(f"expected an Output object but got {type(output).__name__}")
        if any(o is output for o in self._outputs):
            raise ValueError("the output has already been added to the command")

        if mappings is not None:
            self._map_all(output, mappings)

        self._outputs.append(output)
        return output

    def map(
        self,
        output: Output,
        source: MappingSource,
        index: TrackSelector | None = None,
    ) -> int:
        """map a source stream to the next track of an output already added

        :param output: output of the command
        :param source: stream specifier, input, or filterchain
        :param index: stream selector of the input or output pad index of the
                      chain, defaults to None
        :return: output track index
        """
        if not any(o is output for o in self._outputs):
            raise ValueError("the output is not a part of the command")
        self._map_all(output, [(source, index)])
        return len(output.maps) - 1

    def _map_all(self, output: Output, mappings):
        if isinstance(mappings, (StreamSpecifier, Input, Chain)):
            mappings = [mappings]

        resolved = []
        try:
            for entry in mappings:
                resolved.append(self._resolve_mapping(*self._split_entry(entry)))
        except Exception:
            for spec, created in reversed(resolved):
                self._release(spec, created)
            raise

        for spec, _ in resolved:
            track = output._map_track(spec)
            self._mappings.append((output, track, spec))
            logger.debug("mapped %s to output %s track %d", spec, output.url, track)

    @staticmethod
    def _split_entry(entry):
        if isinstance(entry, (StreamSpecifier, Input, Chain, Filter)):
            return entry, None
        if isinstance(entry, tuple) and 1 <= len(entry) <= 2:
            return entry if len(entry) == 2 else (entry[0], None)
        raise UnknownMappingSourceError(entry)

    def _resolve_mapping(
        self, from_object: MappingSource, from_index: TrackSelector | None
    ) -> tuple[StreamSpecifier, bool]:
        """validate a mapping source and mark its filter pad as mapped

        :return: stream specifier and True if the specifier is newly created
        """

        if isinstance(from_object, StreamSpecifier):
            if from_index is not None:
                raise ValueError(
                    "index cannot be specified with a stream specifier mapping source"
                )
            anchor = from_object.anchor
            if isinstance(from_object, InputStreamSpecifier):
                self._check_input(anchor)
            else:
                self._check_chain(anchor)
                anchor.mark_output_pad_mapped(from_object.pad)
            return from_object, False

        if isinstance(from_object, Input):
            self._check_input(from_object)
            return from_object.stream(from_index), True

        if isinstance(from_object, Chain):
            self._check_chain(from_object)
            pad = from_object.resolve_output_pad(from_index)
            from_object.mark_output_pad_mapped(pad)
            return from_object.output_pad(pad), True

        raise UnknownMappingSourceError(from_object)

    @staticmethod
    def _release(spec: StreamSpecifier, created: bool):
        if isinstance(spec, FilterPadSpecifier):
            spec.anchor._unmark_output_pad_mapped(spec.pad)
            if created:
                spec.anchor._remove_consumer(spec.pad)

    def _check_input(self, input: Input):
        if not any(i is input for i in self._inputs):
            raise InputNotFoundError(input.url)

    def _check_chain(self, chain: Chain):
        if not any(chain in g for g in self._graphs):
            raise ChainNotFoundError(chain)

    def _check_bindings(self, graphs: Sequence[Graph], known: Sequence[Graph]):
        """raise if a chain input references an input or a chain outside the
        command (``known`` lists the filtergraphs the chains may come from)"""
        for g in graphs:
            for chain in g:
                for spec in chain.inputs:
                    if isinstance(spec, InputStreamSpecifier):
                        self._check_input(spec.anchor)
                    elif not any(spec.anchor in k for k in known):
                        raise ChainNotFoundError(spec.anchor)

    def get_mapping_parameter_value(
        self, from_object: MappingSource, from_index: TrackSelector | None = None
    ) -> str:
        """resolve a mapping source to its ``-map`` option value

        :param from_object: input, filterchain, or stream specifier
        :param from_index: stream selector of the input or output pad index of
                           the chain, defaults to None
        :return: ``label[:index]`` for an input or the bracketed pad label for
                 a filterchain

        The resolved output pad of a filterchain is marked as mapped.
        """
        spec, _ = self._resolve_mapping(from_object, from_index)
        value = spec.compose()
        logger.debug("resolved mapping source %r to %s", from_object, value)
        return value

    def compose_filter_complex(self) -> str:
        """compose the ``-filter_complex`` value

        :return: non-empty filtergraphs not applied to a specific output joined
                 by ``;``, or an empty string if there is none
        """
        # inputs may have been bound after the graphs were added
        self._check_bindings(self._graphs, self._graphs)

        graphs = [g for g in self._graphs if id(g) not in self._attached and len(g)]
        names = set()
        for g in graphs:
            for name in g.pad_names():
                if name in names:
                    raise FiltergraphDuplicatePadError(name)
                names.add(name)
        return ";".join(g.compose() for g in graphs)

    def to_args(self) -> list[str]:
        """compile the FFmpeg arguments (executable excluded)"""

        per_output_maps = rcParams["command.per_output_maps"]

        args = opts_to_args(self._options)
        for i in self._inputs:
            args.extend(i.to_args())

        expr = self.compose_filter_complex()
        if expr:
            args.extend(["-filter_complex", expr])

        if not per_output_maps:
            for _, _, spec in self._mappings:
                args.extend(["-map", spec.compose()])

        for o in self._outputs:
            if per_output_maps:
                for spec in o.maps:
                    args.extend(["-map", spec.compose()])
            args.extend(o.to_args())

        return args

    def to_command(self) -> CommandDict:
        """compile the command

        :return: dict with ``executable`` and ``args`` (in order)
        """
        return {
            "executable": self.executable or path.FFMPEG_BIN or "ffmpeg",
            "args": self.to_args(),
        }

    def to_text(self) -> str:
        """command line for display: arguments other than the option flags are
        double-quoted"""
        cmd = self.to_command()
        return " ".join([cmd["executable"], *(quote_arg(a) for a in cmd["args"])])

    def __str__(self):
        return self.to_text()

    def __repr__(self):
        return (
            f"<{type(self).__qualname__} ninputs={len(self._inputs)} "
            f"noutputs={len(self._outputs)} ngraphs={len(self._graphs)}>"
        )

    def execute(self, **run_kwargs):
        """run the command and wait for FFmpeg to finish

        :param \\**run_kwargs: keyword arguments of :py:func:`ffmpegprocess.run`.
                               ``capture_log`` defaults to True.
        :return: completed process
        :rtype: subprocess.CompletedProcess
        """
        from . import ffmpegprocess

        run_kwargs.setdefault("capture_log", True)
        ret = ffmpegprocess.run(self, **run_kwargs)
        if ret.returncode:
            raise FFmpegError(ret.stderr, run_kwargs["capture_log"] is None)
        return ret

    def spawn(self, **popen_kwargs):
        """start the command without waiting

        :param \\**popen_kwargs: keyword arguments of :py:class:`ffmpegprocess.Popen`
        :return: FFmpeg process
        :rtype: ffmpegprocess.Popen
        """
        from . import ffmpegprocess

        return ffmpegprocess.Popen(self, **popen_kwargs)
