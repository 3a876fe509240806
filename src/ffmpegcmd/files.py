"""FFmpeg command input and output files"""

from __future__ import annotations

from os import fspath

from ._typing import FFmpegOptionDict, FFmpegUrlType, TrackSelector
from .errors import InputLabelError
from .stream_spec import StreamSpecifier, InputStreamSpecifier
from .utils.parser import opts_to_args, null_url

__all__ = ["Input", "Output"]


def _validate_url(url):
    if url is None:
        return None
    try:
        return fspath(url)
    except TypeError:
        raise TypeError(
            f"url must be a str or path-like object, got {type(url).__name__}"
        ) from None


def _validate_options(options):
    if options is None:
        return {}
    if not hasattr(options, "items"):
        raise TypeError(f"options must be a dict, got {type(options).__name__}")
    for k in options:
        if not isinstance(k, str):
            raise TypeError("All option keys must be of type str.")
    return {**options}


class Input:
    """FFmpeg input file

    :param url: url of the input or None for the null device
    :type url: str or path-like
    :param options: input options (placed before ``-i``), defaults to None
    :type options: dict, optional

    The input is labeled by :py:meth:`Command.add_input` with its position in
    the command's input list. The label never changes once assigned.
    """

    def __init__(self, url: FFmpegUrlType | None, options: FFmpegOptionDict | None = None):
        self.url = _validate_url(url)
        self.options = _validate_options(options)
        self._label: int | None = None

    @property
    def label(self) -> int | None:
        """position in the command's input list or None if not added yet"""
        return self._label

    def _assign_label(self, label: int):
        if self._label is not None:
            raise InputLabelError(self.url, self._label)
        self._label = label

    def stream(self, track: TrackSelector | None = None) -> InputStreamSpecifier:
        """reference a stream of this input

        :param track: stream selector (e.g., ``"v"``, ``"a:1"``, or ``0``),
                      defaults to None to reference the whole input
        :return: stream specifier
        """
        return StreamSpecifier.from_input(self, track)

    def add_options(self, options: FFmpegOptionDict):
        """update the input options"""
        self.options.update(_validate_options(options))

    def to_args(self) -> list[str]:
        """input argument block ``[-opt val ...] -i url``"""
        return [*opts_to_args(self.options), "-i", null_url() if self.url is None else self.url]

    def __repr__(self):
        return f"<Input url={self.url!r} label={self._label}>"


class Output:
    """FFmpeg output file

    :param url: url of the output or None for the null device
    :type url: str or path-like
    :param options: output options (placed before the url), defaults to None
    :type options: dict, optional
    """

    def __init__(self, url: FFmpegUrlType | None, options: FFmpegOptionDict | None = None):
        self.url = _validate_url(url)
        self.options = _validate_options(options)
        self._maps: list[StreamSpecifier] = []

    @property
    def maps(self) -> tuple[StreamSpecifier, ...]:
        """mapped source streams in the order of the output tracks"""
        return tuple(self._maps)

    def _map_track(self, spec: StreamSpecifier) -> int:
        # only called by Command, which validates the source first
        if not isinstance(spec, StreamSpecifier):
            raise TypeError(
                f"expected a StreamSpecifier object but got {type(spec).__name__}"
            )
        self._maps.append(spec)
        return len(self._maps) - 1

    def add_options(self, options: FFmpegOptionDict):
        """update the output options"""
        self.options.update(_validate_options(options))

    def to_args(self) -> list[str]:
        """output argument block ``[-opt val ...] url``"""
        return [*opts_to_args(self.options), null_url() if self.url is None else self.url]

    def __repr__(self):
        return f"<Output url={self.url!r} nmaps={len(self._maps)}>"
