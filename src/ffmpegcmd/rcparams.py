"""runtime configuration of ffmpegcmd

``rcParams`` is a validating dict of the package settings. The validators and
default values are defined in :py:mod:`ffmpegcmd.rcsetup`.

=========================  ======  =============================================
key                        type    description
=========================  ======  =============================================
path.ffmpeg                str     FFmpeg executable used by ``path.find()``
ffmpeg.hide_banner         bool    executor adds ``-hide_banner``
ffmpeg.nostdin             bool    executor adds ``-nostdin``
command.per_output_maps    bool    place ``-map`` options before each output
=========================  ======  =============================================
"""

__all__ = [
    "set_loglevel",
    "RcParams",
    "rcParamsDefault",
    "rcParams",
    "rcdefaults",
    "rc_context",
]

from collections.abc import MutableMapping
import contextlib
import functools
import logging
import re

from . import rcsetup

_log = logging.getLogger("ffmpegcmd")


@functools.lru_cache(maxsize=None)
def _ensure_handler():
    # attached only once
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(logging.BASIC_FORMAT))
    _log.addHandler(handler)
    return handler


def set_loglevel(level):
    """set the level of the ffmpegcmd logger and its console handler

    :param level: one of "notset", "debug", "info", "warning", "error", or
                  "critical"
    :type level: str

    The console handler is created on the first call. Applications with their
    own logging configuration should configure ``logging.getLogger("ffmpegcmd")``
    directly instead.
    """
    _log.setLevel(level.upper())
    _ensure_handler().setLevel(level.upper())


class RcParams(MutableMapping, dict):
    """dict of ffmpegcmd settings, validated on assignment

    Assigning an unknown key raises KeyError and an invalid value raises
    ValueError. Keys cannot be deleted.
    """

    validate = rcsetup._validators

    def __init__(self, *args, **kwargs):
        self.update(*args, **kwargs)

    def __setitem__(self, key, val):
        try:
            validator = self.validate[key]
        except KeyError as err:
            raise KeyError(
                f"{key} is not a valid rc parameter (see rcParams.keys() for "
                f"a list of valid parameters)"
            ) from err
        try:
            cval = validator(val)
        except ValueError as ve:
            raise ValueError(f"Key {key}: {ve}") from None
        dict.__setitem__(self, key, cval)

    def __getitem__(self, key):
        return dict.__getitem__(self, key)

    def __delitem__(self, key):
        raise KeyError(f"{key} cannot be removed from rcParams")

    def __iter__(self):
        yield from sorted(dict.__iter__(self))

    def __len__(self):
        return dict.__len__(self)

    def __repr__(self):
        return f"{type(self).__name__}({dict(self)!r})"

    def __str__(self):
        return "\n".join(f"{k}: {v}" for k, v in self.items())

    def find_all(self, pattern):
        """settings whose keys match the regular expression ``pattern``

        The returned object is a copy.
        """
        pattern_re = re.compile(pattern)
        return RcParams((k, v) for k, v in self.items() if pattern_re.search(k))

    def copy(self):
        rccopy = RcParams()
        dict.update(rccopy, self)  # already validated
        return rccopy


rcParamsDefault = RcParams(rcsetup.defaultParams)

rcParams = rcParamsDefault.copy()


def rcdefaults():
    """restore the default settings"""
    dict.update(rcParams, rcParamsDefault)


@contextlib.contextmanager
def rc_context(rc=None):
    """context manager to change settings temporarily

    :param rc: settings to apply within the context, defaults to None
    :type rc: dict, optional

    All the changes made within the context, including those made directly to
    ``rcParams``, are reverted on exit::

        with ffmpegcmd.rc_context({"command.per_output_maps": True}):
            cmd.to_command()

    """
    orig = dict(rcParams)
    try:
        if rc:
            rcParams.update(rc)
        yield
    finally:
        dict.update(rcParams, orig)
