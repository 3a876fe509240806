"""FFmpeg command builder

Describe the inputs, filtergraphs, and outputs of an FFmpeg invocation as
objects and compile them into an ordered argument list.

Command Construction
--------------------
:py:class:`ffmpegcmd.Command`, :py:class:`ffmpegcmd.Input`,
:py:class:`ffmpegcmd.Output`

Filtergraph
-----------
:py:class:`ffmpegcmd.FilterNode`, :py:class:`ffmpegcmd.FilterChain`,
:py:class:`ffmpegcmd.FilterGraph`, :py:class:`ffmpegcmd.StreamSpecifier`

Execution
---------
:py:meth:`ffmpegcmd.Command.execute()`, :py:mod:`ffmpegcmd.ffmpegprocess`
"""

import logging

logger = logging.getLogger("ffmpegcmd")
logger.addHandler(logging.NullHandler())

from . import path, plugins

# register builtin plugins and external plugins found in site-packages
plugins.initialize()

# initialize the paths
try:
    path.find()
except Exception as e:
    logger.warning(str(e))


def __getattr__(name):
    if name == "ffmpeg_ver":
        return path.FFMPEG_VER
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


from .rcparams import rcParams, rcParamsDefault, rc_context, rcdefaults, set_loglevel
from .errors import *
from .filtergraph import Filter, Chain, Graph, Arity
from .stream_spec import StreamSpecifier
from .files import Input, Output
from .command import Command
from .utils.parser import FLAG
from . import ffmpegprocess

FilterNode = Filter
FilterChain = Chain
FilterGraph = Graph

# fmt:off
__all__ = ["Command", "Input", "Output", "Filter", "Chain", "Graph", "FilterNode",
    "FilterChain", "FilterGraph", "Arity", "StreamSpecifier", "FFmpegcmdError",
    "MappingError", "UnknownMappingSourceError", "InputNotFoundError",
    "ChainNotFoundError", "PadAlreadyMappedError", "InputLabelError", "FFmpegError",
    "rcParams", "rcParamsDefault", "rc_context", "rcdefaults", "set_loglevel",
    "ffmpeg_info", "set_path", "get_path", "ffmpegprocess", "FLAG"]
# fmt:on

__version__ = "0.1.0"

ffmpeg_info = path.versions
set_path = path.find
get_path = path.where
