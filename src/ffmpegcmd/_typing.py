"""ffmpegcmd object independent common type hints"""

from __future__ import annotations

from typing import *
from typing_extensions import *

from pathlib import Path


FFmpegOptionDict = Dict[str, Any]
"""FFmpeg options with their values keyed by the option names without preceding dash.
For option flags (e.g., -y) without any value, use `None` or its alias `ffmpegcmd.FLAG`"""

FFmpegUrlType = Union[str, Path]

TrackSelector = Union[int, str]
"""Stream selector of an input (e.g., ``"v"``, ``"a:1"``, or ``0``)"""

ProgressCallable = Callable[[Dict[str, Any], bool], Optional[bool]]
"""FFmpeg progress callback function

    callback(status, done)

      status - dict of encoding status
      done - True if the last callback

    The callback may return True to cancel the FFmpeg execution.
"""


class CommandDict(TypedDict):
    """compiled FFmpeg command, ready to be handed to a subprocess"""

    executable: str  # path or name of the ffmpeg executable
    args: List[str]  # ordered command-line arguments (executable excluded)
