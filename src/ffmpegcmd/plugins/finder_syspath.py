"""ffmpegcmd plugin to find ffmpeg on system path"""

import logging

from pluggy import HookimplMarker

from shutil import which

hookimpl = HookimplMarker("ffmpegcmd")

logger = logging.getLogger("ffmpegcmd")

__all__ = ["finder"]


@hookimpl
def finder():
    """find ffmpeg executable"""

    if which("ffmpeg"):
        return "ffmpeg"

    logger.warning("FFmpeg binary not found in the system path.")
    return None
