import re
from typing import Sequence, Union

# fmt:off
__all__ = ["FFmpegcmdError", "MappingError", "UnknownMappingSourceError",
    "InputNotFoundError", "ChainNotFoundError", "PadAlreadyMappedError",
    "InputLabelError", "FFmpegError", "scan_stderr"]
# fmt:on


class FFmpegcmdError(Exception):
    pass


class MappingError(FFmpegcmdError):
    """output stream mapping could not be established"""


class UnknownMappingSourceError(MappingError, TypeError):
    def __init__(self, obj) -> None:
        super().__init__(
            f"Unknown input type specified in output mapping: {type(obj).__name__} ({obj!r})"
        )


class InputNotFoundError(MappingError):
    def __init__(self, url) -> None:
        super().__init__(f"Input file is not a part of the command: {url}")


class ChainNotFoundError(MappingError):
    def __init__(self, chain) -> None:
        super().__init__(
            f"Filter chain '{chain.compose_filters()}' is not a part of any filtergraph of the command"
        )


class PadAlreadyMappedError(MappingError):
    def __init__(self, chain, pad=None) -> None:
        what = "All output pads" if pad is None else f"Output pad {pad}"
        super().__init__(
            f"{what} of filter chain '{chain.compose_filters()}' already consumed by another chain or mapped to an output"
        )


class InputLabelError(MappingError):
    def __init__(self, url, label) -> None:
        super().__init__(
            f"Input {url} has already been added to a command (label={label})"
        )


def scan_stderr(logs: Union[str, Sequence[str], None]):
    """extract the most relevant error message from FFmpeg log

    :param logs: FFmpeg stderr output
    :type logs: str or seq(str), optional
    :return: error message or empty string if nothing found
    :rtype: str
    """
    msg = ""

    if logs is None:
        return msg

    if isinstance(logs, str):
        logs = re.split(r"[\n\r]+", logs.rstrip())

    if not len(logs):
        return msg

    if logs[0].startswith("Unknown help option "):
        msg = logs[0]
    else:
        msg0 = logs[-1]
        if msg0 == "Use -h to get full help or, even better, run 'man ffmpeg'":
            msg = "No ffmpeg command argument specified"
        elif msg0 == "Invalid argument" and len(logs) > 1:  # generic
            msg = logs[-2]
            if msg == "Error initializing complex filters." and len(logs) > 2:
                msg = f"{logs[-3]}\n  {msg}"
        elif msg0 == "To ignore this, add a trailing '?' to the map." and len(logs) > 1:
            msg = f"{logs[-2]}\n  {msg0}"
        elif msg0 == "Filtering and streamcopy cannot be used together." and len(logs) > 1:
            msg = f"{logs[-2]}\n  {msg0}"
        elif msg0 == "FFmpeg cannot edit existing files in-place." and len(logs) > 1:
            msg = f"{logs[-2]}\n  {msg0}"
        elif msg0.startswith("Error opening input files") or msg0.startswith(
            "Error opening output file"
        ):
            msg = "\n  ".join(logs[-2:])
        elif msg0.startswith("Error splitting the argument list: ") and len(logs) > 1:
            msg = f"{logs[-2]}\n  {msg0}"
        elif msg0.startswith("Error parsing global options:") and len(logs) > 1:
            if logs[-2].endswith("Invalid argument"):
                msg = "\n  ".join(logs[-3:])
            else:
                msg = f"{logs[-2]}\n  {msg0}"
        elif msg0 == "Conversion failed!" and len(logs) > 1:
            msg = logs[-2]
        elif re.match(r".+?: Invalid argument", msg0) and len(logs) > 1:
            msg = (
                f"{logs[-2]}\n  {msg0}" if logs[-2].startswith("[lavfi ") else logs[-2]
            )
        else:
            # e.g., "Output with label 'x' does not exist in any defined filter graph"
            msg = msg0
    return msg


class FFmpegError(FFmpegcmdError, RuntimeError):
    def __init__(self, logs=None, log_shown=None):
        if logs is None or not len(logs):
            msg = "FFmpeg failed for unknown reason (no log available)."
        else:
            msg = scan_stderr(logs)

        if log_shown:
            ffmpeg_msg = "FFmpeg failed. Check its log printed above."
            msg = ""
        else:
            ffmpeg_msg = f"""FFmpeg terminated abnormally with the error:

  {msg}

To display the full FFmpeg log, run with `capture_log=False`."""

        super().__init__(ffmpeg_msg)
        self.ffmpeg_msg = msg
