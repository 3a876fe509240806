r"""FFmpeg subprocesses with accessible I/O streams
This module mimics Python's `subprocess` library module and allows you to
spawn FFmpeg processes of compiled commands, connect to their
input/output/error pipes, and obtain their return codes.

Main API
========
run(...): Runs a FFmpeg command, waits for it to complete, then returns a
          CompletedProcess instance.
Popen(...): A subclass of subprocess.Popen to manage FFmpeg subprocess.

Both accept a :py:class:`ffmpegcmd.Command` object, a list of FFmpeg arguments,
or a command-line string (all without the executable).

Constants
---------
DEVNULL: Special value that indicates that os.devnull should be used
PIPE:    Special value that indicates a pipe should be created

"""

from __future__ import annotations

from collections import abc
from os import name as os_name
from threading import Thread, current_thread
import subprocess as sp
import shlex
import logging
import signal

logger = logging.getLogger("ffmpegcmd")

from .threading import ProgressMonitorThread
from .rcparams import rcParams
from .path import ffmpeg, DEVNULL, PIPE, devnull

__all__ = ["exec", "run", "Popen", "PIPE", "DEVNULL", "devnull"]

_stdin_urls = ("-", "pipe:", "pipe:0")
_stdout_urls = ("-", "pipe:", "pipe:1")


def _as_args(ffmpeg_args):
    """resolve the executable and argument list

    :param ffmpeg_args: compiled command, argument list, or command-line string
    :type ffmpeg_args: Command, seq(str), or str
    :return: executable (None to use the default) and list of arguments
    :rtype: tuple(str|None, list(str))
    """
    from .command import Command

    if isinstance(ffmpeg_args, Command):
        return ffmpeg_args.executable, ffmpeg_args.to_args()
    if isinstance(ffmpeg_args, str):
        return None, shlex.split(ffmpeg_args)
    if isinstance(ffmpeg_args, abc.Sequence):
        return None, [str(a) for a in ffmpeg_args]
    raise TypeError(
        f"ffmpeg_args must be a Command, str, or a sequence of str, got {type(ffmpeg_args).__name__}"
    )


def _uses_stdin(args):
    return any(a in _stdin_urls and args[i - 1] == "-i" for i, a in enumerate(args) if i)


def _uses_stdout(args):
    return bool(args) and args[-1] in _stdout_urls


def exec(
    ffmpeg_args,
    hide_banner=None,
    progress=None,
    overwrite=None,
    capture_log=None,
    stdin=None,
    stdout=None,
    stderr=None,
    sp_run=sp.run,
    **sp_kwargs,
):
    """run ffmpeg command

    :param ffmpeg_args: FFmpeg command or arguments (executable excluded)
    :type ffmpeg_args: Command, seq(str), or str
    :param hide_banner: False to output ffmpeg banner in stderr, defaults to None
                        (``rcParams["ffmpeg.hide_banner"]``)
    :type hide_banner: bool, optional
    :param progress: progress monitor object, defaults to None
    :type progress: ProgressMonitorThread, optional
    :param overwrite: True to overwrite if output url exists, defaults to None
                      (auto-select)
    :type overwrite: bool, optional
    :param capture_log: True to capture log messages on stderr, False to suppress
                        console log messages, defaults to None (show on console)
    :type capture_log: bool or None, optional
    :param stdin: source file object, defaults to None
    :type stdin: readable file-like object, optional
    :param stdout: sink file object, defaults to None
    :type stdout: writable file-like object, optional
    :param stderr: file to log ffmpeg messages, defaults to None
    :type stderr: writable file-like object, optional
    :param sp_run: function to run FFmpeg as a subprocess, defaults to subprocess.run
    :type sp_run: Callable, optional
    :param **sp_kwargs: additional keyword arguments for sp_run, optional
    :type **sp_kwargs: dict
    :return: depends on sp_run
    :rtype: depends on sp_run

    Executor flags (``-nostdin``, ``-hide_banner``, ``-progress``, and
    ``-y``/``-n``) are placed ahead of the command arguments.
    """

    executable, args = _as_args(ffmpeg_args)

    gopts = []

    # disable user-interaction by default
    if rcParams["ffmpeg.nostdin"] and "-nostdin" not in args and not _uses_stdin(args):
        gopts.append("-nostdin")

    # hide preamble by default
    if hide_banner is None:
        hide_banner = rcParams["ffmpeg.hide_banner"]
    if hide_banner and "-hide_banner" not in args:
        gopts.append("-hide_banner")

    # add URL to dump progress status
    if progress and progress.url:
        gopts.extend(["-progress", progress.url])

    # set y or n flags (overwrite)
    if overwrite is not None:
        if "-y" in args or "-n" in args:
            raise ValueError(
                "Cannot set both the overwrite argument and a y/n global flag."
            )
        gopts.append("-y" if overwrite else "-n")

    # configure stdin pipe (if needed)
    inpipe = stdin
    if stdin is None and sp_kwargs.get("input") is None and _uses_stdin(args):
        inpipe = PIPE

    # configure stdout pipe (if needed)
    outpipe = stdout
    if stdout is None and _uses_stdout(args):
        outpipe = PIPE

    # set stderr for logging FFmpeg message
    if stderr == sp.STDOUT and outpipe == PIPE:
        raise ValueError("stderr cannot be redirected to stdout, which is in use")
    errpipe = stderr or (
        PIPE if capture_log else None if capture_log is None else DEVNULL
    )

    # run the FFmpeg
    return ffmpeg(
        [*gopts, *args],
        sp_run=sp_run,
        executable=executable,
        stdin=inpipe,
        stdout=outpipe,
        stderr=errpipe,
        **sp_kwargs,
    )


def monitor_process(proc, on_exit=None):
    """thread function to monitor subprocess termination

    :param proc: subprocess to be monitored
    :type proc: subprocess.Popen
    :param on_exit: callback functions to be called after process is terminated
    :type on_exit: seq(Callables), optional

        on_exit(returncode)

    """

    logger.debug("[monitor] waiting for FFmpeg to terminate...")
    sp.Popen.wait(proc)
    logger.debug("[monitor] FFmpeg terminated")
    if on_exit is not None:
        returncode = proc.returncode
        for fcn in on_exit:
            fcn(returncode)
        logger.debug("[monitor] executed all on_exit callbacks")


class Popen(sp.Popen):
    """FFmpeg process running a compiled command

    :param ffmpeg_args: FFmpeg command or arguments (executable excluded)
    :type ffmpeg_args: Command, seq(str), or str
    :param progress: progress callback ``progress(status, done)``, which may
                     return True to stop FFmpeg, defaults to None
    :type progress: ProgressCallable, optional
    :param on_exit: function(s) called with the return code after FFmpeg
                    terminates, defaults to None
    :type on_exit: Callable or seq(Callable), optional
    :param \\**other_popen_args: other keyword arguments to :py:class:`subprocess.Popen`

    ``hide_banner``, ``overwrite``, ``capture_log``, ``stdin``, ``stdout``, and
    ``stderr`` are passed on to :py:func:`exec`. A stdin or stdout pipe is opened
    automatically if an input or the last output is ``-`` or ``pipe:``.
    """

    def __init__(
        self,
        ffmpeg_args,
        *,
        hide_banner=None,
        progress=None,
        overwrite=None,
        capture_log=None,
        stdin=None,
        stdout=None,
        stderr=None,
        on_exit=None,
        **other_popen_args,
    ):
        # fmt: off
        protected = (
            "executable", "close_fds", "shell", "universal_newlines", "pass_fds",
            "encoding", "errors", "text", "pipesize",
        )
        # fmt: on
        if any(k in protected for k in other_popen_args):
            raise ValueError(
                "Input arguments contain protected subprocess.Popen keyword argument(s)."
            )

        #: the FFmpeg command argument as it was passed to `Popen`
        self.ffmpeg_args = ffmpeg_args

        # run progress monitor
        self._progmon = None if progress is None else ProgressMonitorThread(progress)
        self._monitor = None

        # start FFmpeg process
        exec(
            ffmpeg_args,
            hide_banner,
            self._progmon,
            overwrite,
            capture_log,
            stdin,
            stdout,
            stderr,
            super().__init__,
            **other_popen_args,
        )

        # set progress monitor's cancelfun to allow its callback to terminate the FFmpeg process
        if self._progmon:
            self._progmon.cancelfun = self.send_signal
            self._progmon.start()

        # start the process monitor to perform the cleanup when FFmpeg terminates
        if self._progmon or capture_log or on_exit:
            if on_exit is None:
                on_exit = []
            elif callable(on_exit):
                on_exit = [on_exit]
            else:
                on_exit = [*on_exit]

            if capture_log:
                on_exit.append(lambda _: self.stderr.close())

            if self._progmon:
                on_exit.append(lambda _: self._progmon.join())

            self._monitor = Thread(target=monitor_process, args=(self, on_exit))
            self._monitor.start()

    def _join_monitor(self, timeout=None):
        # the monitor thread itself may call these methods via on_exit callbacks
        if self._monitor is not None and self._monitor is not current_thread():
            self._monitor.join(timeout)

    def wait(self, timeout=None):
        """Wait for FFmpeg process to terminate; returns self.returncode

        :param timeout: optional timeout in seconds, defaults to None
        :type timeout: float, optional

        For FFmpeg to terminate autonomously, its stdin PIPE must be closed.

        If the process does not terminate after timeout seconds, raise a TimeoutExpired exception.
        It is safe to catch this exception and retry the wait.
        """
        returncode = super().wait(timeout)
        self._join_monitor()
        return returncode

    def terminate(self):
        """Terminate the FFmpeg process"""
        super().terminate()
        self._join_monitor()

    def kill(self):
        """Kill the FFmpeg process"""
        super().kill()
        self._join_monitor()

    def send_signal(self, sig: int = None, kill_monitor: bool = False):
        """Sends the signal signal to the FFmpeg process

        :param sig: signal id, default SIGINT (POSIX) / CTRL_C_EVENT (Windows)
        :type sig: int, optional
        :param kill_monitor: True to wait for the monitor thread, default False
        :type kill_monitor: bool, optional

        Without any argument, `send_signal()` will perform control-C to initiate
        soft-terminate FFmpeg. FFmpeg may output additional frames before exits.

        Note: Setting `kill_monitor=True` will block the caller thread until the
        FFmpeg terminates.

        """

        if sig is None:
            sig = signal.CTRL_C_EVENT if os_name == "nt" else signal.SIGINT

        super().send_signal(sig)
        if kill_monitor:
            self._join_monitor()


def run(
    ffmpeg_args,
    *,
    hide_banner=None,
    progress=None,
    overwrite=None,
    capture_log=None,
    stdin=None,
    stdout=None,
    stderr=None,
    input=None,
    sp_run=sp.run,
    **other_popen_kwargs,
):
    """run FFmpeg and wait for it to finish

    :param ffmpeg_args: FFmpeg command or arguments (executable excluded)
    :type ffmpeg_args: Command, seq(str), or str
    :param progress: progress callback ``progress(status, done)``, defaults to None
    :type progress: ProgressCallable, optional
    :param input: data to send to FFmpeg's stdin, defaults to None
    :type input: bytes-like object, optional
    :param sp_run: function to run FFmpeg as a subprocess, defaults to subprocess.run
    :type sp_run: Callable, optional
    :param \\**other_popen_kwargs: other keyword arguments of :py:func:`subprocess.run`
    :return: completed process with ``stderr`` decoded to str if captured
    :rtype: subprocess.CompletedProcess

    The other arguments are those of :py:func:`exec`.
    """

    with ProgressMonitorThread(progress) as progmon:
        # run the FFmpeg
        ret = exec(
            ffmpeg_args,
            hide_banner,
            progmon,
            overwrite,
            capture_log,
            stdin if input is None else None,
            stdout,
            stderr,
            sp_run,
            input=input if input is None else memoryview(input),
            **other_popen_kwargs,
        )

    # return stderr as str
    if isinstance(ret.stderr, bytes):
        ret.stderr = ret.stderr.decode("utf-8")

    return ret
