import logging
import os
import subprocess as sp

import pytest

import ffmpegcmd as ff
from ffmpegcmd import path, plugins
from ffmpegcmd.plugins import finder_envvar
from packaging.version import Version


VERSION_OUTPUT = """\
ffmpeg version 6.1.1 Copyright (c) 2000-2023 the FFmpeg developers
built with gcc 13.2.0 (GCC)
configuration: --enable-gpl --enable-libx264 --enable-version3
libavutil      58. 29.100 / 58. 29.100
libavcodec     60. 31.102 / 60. 31.102
libavformat    60. 16.100 / 60. 16.100
"""


def test_parse_versions():
    v = path.parse_versions(VERSION_OUTPUT.splitlines())
    assert v["version"] == "6.1.1"
    assert v["configuration"] == ["enable-gpl", "enable-libx264", "enable-version3"]
    assert v["library_versions"] == {
        "libavutil": "58.29.100",
        "libavcodec": "60.31.102",
        "libavformat": "60.16.100",
    }

    with pytest.raises(ValueError):
        path.parse_versions(["not ffmpeg"])


def test_ffmpeg_runner(monkeypatch):
    calls = []

    def fake_run(args, *sp_args, **kwargs):
        calls.append((args, kwargs))
        return sp.CompletedProcess(args, 0)

    monkeypatch.setattr(path, "FFMPEG_BIN", "/usr/bin/ffmpeg")
    path.ffmpeg("-i in.mp4 out.mp4", sp_run=fake_run, stdout=sp.PIPE)
    assert calls[-1] == (
        ("/usr/bin/ffmpeg", "-i", "in.mp4", "out.mp4"),
        {"stdout": sp.PIPE},
    )

    path.ffmpeg(["-version"], sp_run=fake_run, executable="ff")
    assert calls[-1][0] == ("ff", "-version")


def test_ffmpeg_logs_command(monkeypatch, caplog):
    monkeypatch.setattr(path, "FFMPEG_BIN", "/usr/bin/ffmpeg")
    with caplog.at_level(logging.DEBUG, logger="ffmpegcmd"):
        path.ffmpeg(["-i", "my clip.mp4"], sp_run=lambda *args, **kwargs: None)
    assert "/usr/bin/ffmpeg -i 'my clip.mp4'" in caplog.text
    assert "shlex_join" not in path.__all__


def test_ffmpeg_not_found(monkeypatch):
    monkeypatch.setattr(path, "FFMPEG_BIN", None)
    assert not path.found()
    with pytest.raises(path.FFmpegNotFound):
        path.where()
    with pytest.raises(path.FFmpegNotFound):
        path.ffmpeg(["-version"], sp_run=lambda *args, **kwargs: None)

    def missing(*args, **kwargs):
        raise FileNotFoundError

    with pytest.raises(path.FFmpegNotFound):
        path.ffmpeg(["-version"], sp_run=missing, executable="no-such-ffmpeg")


@pytest.mark.parametrize(
    "ver, cond, ret",
    [
        ("6.0", None, True),
        ("6.1", ">=", True),
        ("6.1", "==", True),
        ("6.1", "!=", False),
        ("7.0", "<", True),
        ("6.0", "<=", False),
        ("6.0", ">", True),
    ],
)
def test_check_version(monkeypatch, ver, cond, ret):
    monkeypatch.setattr(path, "FFMPEG_VER", Version("6.1"))
    assert path.check_version(ver, cond) is ret


def test_check_version_nightly(monkeypatch):
    monkeypatch.setattr(path, "FFMPEG_VER", "nightly")
    with pytest.raises(ValueError):
        path.check_version("6.0")
    monkeypatch.setattr(path, "FFMPEG_VER", None)
    with pytest.raises(path.FFmpegNotFound):
        path.check_version("6.0")


def test_find_bad_paths(tmp_path):
    with pytest.raises(ValueError):
        path.find(str(tmp_path))
    with pytest.raises(ValueError):
        path.find(str(tmp_path / "ffmpeg"))
    with ff.rc_context({"path.ffmpeg": str(tmp_path)}):
        with pytest.raises(ValueError):
            path.find()


def test_plugins_registered():
    names = plugins.list_plugins()
    assert any(name.endswith("finder_syspath") for name in names)
    assert any(name.endswith("finder_envvar") for name in names)


@pytest.mark.skipif(os.name == "nt", reason="uses a POSIX executable script")
def test_finder_envvar(monkeypatch, tmp_path):
    monkeypatch.delenv("FFMPEG_DIR", raising=False)
    assert finder_envvar.finder() is None

    monkeypatch.setenv("FFMPEG_DIR", str(tmp_path))
    assert finder_envvar.finder() is None

    exe = tmp_path / "ffmpeg"
    exe.write_text("#!/bin/sh\n")
    exe.chmod(0o755)
    assert finder_envvar.finder() == str(exe)
