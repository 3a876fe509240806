from pathlib import Path

import pytest

import ffmpegcmd as ff
from ffmpegcmd.rcsetup import validate_bool
from ffmpegcmd.rcparams import RcParams


def test_defaults():
    assert ff.rcParams["path.ffmpeg"] is None
    assert ff.rcParams["ffmpeg.hide_banner"] is True
    assert ff.rcParams["ffmpeg.nostdin"] is True
    assert ff.rcParams["command.per_output_maps"] is False
    assert dict(ff.rcParams) == dict(ff.rcParamsDefault)


@pytest.mark.parametrize(
    "value, ret",
    [
        # fmt: off
        (True, True), (False, False), (1, True), (0, False),
        ("yes", True), ("On", True), ("TRUE", True), ("t", True), ("1", True),
        ("no", False), ("off", False), ("False", False), ("f", False), ("0", False),
        # fmt: on
    ],
)
def test_validate_bool(value, ret):
    assert validate_bool(value) is ret


@pytest.mark.parametrize("value", ["maybe", 2, None, 0.5])
def test_validate_bool_error(value):
    with pytest.raises(ValueError):
        validate_bool(value)


def test_setitem():
    ff.rcParams["command.per_output_maps"] = "yes"
    assert ff.rcParams["command.per_output_maps"] is True

    ff.rcParams["path.ffmpeg"] = Path("bin") / "ffmpeg"
    assert ff.rcParams["path.ffmpeg"] == str(Path("bin") / "ffmpeg")
    ff.rcParams["path.ffmpeg"] = "None"
    assert ff.rcParams["path.ffmpeg"] is None

    with pytest.raises(KeyError):
        ff.rcParams["ffmpeg.bogus"] = True
    with pytest.raises(ValueError):
        ff.rcParams["ffmpeg.nostdin"] = "maybe"
    with pytest.raises(ValueError):
        ff.rcParams["path.ffmpeg"] = 3
    with pytest.raises(KeyError):
        del ff.rcParams["ffmpeg.nostdin"]


def test_rcdefaults():
    ff.rcParams["ffmpeg.hide_banner"] = False
    ff.rcdefaults()
    assert ff.rcParams["ffmpeg.hide_banner"] is True


def test_rc_context():
    with ff.rc_context({"ffmpeg.hide_banner": False}):
        assert ff.rcParams["ffmpeg.hide_banner"] is False
        ff.rcParams["ffmpeg.nostdin"] = False
    assert ff.rcParams["ffmpeg.hide_banner"] is True
    assert ff.rcParams["ffmpeg.nostdin"] is True

    with pytest.raises(RuntimeError):
        with ff.rc_context({"command.per_output_maps": True}):
            raise RuntimeError
    assert ff.rcParams["command.per_output_maps"] is False


def test_find_all_and_copy():
    sub = ff.rcParams.find_all(r"^ffmpeg\.")
    assert isinstance(sub, RcParams)
    assert sorted(sub) == ["ffmpeg.hide_banner", "ffmpeg.nostdin"]

    cp = ff.rcParams.copy()
    cp["ffmpeg.nostdin"] = False
    assert ff.rcParams["ffmpeg.nostdin"] is True
    assert "ffmpeg.nostdin: True" in str(ff.rcParams)
