import pytest

import ffmpegcmd as ff


# every test starts from the default configuration
@pytest.fixture(autouse=True)
def default_rcparams():
    ff.rcdefaults()
    yield
    ff.rcdefaults()
