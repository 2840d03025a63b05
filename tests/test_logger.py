import re

import pytest

from clice import logger
from clice.logger import FatalError, Level

LINE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] \[(.*)\] (.*)$")


def _lines(capsys):
    return capsys.readouterr().err.splitlines()


def test_info_line_shape(capsys):
    logger.info("value {0} and {1}", "a", "b")
    (line,) = _lines(capsys)
    match = LINE.match(line)
    assert match is not None
    assert match.group(1) == "\033[32mINFO\033[0m"
    assert match.group(2) == "value a and b"


@pytest.mark.parametrize(
    "function, tag",
    [
        (logger.info, "\033[32mINFO\033[0m"),
        (logger.warn, "\033[33mWARN\033[0m"),
        (logger.debug, "\033[36mDEBUG\033[0m"),
    ],
)
def test_level_tags(capsys, function, tag):
    function("message")
    (line,) = _lines(capsys)
    assert LINE.match(line).group(1) == tag
    assert line.endswith("] message")


def test_log_with_level(capsys):
    logger.log(Level.WARN, "x")
    logger.log(Level.INFO, "y")
    logger.log(Level.TRACE, "z")
    lines = _lines(capsys)
    assert [LINE.match(line).group(1) for line in lines] == [
        "\033[33mWARN\033[0m",
        "\033[32mINFO\033[0m",
        "\033[35mTRACE\033[0m",
    ]


def test_fatal_logs_and_raises(capsys):
    with pytest.raises(FatalError, match="broken 7"):
        logger.fatal("broken {}", 7)
    (line,) = _lines(capsys)
    assert LINE.match(line).group(1) == "\033[31mFATAL ERROR\033[0m"


def test_check_passes_silently(capsys):
    logger.check(1 == 1, "never {}", 1)
    assert capsys.readouterr().err == ""


def test_check_failure(capsys):
    with pytest.raises(AssertionError, match="bad 3"):
        logger.check(False, "bad {}", 3)
    assert capsys.readouterr().err.startswith("ASSERT FAIL: ")