"""Deployment transcript logging."""

import os
import stat

from autogitpull.logger import DeployLogger, FileLogSink, LogSink
from autogitpull.services.notification_service import NotificationSink


class ListSink(LogSink):
    def __init__(self):
        self.lines = []

    def write(self, line):
        self.lines.append(line)


def test_line_format():
    sink = ListSink()
    logger = DeployLogger(sink=sink, date_format="%Y")
    line = logger.log("Attempting deployment...")

    year, level, message = line.rstrip("\n").split("\t")
    assert year.startswith("[") and year.endswith("]") and len(year) == 6
    assert level == "INFO"
    assert message == "Attempting deployment..."
    assert sink.lines == [line]


def test_lines_go_to_sink_and_notification_buffer(transport):
    sink = ListSink()
    notifier = NotificationSink(["ops@example.com"], transport)
    logger = DeployLogger(sink=sink, notifier=notifier)

    logger.log("one")
    logger.warning("two")
    logger.log_error("three", context="ctx")

    message = notifier.flush("Deployment script failed")
    assert message.body == "".join(sink.lines)
    assert "\tWARNING\ttwo" in message.body
    assert "\tERROR\tthree\nContext: ctx" in message.body
    assert logger.has_errors


def test_without_sink_logging_is_a_noop():
    logger = DeployLogger()
    assert logger.log("nothing happens").endswith("\tINFO\tnothing happens\n")
    assert logger.log_path is None


def test_log_output_strips_ansi_codes():
    sink = ListSink()
    DeployLogger(sink=sink).log_output("\x1b[32mUpdated\x1b[0m", "Running deploy shell script...")
    assert sink.lines[0].endswith("Running deploy shell script...\nUpdated\n")


def test_log_output_trims_trailing_newlines_for_the_transcript():
    sink = ListSink()
    DeployLogger(sink=sink).log_output("line\n\n\n", "Running deploy shell script...")
    assert sink.lines[0].endswith("Running deploy shell script...\nline\n")


def test_file_sink_creates_world_writable_log(tmp_path):
    sink = FileLogSink(str(tmp_path / "logs"), started_at=1700000000)
    assert sink.log_path.name == "auto-git-pull-1700000000.log"

    sink.write("a\n")
    sink.write("b\n")

    assert sink.log_path.read_text() == "a\nb\n"
    mode = stat.S_IMODE(os.stat(sink.log_path).st_mode)
    assert mode == 0o666
