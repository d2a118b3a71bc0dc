"""Shared fixtures for autogitpull tests."""

import os
import stat

import pytest

from autogitpull.services.notification_service import MailTransport


class RecordingTransport(MailTransport):
    """Keeps every message instead of sending it."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.attempted = []
        self.fail_for = set(fail_for)

    def send(self, recipient, subject, body):
        self.attempted.append(recipient)
        if recipient in self.fail_for:
            raise ConnectionRefusedError(f"cannot reach mail server for {recipient}")
        self.sent.append((recipient, subject, body))


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def make_script(tmp_path):
    """Write an executable update script that echoes its args and exits."""

    def _make(exit_code=0, stdout="pulled", stderr="", name="update.sh"):
        path = tmp_path / name
        lines = ["#!/bin/sh", 'echo "args: $*"']
        if stdout:
            lines.append(f"echo '{stdout}'")
        if stderr:
            lines.append(f"echo '{stderr}' >&2")
        lines.append(f"exit {exit_code}")
        path.write_text("\n".join(lines) + "\n")
        os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return _make
