"""Update script invocation."""

from autogitpull.constants import LAUNCH_FAILURE_EXIT_CODE
from autogitpull.services.script_runner import ScriptRunner


def test_build_command_keeps_values_as_separate_arguments():
    runner = ScriptRunner("/opt/pull.sh")
    cmd = runner.build_command("main; rm -rf /", "/var/www/my site", "origin")
    assert cmd == ["/opt/pull.sh", "-b", "main; rm -rf /", "-d", "/var/www/my site", "-r", "origin"]


def test_build_command_with_deploy_user():
    runner = ScriptRunner("/opt/pull.sh", deploy_user="www-data")
    cmd = runner.build_command("master", "/srv", "origin")
    assert cmd[:3] == ["sudo", "-u", "www-data"]
    assert cmd[3:] == ["/opt/pull.sh", "-b", "master", "-d", "/srv", "-r", "origin"]


def test_successful_run_captures_output(make_script):
    runner = ScriptRunner(make_script(exit_code=0, stdout="Already up to date."))
    outcome = runner.run("master", "/srv/site", "origin")

    assert outcome.success
    assert outcome.exit_code == 0
    assert "args: -b master -d /srv/site -r origin" in outcome.output
    assert "Already up to date." in outcome.output
    assert outcome.command[1:] == ("-b", "master", "-d", "/srv/site", "-r", "origin")


def test_stderr_is_merged_into_output(make_script):
    runner = ScriptRunner(make_script(exit_code=1, stdout="", stderr="fatal: not a git repository"))
    outcome = runner.run("master", "/srv/site", "origin")

    assert not outcome.success
    assert outcome.exit_code == 1
    assert "fatal: not a git repository" in outcome.output


def test_nonzero_exit_codes_are_failures(make_script):
    outcome = ScriptRunner(make_script(exit_code=3)).run("master", "/srv", "origin")
    assert outcome.exit_code == 3
    assert not outcome.success


def test_missing_script_is_a_failed_outcome(tmp_path):
    runner = ScriptRunner(str(tmp_path / "does-not-exist.sh"))
    outcome = runner.run("master", "/srv", "origin")

    assert not outcome.success
    assert outcome.exit_code == LAUNCH_FAILURE_EXIT_CODE
    assert "Failed to launch update script" in outcome.output
    assert "does-not-exist.sh" in outcome.output


def test_output_is_kept_verbatim(tmp_path):
    script = tmp_path / "blank-lines.sh"
    script.write_text("#!/bin/sh\nprintf 'line\\n\\n\\n'\n")
    script.chmod(0o755)

    outcome = ScriptRunner(str(script)).run("master", "/srv", "origin")

    assert outcome.output == "line\n\n\n"
