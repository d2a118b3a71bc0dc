"""End-to-end deployment orchestration."""

import pytest

from autogitpull.core.config_loader import load_config
from autogitpull.deployer import Deployer
from autogitpull.exceptions import HookError, ScriptExecutionError, UnauthorizedCaller
from autogitpull.logger import FileLogSink
from autogitpull.models.config import DeploymentConfig
from autogitpull.models.request import RequestContext
from autogitpull.models.results import DeployState, DeploymentOutcome
from autogitpull.services.script_runner import ScriptRunner

RECIPIENTS = ["ops@example.com"]


class CountingHook:
    def __init__(self, error=None):
        self.calls = 0
        self.error = error

    def __call__(self):
        self.calls += 1
        if self.error:
            raise self.error


class ExplodingRunner(ScriptRunner):
    def run(self, branch, directory, remote):
        raise RuntimeError("runner blew up")


class SpyRunner(ScriptRunner):
    def __init__(self):
        super().__init__("/opt/pull.sh")
        self.calls = []

    def run(self, branch, directory, remote):
        self.calls.append((branch, directory, remote))
        return DeploymentOutcome(exit_code=0)


def make_config(script, **overrides):
    options = dict(directory="/srv/site", pull_script_path=script, notify_emails=RECIPIENTS)
    options.update(overrides)
    return DeploymentConfig.from_options(**options)


def github_request(address="192.30.252.1"):
    return RequestContext.networked(
        remote_addr="10.0.0.1",
        headers={"HTTP_X_FORWARDED_FOR": address, "HTTP_USER_AGENT": "GitHub-Hookshot/abc"},
        form={"payload": '{"ref": "refs/heads/other"}'},
    )


class TestSuccess:
    def test_exit_zero_completes_and_runs_hook_once(self, make_script, transport):
        hook = CountingHook()
        deployer = Deployer(make_config(make_script(0), post_deploy_hook=hook), transport=transport)

        outcome = deployer.deploy(RequestContext.direct())

        assert isinstance(outcome, DeploymentOutcome)
        assert outcome.success
        assert deployer.state == DeployState.SUCCEEDED
        assert hook.calls == 1
        assert len(transport.sent) == 1
        recipient, subject, body = transport.sent[0]
        assert recipient == "ops@example.com"
        assert subject == "Deployment successful"
        assert "Running from command line" in body
        assert "Deployment successful." in body
        assert "pulled" in body

    def test_direct_origin_ignores_allow_list(self, make_script, transport):
        config = make_config(make_script(0), allowed_ranges=[])
        deployer = Deployer(config, transport=transport)

        assert deployer.deploy(RequestContext.direct()).success

    def test_networked_caller_in_range(self, make_script, transport):
        deployer = Deployer(make_config(make_script(0)), transport=transport)

        outcome = deployer.deploy(github_request())

        assert outcome.success
        body = transport.sent[0][2]
        assert "IP is 192.30.252.1" in body
        assert "HTTP_USER_AGENT" in body
        assert "\tPOST\t" in body
        assert "refs/heads/other" in body

    def test_configured_branch_is_used_whatever_was_pushed(self, make_script, transport):
        deployer = Deployer(make_config(make_script(0), branch="production"), transport=transport)

        outcome = deployer.deploy(github_request())

        assert "-b production" in outcome.output

    def test_no_recipients_no_delivery(self, make_script, transport):
        deployer = Deployer(make_config(make_script(0), notify_emails=()), transport=transport)

        assert deployer.deploy(RequestContext.direct()).success
        assert transport.attempted == []
        assert deployer.last_notification is None

    def test_file_log_written(self, make_script, transport, tmp_path):
        config = make_config(make_script(0), log_directory=str(tmp_path / "logs"))
        deployer = Deployer(config, transport=transport)
        assert isinstance(deployer.log_sink, FileLogSink)

        deployer.deploy(RequestContext.direct())

        text = deployer.log_sink.log_path.read_text()
        assert "Attempting deployment..." in text
        assert "Deployment successful." in text


class TestFailure:
    def test_exit_one_fails_without_hook(self, make_script, transport):
        hook = CountingHook()
        script = make_script(1, stdout="", stderr="fatal: could not read from remote")
        deployer = Deployer(make_config(script, post_deploy_hook=hook), transport=transport)

        with pytest.raises(ScriptExecutionError) as excinfo:
            deployer.deploy(RequestContext.direct())

        assert excinfo.value.outcome.exit_code == 1
        assert deployer.state == DeployState.FAILED
        assert hook.calls == 0
        assert len(transport.sent) == 1
        _, subject, body = transport.sent[0]
        assert subject == "Deployment script failed"
        assert "fatal: could not read from remote" in body
        assert "Error 1 executing update script" in body

    def test_launch_failure(self, tmp_path, transport):
        deployer = Deployer(make_config(str(tmp_path / "missing.sh")), transport=transport)

        with pytest.raises(ScriptExecutionError) as excinfo:
            deployer.deploy(RequestContext.direct())

        assert "Failed to launch update script" in excinfo.value.outcome.output
        assert transport.sent[0][1] == "Deployment script failed"

    def test_unexpected_error_still_flushes_once(self, make_script, transport):
        config = make_config(make_script(0))
        deployer = Deployer(config, transport=transport, runner=ExplodingRunner(config.pull_script_path))

        with pytest.raises(RuntimeError):
            deployer.deploy(RequestContext.direct())

        assert deployer.state == DeployState.FAILED
        assert len(transport.sent) == 1
        assert transport.sent[0][1] == "Deployment script failed"
        assert "RuntimeError: runner blew up" in transport.sent[0][2]


class TestRejected:
    @pytest.mark.parametrize("address", ["8.8.8.8", "not-an-ip", ""])
    def test_unlisted_caller_is_rejected_before_running(self, transport, address):
        runner = SpyRunner()
        hook = CountingHook()
        deployer = Deployer(
            make_config("/opt/pull.sh", post_deploy_hook=hook), transport=transport, runner=runner
        )

        with pytest.raises(UnauthorizedCaller):
            deployer.deploy(
                RequestContext.networked(remote_addr=None, headers={"HTTP_X_FORWARDED_FOR": address})
            )

        assert deployer.state == DeployState.REJECTED
        assert runner.calls == []
        assert hook.calls == 0
        assert deployer.last_outcome is None
        assert len(transport.sent) == 1
        _, subject, body = transport.sent[0]
        assert subject == "Unauthorized deployment attempt"
        assert "\tWARNING\t" in body

    def test_unresolvable_address_fails_closed(self, make_script, transport):
        deployer = Deployer(make_config(make_script(0)), transport=transport)

        with pytest.raises(UnauthorizedCaller) as excinfo:
            deployer.deploy(RequestContext.networked(remote_addr=None))

        assert excinfo.value.address is None
        assert len(transport.sent) == 1


class TestHook:
    def test_hook_error_propagates_after_success_notification(self, make_script, transport):
        hook = CountingHook(error=ValueError("cache clear failed"))
        deployer = Deployer(make_config(make_script(0), post_deploy_hook=hook), transport=transport)

        with pytest.raises(HookError) as excinfo:
            deployer.deploy(RequestContext.direct())

        assert isinstance(excinfo.value.__cause__, ValueError)
        assert hook.calls == 1
        assert deployer.state == DeployState.SUCCEEDED
        assert deployer.last_outcome.success
        assert [s for _, s, _ in transport.sent] == ["Deployment successful"]


def test_each_deploy_gets_a_fresh_transcript(make_script, transport):
    deployer = Deployer(make_config(make_script(0)), transport=transport)

    deployer.deploy(RequestContext.direct())
    deployer.deploy(RequestContext.direct())

    assert len(transport.sent) == 2
    assert transport.sent[1][2].count("Attempting deployment...") == 1


def test_numeric_branch_from_yaml_reaches_script(make_script, transport, tmp_path):
    path = tmp_path / "autogitpull.yml"
    path.write_text(f"directory: /srv/site\nbranch: 2024\npull_script: {make_script(0)}\n")
    config = load_config(path)

    outcome = Deployer(config.deployment, transport=transport).deploy(RequestContext.direct())

    assert "-b 2024" in outcome.output
