"""
Deployer

Authorizes a trigger, runs the update script and reports the outcome.

Every call to deploy() ends with exactly one notification flush, whichever way
it ends. Errors are raised to the caller after that flush.
"""

import json
import shlex
from typing import Optional

from autogitpull.constants import SUBJECT_FAILURE, SUBJECT_SUCCESS, SUBJECT_UNAUTHORIZED
from autogitpull.exceptions import (
    AutoGitPullError,
    HookError,
    ScriptExecutionError,
    UnauthorizedCaller,
)
from autogitpull.logger import DeployLogger, FileLogSink, LogSink
from autogitpull.models.config import DeploymentConfig
from autogitpull.models.request import RequestContext
from autogitpull.models.results import DeploymentOutcome, DeployState, NotificationMessage
from autogitpull.services.address_authorizer import AddressAuthorizer
from autogitpull.services.notification_service import MailTransport, NotificationSink
from autogitpull.services.script_runner import ScriptRunner


class Deployer:
    """
    Orchestrates one deployment per deploy() call.

    Flow:
    - Direct triggers are trusted
    - Networked triggers must come from an allow-listed address
    - The update script runs with the configured branch/directory/remote
    - The post-deploy hook runs once after a successful deployment
    """

    def __init__(
        self,
        config: DeploymentConfig,
        log_sink: Optional[LogSink] = None,
        transport: Optional[MailTransport] = None,
        runner: Optional[ScriptRunner] = None,
        verbose: bool = False,
    ):
        """
        Initialize deployer.

        Args:
            config: Deployment configuration
            log_sink: Where log lines go (defaults to a file in config.log_directory)
            transport: Mail transport for notifications
            runner: Update script runner
            verbose: Echo the transcript to the console
        """
        self.config = config
        self.authorizer = AddressAuthorizer(config.allowed_ranges)
        self.runner = runner or ScriptRunner(config.pull_script_path, config.deploy_user)
        self.transport = transport
        self.verbose = verbose

        if log_sink is None and config.log_directory:
            log_sink = FileLogSink(config.log_directory)
        self.log_sink = log_sink

        self.state = DeployState.IDLE
        self.last_outcome: Optional[DeploymentOutcome] = None
        self.last_notification: Optional[NotificationMessage] = None

    def deploy(self, context: RequestContext) -> DeploymentOutcome:
        """
        Run one deployment.

        Args:
            context: The invocation being served

        Returns:
            DeploymentOutcome of the update script

        Raises:
            UnauthorizedCaller: networked caller not in the allow-list
            ScriptExecutionError: update script failed
            HookError: post-deploy hook failed after a successful deployment
        """
        self.state = DeployState.IDLE
        self.last_outcome = None
        self.last_notification = None

        notifier = NotificationSink(self.config.notify_emails, self.transport)
        logger = DeployLogger(
            sink=self.log_sink,
            notifier=notifier,
            date_format=self.config.date_format,
            verbose=self.verbose,
        )

        try:
            logger.log("Attempting deployment...")

            if context.is_direct:
                logger.log("Running from command line")
            else:
                self._authorize(context, logger, notifier)

            outcome = self._run_script(logger, notifier)
        except AutoGitPullError:
            raise
        except Exception as e:
            if not notifier.flushed:
                self.state = DeployState.FAILED
                try:
                    logger.log_error(f"{type(e).__name__}: {e}")
                finally:
                    self._finish(notifier, SUBJECT_FAILURE)
            raise

        self._run_hook()
        return outcome

    def _authorize(
        self, context: RequestContext, logger: DeployLogger, notifier: NotificationSink
    ) -> None:
        """Reject networked callers outside the allow-list."""
        self.state = DeployState.AUTHORIZING

        address = context.resolve_caller_address()
        logger.log(f"IP is {address}")
        logger.log(json.dumps(context.audit_headers(), indent=2, sort_keys=True))

        body = context.describe_body()
        if body is not None:
            logger.log(body, "POST")

        if not self.authorizer.is_permitted(address):
            self.state = DeployState.REJECTED
            error = UnauthorizedCaller(address)
            logger.warning(error.message)
            self._finish(notifier, SUBJECT_UNAUTHORIZED)
            raise error

    def _run_script(self, logger: DeployLogger, notifier: NotificationSink) -> DeploymentOutcome:
        """Run the update script and report its result."""
        self.state = DeployState.RUNNING

        cmd = self.runner.build_command(
            self.config.branch, self.config.directory, self.config.remote
        )
        logger.log_command(shlex.join(cmd))

        outcome = self.runner.run(self.config.branch, self.config.directory, self.config.remote)
        self.last_outcome = outcome

        if not outcome.success:
            self.state = DeployState.FAILED
            error = ScriptExecutionError(outcome)
            logger.log_error(error.message, context=outcome.output or None)
            self._finish(notifier, SUBJECT_FAILURE)
            raise error

        logger.log_output(outcome.output, "Running deploy shell script...")
        logger.success("Deployment successful.")
        self.state = DeployState.SUCCEEDED
        self._finish(notifier, SUBJECT_SUCCESS)
        return outcome

    def _run_hook(self) -> None:
        """Call the post-deploy hook once; its failure reaches the caller."""
        hook = self.config.post_deploy_hook
        if hook is None:
            return
        try:
            hook()
        except Exception as e:
            raise HookError(
                f"Post-deploy hook failed: {e}",
                context="The deployment itself succeeded",
            ) from e

    def _finish(self, notifier: NotificationSink, subject: str) -> None:
        self.last_notification = notifier.flush(subject)
