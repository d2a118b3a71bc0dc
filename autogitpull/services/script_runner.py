"""Service for running the external update script."""

import subprocess
from typing import List, Optional

from autogitpull.constants import LAUNCH_FAILURE_EXIT_CODE, RUN_AS_COMMAND
from autogitpull.models.results import DeploymentOutcome


class ScriptRunner:
    """Runs the update script and captures its result."""

    def __init__(self, script_path: str, deploy_user: Optional[str] = None):
        """
        Initialize script runner.

        Args:
            script_path: Path to the update script
            deploy_user: Account to run the script as (via sudo), if any
        """
        self.script_path = script_path
        self.deploy_user = deploy_user

    def build_command(self, branch: str, directory: str, remote: str) -> List[str]:
        """
        Build the argument vector for the update script.

        Every value is a separate argument; nothing passes through a shell.
        """
        cmd = [
            str(self.script_path),
            "-b",
            branch,
            "-d",
            directory,
            "-r",
            remote,
        ]
        if self.deploy_user:
            cmd = [*RUN_AS_COMMAND, self.deploy_user] + cmd
        return cmd

    def run(self, branch: str, directory: str, remote: str) -> DeploymentOutcome:
        """
        Run the update script and wait for it to exit.

        Args:
            branch: Branch to pull
            directory: Working tree to update
            remote: Remote to pull from

        Returns:
            DeploymentOutcome with exit code and combined output
        """
        cmd = self.build_command(branch, directory, remote)

        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as e:
            return DeploymentOutcome(
                exit_code=LAUNCH_FAILURE_EXIT_CODE,
                output=f"Failed to launch update script: {e}",
                command=tuple(cmd),
            )

        return DeploymentOutcome(
            exit_code=result.returncode,
            output=result.stdout or "",
            command=tuple(cmd),
        )
