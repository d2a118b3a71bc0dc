"""Deploy command - trusted local deployment"""

import click

from autogitpull.base import BaseCommand
from autogitpull.deployer import Deployer
from autogitpull.exceptions import ScriptExecutionError
from autogitpull.models.request import RequestContext
from autogitpull.ui_components import show_output_panel


class DeployCommand(BaseCommand):
    """
    Run the update script from the command line.

    Command-line runs are always trusted, so the allow-list is not consulted.
    """

    def execute(self) -> None:
        """Execute deploy command."""
        deployment = self.config.deployment

        self.show_header(
            title="Deploy",
            details={
                "Directory": deployment.directory,
                "Branch": deployment.branch,
                "Remote": deployment.remote,
            },
        )

        deployer = Deployer(
            deployment,
            transport=self.config.build_transport(),
            verbose=self.verbose and not self.json_output,
        )

        try:
            outcome = deployer.deploy(RequestContext.direct())
        except ScriptExecutionError as e:
            if not self.json_output and not self.verbose:
                show_output_panel(
                    e.outcome.output,
                    title=f"Update script (exit {e.outcome.exit_code})",
                    success=False,
                    console=self.console,
                )
                self.print_error(e.message)
                raise SystemExit(1)
            raise

        if self.json_output:
            self.output_json(outcome.to_dict())
            return

        if not self.verbose:
            show_output_panel(outcome.output, title="Update script", success=True, console=self.console)
        self.print_success("Deployment successful")
        log_path = getattr(deployer.log_sink, "log_path", None)
        if log_path:
            self.print_dim(f"Logs saved to: {log_path}")


@click.command()
@click.option("-c", "--config", "config_path", help="Path to autogitpull.yml")
@click.option("--verbose", "-v", is_flag=True, help="Show the full deployment transcript")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def deploy(config_path, verbose, json_output):
    """
    Pull the configured branch now

    Runs the update script for the configured directory, branch and remote,
    then notifies the configured recipients.

    Examples:
        # Deploy using ./autogitpull.yml
        autogitpull deploy

        # Deploy with a specific config and the full transcript
        autogitpull deploy -c /etc/autogitpull/site.yml -v
    """
    cmd = DeployCommand(config_path=config_path, verbose=verbose, json_output=json_output)
    cmd.run()
