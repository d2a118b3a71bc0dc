"""Serve command - run the webhook listener"""

import click

from autogitpull.base import BaseCommand


class ServeCommand(BaseCommand):
    """Serve the deployment webhook over HTTP."""

    def execute(self, host=None, port=None) -> None:
        """Execute serve command."""
        from autogitpull.webhook import start_server

        server = self.config.server
        self.show_header(
            title="Webhook listener",
            details={
                "Listening": f"{host or server.host}:{port or server.port}",
                "Path": server.path,
                "Directory": self.config.deployment.directory,
            },
        )
        start_server(self.config, host=host, port=port)


@click.command()
@click.option("-c", "--config", "config_path", help="Path to autogitpull.yml")
@click.option("--host", default=None, help="Interface to bind (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind (overrides config)")
def serve(config_path, host, port):
    """
    Listen for push notifications

    Starts an HTTP server that runs a deployment whenever an allow-listed
    hosting provider calls the configured path.

    Examples:
        autogitpull serve -c /etc/autogitpull/site.yml --port 9000
    """
    cmd = ServeCommand(config_path=config_path)
    cmd.run(host=host, port=port)
