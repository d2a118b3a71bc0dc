"""Check-IP command - test an address against the allow-list"""

import click
from rich.table import Table

from autogitpull.base import BaseCommand
from autogitpull.services.address_authorizer import AddressAuthorizer


class CheckIpCommand(BaseCommand):
    """Report whether an address may trigger a deployment."""

    def execute(self, address: str) -> None:
        """Execute check-ip command."""
        authorizer = AddressAuthorizer(self.config.deployment.allowed_ranges)
        entry = authorizer.matching_entry(address)

        if self.json_output:
            self.output_json(
                {
                    "address": address,
                    "permitted": entry is not None,
                    "matched_range": str(entry) if entry else None,
                },
                exit_code=0 if entry else 1,
            )
            return

        table = Table(title="Allow-list", show_header=True, header_style="bold cyan")
        table.add_column("Range")
        table.add_column("Match", justify="center")
        for candidate in authorizer.allow_list:
            table.add_row(str(candidate), "[green]✓[/green]" if candidate == entry else "")
        self.console.print(table)

        if entry:
            self.print_success(f"{address} is permitted (matches {entry})")
        else:
            self.print_error(f"{address} is not permitted")
            raise SystemExit(1)


@click.command(name="check-ip")
@click.argument("address")
@click.option("-c", "--config", "config_path", help="Path to autogitpull.yml")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def check_ip(address, config_path, json_output):
    """
    Check whether ADDRESS may trigger a deployment

    Exits with status 1 when the address is not covered by the allow-list.

    Examples:
        autogitpull check-ip 192.30.252.1
    """
    cmd = CheckIpCommand(config_path=config_path, json_output=json_output)
    cmd.run(address=address)
