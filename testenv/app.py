import click
from testenv.commands.config import config
from testenv.commands.prefs import prefs
from testenv.commands.snapshot import snapshot_cmd, check_cmd, reset_cmd

@click.group()
def cli():
    """Snapshot and restore process-wide state between tests."""
    pass

cli.add_command(snapshot_cmd)
cli.add_command(check_cmd)
cli.add_command(reset_cmd)
cli.add_command(prefs)
cli.add_command(config)

if __name__ == "__main__":
    cli()
