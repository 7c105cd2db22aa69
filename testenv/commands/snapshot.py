import json
import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from testenv.config_sdk import get_config_manager
from testenv.guard import EnvironmentGuard, GuardError
from testenv.prefs import BackingStoreError

console = Console()

def build_guard(ctx) -> EnvironmentGuard:
    """Build a guard from the saved settings, exiting on startup errors."""
    try:
        return EnvironmentGuard(settings=get_config_manager().load())
    except GuardError as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)

@click.command(name="snapshot")
@click.option("--json", "as_json", is_flag=True, help="Print the baseline as JSON.")
@click.pass_context
def snapshot_cmd(ctx, as_json):
    """Print the baseline a reset would restore."""
    guard = build_guard(ctx)
    if as_json:
        click.echo(json.dumps(dict(guard.baseline), indent=2, sort_keys=True))
        return

    table = Table(title=f"Baseline ({len(guard.baseline)} properties)")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for key in sorted(guard.baseline):
        table.add_row(escape(key), escape(guard.baseline[key]))
    console.print(table)

@click.command(name="check")
@click.pass_context
def check_cmd(ctx):
    """Validate required paths and directories."""
    guard = build_guard(ctx)
    console.print("\n[bold underline]ENVIRONMENT CHECK[/bold underline]")
    console.print(f"  [green]✓ temp_dir:[/green]    {guard.paths.temp_dir}")
    console.print(f"  [green]✓ user_home:[/green]   {guard.paths.user_home}")
    console.print(f"  [green]✓ working_dir:[/green] {guard.paths.working_dir}")

    if guard.profile.runtime_home_writable:
        console.print("  [green]✓ Runtime home is writable.[/green]")
    else:
        redirected = guard.baseline.get(guard.profile.runtime_home_key)
        console.print(f"  [yellow]! Runtime home is read-only; redirected to {redirected}[/yellow]")

    for path in guard.created_dirs:
        console.print(f"  [yellow]+ Created {path}[/yellow]")

@click.command(name="reset")
@click.confirmation_option(prompt="This clears the persisted preference store. Continue?")
@click.pass_context
def reset_cmd(ctx):
    """Run one reset cycle (purges system and user preferences)."""
    guard = build_guard(ctx)
    try:
        guard.reset()
    except BackingStoreError as e:
        console.print(f"[red]Error: Preference store reset failed: {e}[/red]")
        ctx.exit(1)
    console.print("[bold green]✓ Environment reset to baseline[/bold green]")
