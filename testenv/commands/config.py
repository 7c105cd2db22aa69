"""Config command implementation using the config SDK."""

import click
from dataclasses import fields
from rich.console import Console
from testenv.config_sdk import get_config_manager, GuardSettings

console = Console()

@click.group()
def config():
    """Manage persisted guard settings."""
    pass

@config.command(name="get")
@click.argument("key", required=False)
@click.pass_context
def get_cmd(ctx, key):
    """Show one setting, or all of them."""
    config_mgr = get_config_manager()
    valid_keys = [f.name for f in fields(GuardSettings)]

    if key:
        if key not in valid_keys:
            console.print(f"[red]Error: Unknown setting '{key}'[/red]")
            ctx.exit(1)
        console.print(f"{key} = {config_mgr.get(key)}")
        return

    settings = config_mgr.load()
    console.print("Current settings:")
    for name in valid_keys:
        console.print(f"  {name} = {getattr(settings, name)}")

@config.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_cmd(ctx, key, value):
    """Persist a setting."""
    try:
        get_config_manager().set(key, value)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("\nValid settings:")
        for field in fields(GuardSettings):
            console.print(f"  {field.name}")
        ctx.exit(1)
    console.print(f"Set {key} = {value}")

@config.command(name="reset")
def reset_cmd():
    """Restore default settings."""
    get_config_manager().reset()
    console.print("[green]✓ Settings restored to defaults[/green]")
