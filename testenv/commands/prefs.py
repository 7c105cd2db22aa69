import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree
from testenv.guard import reset_preferences
from testenv.hooks.factory import get_hooks
from testenv.prefs import BackingStoreError

console = Console()

SCOPES = ["user", "system"]

def _root(scope):
    roots = get_hooks().preferences
    return roots.system_root() if scope == "system" else roots.user_root()

def _add_branch(tree, node):
    for key in node.keys():
        tree.add(f"[cyan]{escape(key)}[/cyan] = {escape(node.get(key) or '')}")
    for name in node.children_names():
        _add_branch(tree.add(f"[bold]{escape(name)}/[/bold]"), node.node(name))

@click.group()
def prefs():
    """Inspect and edit the persisted preference store."""
    pass

@prefs.command(name="show")
@click.option("--scope", type=click.Choice(SCOPES), default="user", show_default=True)
@click.pass_context
def show_cmd(ctx, scope):
    """Print the preference tree of one scope."""
    try:
        root = _root(scope)
        tree = Tree(f"[bold]{scope} root[/bold]")
        _add_branch(tree, root)
    except BackingStoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)
    console.print(tree)

@prefs.command(name="get")
@click.argument("path")
@click.argument("key")
@click.option("--scope", type=click.Choice(SCOPES), default="user", show_default=True)
@click.pass_context
def get_cmd(ctx, path, key, scope):
    """Print the value stored under KEY at node PATH."""
    try:
        value = _root(scope).node(path).get(key)
    except (BackingStoreError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)
    console.print(f"{key} = {value if value is not None else '(not set)'}")

@prefs.command(name="put")
@click.argument("path")
@click.argument("key")
@click.argument("value")
@click.option("--scope", type=click.Choice(SCOPES), default="user", show_default=True)
@click.pass_context
def put_cmd(ctx, path, key, value, scope):
    """Store VALUE under KEY at node PATH and flush."""
    try:
        node = _root(scope).node(path)
        node.put(key, value)
        node.flush()
    except (BackingStoreError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)
    console.print(f"[green]✓ Set {path}:{key}[/green]")

@prefs.command(name="clear")
@click.option("--scope", type=click.Choice(SCOPES), default="user", show_default=True)
@click.confirmation_option(prompt="Remove every preference in this scope?")
@click.pass_context
def clear_cmd(ctx, scope):
    """Remove every node and entry of one scope."""
    try:
        reset_preferences(_root(scope))
    except BackingStoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)
    console.print(f"[green]✓ Cleared {scope} preferences[/green]")
