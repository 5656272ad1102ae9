import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from .config import get_settings
from .engine import TagEngine
from .errors import TagggError
from .logging_config import setup_logging

console = Console()

EMPTY_ARG = "-"


def parse_arg(arg: Optional[str]):
    """
    Turn a command-line role into a specifier.
    
    "-" (or nothing) is the empty resource, "#<n>" a resource id;
    anything else goes through the specifier grammar as-is.
    """
    if arg is None or arg == EMPTY_ARG:
        return None
    if arg.startswith("#") and arg[1:].isdigit():
        return int(arg[1:])
    return arg


def get_engine(ctx: click.Context) -> TagEngine:
    settings = get_settings()
    db_url = ctx.obj.get("db_url") if ctx.obj else None
    if db_url:
        settings = settings.model_copy(
            update={"database": settings.database.model_copy(update={"url": db_url})}
        )
    tags = TagEngine.from_settings(settings)
    ctx.call_on_close(tags.close)
    return tags


def fail(message: str) -> None:
    console.print(f"✗ {message}", style="red")
    sys.exit(2)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.option('--db-url', default=None, help='Database URL (overrides TAGGG_DB_URL)')
@click.pass_context
def cli(ctx: click.Context, verbose: bool, db_url: Optional[str]):
    """Taggg CLI - quad-style metadata tagging"""
    ctx.ensure_object(dict)
    ctx.obj["db_url"] = db_url
    setup_logging("DEBUG" if verbose else get_settings().log_level)


@cli.command()
@click.pass_context
def init(ctx: click.Context):
    """Create tag tables and reserved resources"""
    try:
        tags = get_engine(ctx)
        tags.init()
        console.print(
            f"✓ Tables '{tags.tables.resources.name}' and '{tags.tables.relations.name}' ready",
            style="green"
        )
    except (TagggError, SQLAlchemyError) as e:
        fail(f"Init failed: {e}")


@cli.command()
@click.option('--confirm', is_flag=True, help='Skip confirmation prompt')
@click.pass_context
def destroy(ctx: click.Context, confirm: bool):
    """Drop tag tables and ALL their data"""
    if not confirm:
        click.confirm("⚠️  Drop tag tables and ALL tag data?", abort=True)
    try:
        tags = get_engine(ctx)
        tags.destroy()
        console.print("✓ Tag tables dropped", style="green")
    except (TagggError, SQLAlchemyError) as e:
        fail(f"Destroy failed: {e}")


@cli.command()
@click.argument('subject')
@click.argument('predicate', required=False)
@click.argument('object', required=False)
@click.argument('creator', required=False)
@click.pass_context
def write(ctx: click.Context, subject, predicate, object, creator):
    """Create a tag (missing resources are created)"""
    try:
        tags = get_engine(ctx)
        tags.write(parse_arg(subject), parse_arg(predicate), parse_arg(object), parse_arg(creator))
        console.print("✓ Tag written", style="green")
    except (TagggError, SQLAlchemyError) as e:
        fail(f"Write failed: {e}")


@cli.command()
@click.argument('subject')
@click.argument('predicate', required=False)
@click.argument('object', required=False)
@click.argument('creator', required=False)
@click.pass_context
def erase(ctx: click.Context, subject, predicate, object, creator):
    """Remove a tag"""
    try:
        tags = get_engine(ctx)
        tags.erase(parse_arg(subject), parse_arg(predicate), parse_arg(object), parse_arg(creator))
        console.print("✓ Tag erased", style="green")
    except (TagggError, SQLAlchemyError) as e:
        fail(f"Erase failed: {e}")


@cli.command()
@click.argument('subject')
@click.argument('predicate', required=False)
@click.argument('object', required=False)
@click.argument('creator', required=False)
@click.pass_context
def exists(ctx: click.Context, subject, predicate, object, creator):
    """Check whether a tag exists (exit code 0 if it does, 1 if not)"""
    try:
        tags = get_engine(ctx)
        found = tags.exists(
            parse_arg(subject), parse_arg(predicate), parse_arg(object), parse_arg(creator)
        )
    except (TagggError, SQLAlchemyError) as e:
        fail(f"Lookup failed: {e}")
        return
    
    if found:
        console.print("✓ Tag exists", style="green")
    else:
        console.print("Tag not found", style="yellow")
        sys.exit(1)


@cli.command()
@click.argument('spec')
@click.pass_context
def show(ctx: click.Context, spec: str):
    """Look up a single resource (never creates it)"""
    try:
        tags = get_engine(ctx)
        lookup = tags.lookup(parse_arg(spec))
    except (TagggError, SQLAlchemyError) as e:
        fail(f"Lookup failed: {e}")
        return
    
    if not lookup:
        console.print(f"No resource matches '{spec}'", style="yellow")
        sys.exit(1)
    
    console.print(_resource_table([lookup.resource], title=f"Resource '{spec}'"))


@cli.command()
@click.option('--filter', 'filters', multiple=True, help='column=value (repeatable)')
@click.option('--order', 'orders', multiple=True, help='column[:desc] (repeatable)')
@click.option('--limit', default=None, type=int, help='Max resources to show')
@click.option('--offset', default=None, type=int, help='Resources to skip')
@click.pass_context
def fetch(ctx: click.Context, filters, orders, limit, offset):
    """List resources"""
    try:
        parsed_filters = {}
        for item in filters:
            column, sep, value = item.partition("=")
            if not sep:
                fail(f"Filter must look like column=value, got '{item}'")
            parsed_filters[column] = int(value) if column in ("id", "class") and value.isdigit() else value
        
        parsed_orders = []
        for item in orders:
            column, _, direction = item.partition(":")
            parsed_orders.append((column, direction or "asc"))
        
        tags = get_engine(ctx)
        resources = tags.fetch(
            filters=parsed_filters or None,
            orders=parsed_orders or None,
            limit=limit,
            offset=offset
        )
    except (TagggError, SQLAlchemyError) as e:
        fail(f"Fetch failed: {e}")
        return
    
    if not resources:
        console.print("No resources found", style="yellow")
        return
    
    console.print(_resource_table(resources, title="Resources"))
    console.print(f"\nShowing {len(resources)} resource(s)", style="dim")


@cli.command()
def info():
    """Show configuration"""
    settings = get_settings()
    
    console.print("\n📊 Taggg Info\n", style="bold")
    
    console.print("🗄️  Database:", style="bold cyan")
    console.print(f"  URL: {settings.database.url}")
    console.print(f"  Resource table: {settings.database.resource_table}")
    console.print(f"  Relation table: {settings.database.relation_table}")
    
    console.print("\n⚙️  Behaviour:", style="bold cyan")
    console.print(f"  Re-fetch on insert conflict: {settings.refetch_on_conflict}")
    console.print(f"  Fetch limit/offset: {settings.fetch.limit}/{settings.fetch.offset}")
    console.print(f"  Log level: {settings.log_level}")
    console.print()


def _resource_table(resources, title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("URI")
    table.add_column("Class", justify="right")
    table.add_column("Value", style="green")
    table.add_column("Content", style="dim")
    
    for res in resources:
        table.add_row(
            str(res.id),
            res.uri or "",
            "" if res.class_ is None else str(res.class_),
            res.value or "",
            (res.content or "")[:60]
        )
    return table


if __name__ == '__main__':
    cli()
