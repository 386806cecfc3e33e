"""cachemigrate CLI tool."""

import json
import logging
import sys
from pathlib import Path

import click

from cachemigrate.cache.loader import CacheLoader
from cachemigrate.core.settings import CacheMigrateSettings
from cachemigrate.core.version import Version
from cachemigrate.migrations.registry import APP_MIGRATIONS
from cachemigrate.migrations.runner import LookupMode, MigrationRunner


@click.group()
@click.option("--log-level", default=None, help="Logging level (default from settings)")
@click.pass_context
def cli(ctx, log_level):
    """cachemigrate CLI - Inspect and migrate versioned application caches."""
    settings = CacheMigrateSettings()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


@cli.command()
def versions():
    """List the registered migration chain."""
    click.echo(f"{len(APP_MIGRATIONS)} migrations, latest {APP_MIGRATIONS.latest}\n")
    for step in APP_MIGRATIONS:
        line = f"  {step.source} -> {step.target}"
        if step.description:
            line += f"  ({step.description})"
        click.echo(line)


@cli.command()
@click.argument("version")
def check(version):
    """Parse VERSION and show its successor candidates."""
    parsed = Version.parse(version)
    if parsed.is_err():
        click.echo(f"❌ {parsed.reason}", err=True)
        sys.exit(1)

    v = parsed.value
    click.echo(f"✅ {v}")
    click.echo("Successors: " + ", ".join(str(s) for s in v.successors()))
    if v in APP_MIGRATIONS:
        click.echo(f"Registered step: {APP_MIGRATIONS.get(v)}")
    else:
        click.echo("No step registered for this version")


@cli.command()
@click.argument("cache_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--lookup",
    type=click.Choice([mode.value for mode in LookupMode]),
    default=None,
    help="Step lookup mode (default from settings)",
)
@click.option("--output", type=click.Path(dir_okay=False), help="Write the migrated cache here")
@click.pass_obj
def migrate(settings, cache_file, lookup, output):
    """Migrate a JSON cache file to the latest version.

    Examples:
        # Print the migrated cache
        cachemigrate migrate cache.json

        # Write it to a new file, allowing successor lookup
        cachemigrate migrate cache.json --lookup successor --output new.json
    """
    try:
        blob = json.loads(Path(cache_file).read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        click.echo(f"❌ {cache_file} is not valid JSON: {e}", err=True)
        sys.exit(1)

    runner = MigrationRunner(APP_MIGRATIONS, lookup=lookup or settings.lookup_mode)
    result = runner.run(blob)
    if result.is_err():
        click.echo(f"❌ {result.reason}", err=True)
        sys.exit(1)

    outcome = result.value
    for step in outcome.applied:
        click.echo(f"  applied {step}", err=True)
    if not outcome.complete:
        click.echo(
            f"⚠️  Stalled at {outcome.version} (latest is {outcome.latest})",
            err=True,
        )

    rendered = json.dumps(outcome.blob, indent=2)
    if output:
        Path(output).write_text(rendered + "\n", encoding="utf-8")
        click.echo(f"✅ Migrated cache written to {output}", err=True)
    else:
        click.echo(rendered)


@cli.command()
@click.option("--store", "store_path", type=click.Path(dir_okay=False), help="Store file")
@click.option("--key", default=None, help="Cache key in the store")
@click.pass_obj
def show(settings, store_path, key):
    """Load the cache from a store file, migrating it as the app would."""
    overrides = {}
    if store_path:
        overrides["store_path"] = Path(store_path)
    if key:
        overrides["cache_key"] = key
    if overrides:
        settings = settings.model_copy(update=overrides)

    loader = CacheLoader.from_settings(settings)
    result = loader.load_result()
    if result.is_err():
        click.echo(f"No usable cache: {result.reason}")
        return
    click.echo(json.dumps(result.value, indent=2))


def main():
    cli()


if __name__ == "__main__":
    main()
