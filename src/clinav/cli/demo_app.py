"""A small click application to try the picker on.

Commands only print what they would do.
"""

import click

from clinav.catalog.click_source import Duration


@click.group(name="shipyard")
@click.option("--verbose", "-v", is_flag=True, help="Print more detail.")
@click.option("--region", default="eu-west", show_default=True, help="Cloud region.")
@click.pass_context
def app(ctx, verbose, region):
    """Ship services to the fleet."""
    ctx.ensure_object(dict)
    ctx.obj.update(verbose=verbose, region=region)


@app.command()
@click.argument("service")
@click.option("--env", "-e", type=click.Choice(["dev", "staging", "prod"]), default="dev", show_default=True,
              help="Target environment.")
@click.option("--replicas", type=int, default=1, show_default=True, help="Number of instances.")
@click.option("--timeout", type=Duration(), default="5m", show_default=True, help="Rollout timeout.")
@click.option("--canary/--no-canary", default=False, help="Route a slice of traffic first.")
@click.pass_obj
def deploy(obj, service, env, replicas, timeout, canary):
    """Deploy a service."""
    click.echo(
        f"Deploying {service} to {env} in {obj['region']} "
        f"({replicas} replicas, timeout {timeout}, canary={canary})"
    )


@app.command()
@click.option("--all", "show_all", is_flag=True, help="Include stopped services.")
def status(show_all):
    """Show service status."""
    click.echo("api: running\nworker: running" + ("\nlegacy: stopped" if show_all else ""))


@app.group()
def db():
    """Database maintenance."""


@db.command()
@click.option("--target", help="Migrate to this revision (default: latest).")
@click.option("--dry-run", is_flag=True, help="Only print the SQL.")
def migrate(target, dry_run):
    """Apply database migrations."""
    click.echo(f"Migrating to {target or 'latest'}{' (dry run)' if dry_run else ''}")


@db.command()
@click.option("--output", "-o", required=True, help="Backup file.")
@click.option("--compress/--no-compress", default=True, help="Gzip the backup.")
def backup(output, compress):
    """Back up the database."""
    click.echo(f"Backing up to {output}{' (compressed)' if compress else ''}")


@app.group(invoke_without_command=True)
@click.pass_context
def logs(ctx):
    """Show logs; pick a subcommand to filter."""
    if ctx.invoked_subcommand is None:
        click.echo("Showing all logs")


@logs.command()
@click.argument("service")
@click.option("--since", type=Duration(), default="1h", show_default=True, help="How far back.")
def tail(service, since):
    """Follow one service's log."""
    click.echo(f"Tailing {service} since {since}")
