"""``flask create-admin`` and ``flask clear-db``."""

import click
from flask.cli import with_appcontext

from ambika.auth.accounts import clear_business_data, ensure_default_admin


@click.command('create-admin')
@with_appcontext
def create_admin_cli() -> None:
    """Create the default admin user from configuration."""
    user, created = ensure_default_admin()
    if created:
        click.echo(f'Admin user {user.username} created')
    else:
        click.echo(f'Admin user {user.username} already exists')


@click.command('clear-db')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@with_appcontext
def clear_db_cli(yes: bool) -> None:
    """Delete all business data, keeping admin users."""
    if not yes:
        click.confirm('This deletes every order, estimate and product. Continue?', abort=True)
    result = clear_business_data()
    for table, count in result['deleted'].items():
        click.echo(f'{table}: {count} deleted')
    click.echo(f"{result['preserved_admins']} admin user(s) kept")
