"""
CLI commands for the history tables.

Usage:
    flask history init-db                                   # Create both tables
    flask history show u1                                   # Full combined history
    flask history show u1 --start-date 2024-01-01 --end-date 2024-01-31
"""
import click
from flask import current_app
from flask.cli import with_appcontext

from ..extensions import db
from ..services.history_merge import HistoryKind
from ..services.history_service import HistoryService
from ..utils.exceptions import LoyaltyHistoryError


@click.group('history')
def history_cli():
    """Loyalty history commands."""
    pass


@history_cli.command('init-db')
@with_appcontext
def init_db():
    """Create the histPoints and histtransactions tables."""
    from ..models import history  # noqa: F401  (registers the tables)
    db.create_all()
    click.echo('History tables created')


@history_cli.command('show')
@click.argument('user_id')
@click.option('--start-date', help='First day, YYYY-MM-DD')
@click.option('--end-date', help='Last day, YYYY-MM-DD')
@with_appcontext
def show_history(user_id, start_date, end_date):
    """Print a user's combined history, most recent first."""
    service = HistoryService(current_app.extensions['record_store'])

    try:
        if start_date or end_date:
            entries = service.get_history(user_id, start_date, end_date)
        else:
            entries = service.get_full_history(user_id)
    except LoyaltyHistoryError as e:
        raise click.ClickException(e.message)

    if not entries:
        click.echo(f'No history for user {user_id}')
        return

    for entry in entries:
        row = entry.to_dict()
        label = row['id'] if entry.kind is HistoryKind.POINT else row['description']
        click.echo(f"{row['date']}  {row['kind']:<11}  {row['points']:>10}  {label}")

    click.echo(f'\n{len(entries)} entries')


def init_app(app):
    """Register history commands."""
    app.cli.add_command(history_cli)
