"""Flask CLI commands for the state database, classification and history."""
import csv
import click
from flask.cli import with_appcontext

from zakat_engine.constants import NEEDS_CLARIFICATION
from zakat_engine.db import get_db, init_db, get_db_path
from zakat_engine.data.currencies import get_currency_symbol
from zakat_engine.services.classifier import classify_line_item, classify_line_items, clarification_kind
from zakat_engine.services.errors import ValidationError
from zakat_engine.services.history import entries_by_year
from zakat_engine.services.state_store import load_history


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Initialize the SQLite database with schema."""
    init_db()
    click.echo(f'Initialized database at {get_db_path()}')


@click.command('classify')
@click.argument('name')
def classify_command(name):
    """Classify one balance-sheet line name."""
    result = classify_line_item(name)
    click.echo(f"{name}: {result['classification']}")
    if result['ruling']:
        click.echo(f"  Ruling: {result['ruling']}")
    if result['clarification_question']:
        kind = clarification_kind(result['clarification_question'])
        click.echo(f"  Question ({kind}): {result['clarification_question']}")


@click.command('classify-csv')
@click.argument('csv_path', type=click.Path(exists=True, dir_okay=False))
def classify_csv_command(csv_path):
    """Classify balance-sheet rows from a CSV file.

    CSV format: name,amount
    Example: Accounts Payable,2500
    """
    rows = read_line_items_csv(csv_path)
    try:
        items = classify_line_items(rows)
    except ValidationError as e:
        raise click.ClickException(str(e))

    for item in items:
        click.echo(f'{item.name},{item.amount:.2f},{item.classification}')
    pending = sum(1 for item in items if item.classification == NEEDS_CLARIFICATION)
    click.echo(f'Classified {len(items)} line items from {csv_path} ({pending} need clarification)')


def read_line_items_csv(csv_path: str) -> list[dict]:
    """Read name,amount rows. Blank amounts count as 0."""
    rows = []
    with open(csv_path, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames or 'name' not in reader.fieldnames:
            raise click.ClickException('CSV must have a header row with name and amount columns')
        for line_no, row in enumerate(reader, start=2):
            raw_amount = (row.get('amount') or '').strip().replace(',', '')
            try:
                amount = float(raw_amount) if raw_amount else 0.0
            except ValueError:
                raise click.ClickException(f'Line {line_no}: invalid amount {raw_amount!r}')
            rows.append({'name': (row.get('name') or '').strip(), 'amount': amount})
    return rows


@click.command('history-list')
@click.option('--year', type=int, default=None, help='Only show entries for this Gregorian year')
@with_appcontext
def history_list_command(year):
    """List recorded zakat calculations, newest first."""
    history = load_history(get_db())
    if year is not None:
        history = entries_by_year(history, year)
    if not history:
        click.echo('No history entries')
        return
    for entry in history:
        symbol = get_currency_symbol(entry.currency)
        paid = 'paid' if entry.paid else 'unpaid'
        click.echo(f'{entry.date[:10]}  {entry.label}  {entry.entity_type}  {symbol}{entry.zakat_due:.2f}  {paid}  {entry.id}')


def register_cli(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(init_db_command)
    app.cli.add_command(classify_command)
    app.cli.add_command(classify_csv_command)
    app.cli.add_command(history_list_command)
