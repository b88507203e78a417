"""
Command line interface for the budget dashboard.
"""

import asyncio
from typing import Optional

import click

from .api.result import Result
from .config import ConfigManager
from .container import Container
from .models.category import CATEGORIES
from .models.upload import AccountFormat
from .services.aggregation_store import AggregationStore
from .utils.money import format_currency


def build_container() -> Container:
    return Container.from_config_manager()


def _store_from_context(ctx: click.Context) -> AggregationStore:
    container: Container = ctx.obj
    gate = container.session_gate()
    store = container.aggregation_store()
    if not gate.is_authenticated:
        click.echo("Not signed in. Run 'budget-dashboard login TOKEN' first.", err=True)
        ctx.exit(1)
    return store


def _print_notices(store: AggregationStore) -> bool:
    """Echo pending notices; True if any of them reports a failure"""
    failed = False
    for notice in store.drain_notices():
        is_failure = notice.level in ('warning', 'error')
        failed = failed or is_failure
        click.echo(f"[{notice.level}] {notice.message}", err=is_failure)
    return failed


async def _load(store: AggregationStore, month: Optional[str]) -> None:
    if month:
        await store.select_month(month)
    await store.refresh_all()


def _finish(ctx: click.Context, store: AggregationStore, result: Optional[Result] = None) -> None:
    failed = _print_notices(store)
    if failed or (result is not None and not result.ok):
        ctx.exit(1)


@click.group()
@click.pass_context
def cli(ctx: click.Context):
    """Budget dashboard CLI"""
    ConfigManager().setup_logging()
    container = build_container()
    container.session_gate().restore_session()
    ctx.obj = container


@cli.command()
@click.argument('token')
@click.pass_context
def login(ctx: click.Context, token: str):
    """Store an access token"""
    try:
        ctx.obj.session_gate().login(token)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='TOKEN')
    click.echo("Logged in")


@cli.command()
@click.pass_context
def logout(ctx: click.Context):
    """Forget the stored access token"""
    ctx.obj.session_gate().logout()
    click.echo("Logged out")


@cli.command()
@click.option('--month', help='Month to show (YYYY-MM); defaults to the newest month with data')
@click.pass_context
def dashboard(ctx: click.Context, month: Optional[str]):
    """Show spending per category for a month"""
    store = _store_from_context(ctx)
    asyncio.run(_load(store, month))

    click.echo(f"Month: {store.current_month}")
    statuses = store.category_statuses
    for category, entry in store.summary.items():
        click.echo(
            f"  {category:<22} {format_currency(entry.spent):>12} / {format_currency(entry.budget):>12}"
            f"  {entry.percentage_used:>6.1f}%  {statuses[category].value}"
        )

    totals = store.totals
    click.echo(f"Total budget: {format_currency(totals.total_budget)}")
    click.echo(f"Total spent:  {format_currency(totals.total_spent)}")
    click.echo(f"Remaining:    {format_currency(totals.remaining)}")
    click.echo(store.budget_usage.message)
    _finish(ctx, store)


@cli.command()
@click.option('--month', help='Month to list (YYYY-MM)')
@click.pass_context
def transactions(ctx: click.Context, month: Optional[str]):
    """List the transactions of a month"""
    store = _store_from_context(ctx)
    asyncio.run(_load(store, month))

    click.echo(f"Transactions for {store.current_month}")
    for tx in store.transactions:
        click.echo(
            f"  {tx.id:>6}  {tx.date:<12} {tx.description[:40]:<40} {tx.category:<22}"
            f" {format_currency(tx.amount):>12}  {tx.account_type}"
        )
    _finish(ctx, store)


@cli.command('set-category')
@click.argument('transaction_id', type=int)
@click.argument('category', type=click.Choice(CATEGORIES))
@click.option('--month', help='Month the transaction belongs to (YYYY-MM)')
@click.pass_context
def set_category(ctx: click.Context, transaction_id: int, category: str, month: Optional[str]):
    """Move a transaction to another category"""
    store = _store_from_context(ctx)

    async def run() -> Result:
        await _load(store, month)
        return await store.edit_transaction_category(transaction_id, category)

    result = asyncio.run(run())
    if result.ok:
        click.echo(f"Transaction {transaction_id} moved to {category}")
    _finish(ctx, store, result)


@cli.command('set-budget')
@click.argument("category", type=click.Choice(CATEGORIES))
@click.argument("amount")
@click.pass_context
def set_budget(ctx: click.Context, category: str, amount: str):
    """Change the budget limit of one category"""
    store = _store_from_context(ctx)

    async def run() -> Optional[Result]:
        await store.refresh_all()
        if not store.budgets:
            # Confirmed budgets unavailable
            return None
        store.begin_budget_edit()
        store.update_budget_draft(category, amount)
        return await store.commit_budget_edit()

    try:
        result = asyncio.run(run())
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='AMOUNT')

    if result is None:
        _print_notices(store)
        click.echo("Could not load the current budgets; nothing was saved.", err=True)
        ctx.exit(1)

    if result.ok:
        click.echo("Budgets updated successfully")
        click.echo(store.budget_usage.message)
    _finish(ctx, store, result)


@cli.command()
@click.argument('file', type=click.File('rb'))
@click.option('--format', 'account_format', type=click.Choice([f.value for f in AccountFormat]),
              default=AccountFormat.TD.value, show_default=True, help='Bank statement format')
@click.pass_context
def upload(ctx: click.Context, file, account_format: str):
    """Import a bank statement CSV"""
    store = _store_from_context(ctx)
    result = asyncio.run(store.upload_statement(file, AccountFormat(account_format)))
    _finish(ctx, store, result)


if __name__ == "__main__":
    cli()
