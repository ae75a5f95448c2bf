"""Main CLI entry point for the agentgps command."""

import logging
from datetime import date, datetime
from typing import List, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..core.config import settings
from ..transactions import (
    CapStatus,
    ProcessedTransaction,
    TransactionExporter,
    cap_status,
    filter_transactions,
    process_transactions_for_coach,
    process_transactions_for_user,
    sort_transactions,
    summarize,
)
from ..transactions.loader import load_agents, load_profiles, load_transactions
from ..transactions.summary import SORTABLE_FIELDS

console = Console()

AS_OF = click.DateTime(formats=["%Y-%m-%d"])


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value else None


def _money(amount: float) -> str:
    return f"${amount:,.2f}"


def _fail(message: str):
    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


def _render_transactions(title: str, processed: List[ProcessedTransaction], show_agent: bool = False):
    table = Table(title=f"{title} ({len(processed)})")
    table.add_column("Accepted", style="dim")
    if show_agent:
        table.add_column("Agent", style="cyan")
    table.add_column("Address", max_width=30)
    table.add_column("Type")
    table.add_column("Sale Price", justify="right")
    table.add_column("GCI", justify="right", style="bold")
    table.add_column("Royalty", justify="right", style="red")
    table.add_column("Company $", justify="right", style="red")
    table.add_column("Net", justify="right", style="green")
    table.add_column("HST", justify="right", style="dim")

    for t in processed:
        row = [t.acceptance_date.isoformat()]
        if show_agent:
            row.append(getattr(t, "agent_name", ""))
        row += [
            t.address,
            t.type.value,
            _money(t.sale_price),
            _money(t.gci),
            _money(t.royalty_paid),
            _money(t.company_dollar_paid),
            _money(t.net_commission),
            _money(t.hst_on_gci),
        ]
        table.add_row(*row)

    console.print(table)

    summary = summarize(processed)
    console.print(Panel.fit(
        f"Transactions: [cyan]{summary.count}[/cyan]\n"
        f"Total GCI: [bold]{_money(summary.total_gci)}[/bold]\n"
        f"Net Commission: [green]{_money(summary.total_net)}[/green]\n"
        f"Company Dollar: [red]{_money(summary.total_company_dollar)}[/red]\n"
        f"Royalty: [red]{_money(summary.total_royalty)}[/red]",
        title="Totals"
    ))


def _render_cap_status(status: CapStatus):
    capped = "[green]Capped[/green]" if status.is_capped else "[yellow]Not capped[/yellow]"
    console.print(Panel.fit(
        f"Cap year: [cyan]{status.cap_year_start.isoformat()}[/cyan] to "
        f"[cyan]{status.cap_year_end.isoformat()}[/cyan]\n"
        f"Company dollar: {_money(status.company_dollar_paid)} / {_money(status.commission_cap)} "
        f"({_money(status.commission_remaining)} left)\n"
        f"Royalty: {_money(status.royalty_paid)} / {_money(status.royalty_fee_cap)} "
        f"({_money(status.royalty_remaining)} left)\n"
        f"Status: {capped}",
        title="Cap Progress"
    ))


def _export(processed: List[ProcessedTransaction], output: str, fmt: str):
    exporter = TransactionExporter()
    try:
        if fmt == "json":
            exporter.export_json(processed, output)
        else:
            exporter.export_csv(processed, output)
    except ValueError as e:
        _fail(str(e))
    console.print(f"[green]✓ Exported {len(processed)} transactions to {output}[/green]")


@click.group()
@click.version_option(version=__version__, prog_name="agentgps")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """AgentGPS - commission, royalty and cap tracking for brokerages.

    \b
    Quick Start:
      agentgps agent -t transactions.json -p profile.json
      agentgps coach -t transactions.json -p profiles.json -a agents.json
      agentgps export -t transactions.json -p profiles.json -a agents.json -o out.csv
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.option("--transactions", "-t", "transactions_path", type=click.Path(), required=True,
              help="JSON file of transactions")
@click.option("--profile", "-p", "profile_path", type=click.Path(),
              help="JSON file holding the agent's commission profile")
@click.option("--user", "-u", "user_id", help="Only process this agent's transactions")
@click.option("--as-of", type=AS_OF, help="Reference date for the cap year (YYYY-MM-DD)")
@click.option("--export", "export_path", help="Also write the results to this CSV file")
def agent(transactions_path: str, profile_path: Optional[str], user_id: Optional[str],
          as_of: Optional[datetime], export_path: Optional[str]):
    """Show one agent's transactions with royalty, company dollar and net."""
    try:
        transactions = load_transactions(transactions_path)
        profiles = load_profiles(profile_path) if profile_path else []
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    if user_id:
        transactions = [t for t in transactions if t.user_id == user_id]
    else:
        user_ids = sorted({t.user_id for t in transactions})
        if len(user_ids) > 1:
            _fail(f"Transactions belong to several agents ({', '.join(user_ids)}); "
                  f"pass --user to pick one")
        user_id = user_ids[0] if user_ids else None
    profile = next((p for p in profiles if p.id == user_id), None)

    today = _as_date(as_of)
    processed = process_transactions_for_user(
        transactions, profile, today=today, hst_rate=settings.hst_rate
    )

    if not processed:
        console.print("[dim]No transactions logged.[/dim]")
        return

    _render_transactions("My Transactions", processed)
    if profile:
        _render_cap_status(cap_status(transactions, profile, today=today))
    else:
        console.print("[yellow]No commission profile: figures shown fully net.[/yellow]")

    if export_path:
        _export(processed, export_path, "csv")


@cli.command()
@click.option("--transactions", "-t", "transactions_path", type=click.Path(), required=True,
              help="JSON file of transactions")
@click.option("--profiles", "-p", "profiles_path", type=click.Path(), required=True,
              help="JSON file of commission profiles")
@click.option("--agents", "-a", "agents_path", type=click.Path(), required=True,
              help="JSON file of agents")
@click.option("--as-of", type=AS_OF, help="Reference date for the cap year (YYYY-MM-DD)")
@click.option("--filter", "query", default="", help="Match on agent name or address")
@click.option("--sort-by", type=click.Choice(SORTABLE_FIELDS), default="acceptance_date")
@click.option("--ascending", is_flag=True, help="Sort ascending instead of descending")
@click.option("--export", "export_path", help="Also write the results to this CSV file")
def coach(transactions_path: str, profiles_path: str, agents_path: str,
          as_of: Optional[datetime], query: str, sort_by: str, ascending: bool,
          export_path: Optional[str]):
    """Show transactions for every agent, with per-agent caps."""
    try:
        transactions = load_transactions(transactions_path)
        profiles = load_profiles(profiles_path)
        agents = load_agents(agents_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    processed = process_transactions_for_coach(
        transactions,
        profiles,
        agents,
        today=_as_date(as_of),
        hst_rate=settings.hst_rate,
        unknown_agent=settings.unknown_agent_name,
    )
    visible = sort_transactions(filter_transactions(processed, query), sort_by, not ascending)

    if not visible:
        console.print("[dim]No transactions found for your agents.[/dim]")
        return

    _render_transactions("Agent Transactions", visible, show_agent=True)

    if export_path:
        _export(visible, export_path, "csv")


@cli.command()
@click.option("--transactions", "-t", "transactions_path", type=click.Path(), required=True,
              help="JSON file of transactions")
@click.option("--profiles", "-p", "profiles_path", type=click.Path(), required=True,
              help="JSON file of commission profiles")
@click.option("--agents", "-a", "agents_path", type=click.Path(), required=True,
              help="JSON file of agents")
@click.option("--output", "-o", required=True, help="Output file path")
@click.option("--format", "fmt", type=click.Choice(["csv", "json"]), default="csv")
@click.option("--as-of", type=AS_OF, help="Reference date for the cap year (YYYY-MM-DD)")
def export(transactions_path: str, profiles_path: str, agents_path: str, output: str,
           fmt: str, as_of: Optional[datetime]):
    """Export processed transactions for all agents."""
    try:
        transactions = load_transactions(transactions_path)
        profiles = load_profiles(profiles_path)
        agents = load_agents(agents_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    processed = process_transactions_for_coach(
        transactions,
        profiles,
        agents,
        today=_as_date(as_of),
        hst_rate=settings.hst_rate,
        unknown_agent=settings.unknown_agent_name,
    )
    _export(processed, output, fmt)


if __name__ == "__main__":
    cli()
