"""Mini README: Entry point CLI for the SplitLedger settlement engine.

This script exposes a Typer CLI for splitting a single expense, inspecting
group balances stored in a JSON file, and previewing suggested transfers.
Validation problems exit with code 2, internal invariant violations with
code 1 so scripts can tell caller mistakes from engine defects.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from splitledger.configuration import get_settings
from splitledger.errors import InvariantViolation, LedgerValidationError
from splitledger.logging_utils import configure_root_logger
from splitledger.models import SplitParticipant, SplitPolicy
from splitledger.money import format_minor_units
from splitledger.settlement import SettlementSuggester, SettlementSuggestion
from splitledger.splits import compute_splits
from splitledger.storage import InMemoryGroupStore

cli = typer.Typer(help="Split pooled expenses and work out who owes whom.")


def _parse_participant(raw: str, policy: SplitPolicy) -> SplitParticipant:
    """Turn ``alice`` or ``alice=40`` into a participant for ``policy``."""

    user_id, _, value = raw.partition("=")
    value = value.strip().rstrip("%") or None
    if policy is SplitPolicy.PERCENTAGE:
        return SplitParticipant(user_id=user_id.strip(), percentage=value)
    return SplitParticipant(user_id=user_id.strip(), amount=value)


def _load_store(path: Optional[Path]) -> InMemoryGroupStore:
    resolved = path or get_settings().data_file
    if resolved is None:
        raise typer.BadParameter("Provide a group file or set SPLITLEDGER_DATA_FILE.")
    return InMemoryGroupStore.load_json(resolved)


def _echo_suggestion(suggestion: SettlementSuggestion, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(suggestion.as_dict(), indent=2))
        return
    currency = get_settings().currency_code
    typer.echo(f"Balances for group {suggestion.group_id}:")
    for balance in suggestion.balances:
        typer.echo(f"  {balance.user_id:<12} {balance.balance_type:<5} {format_minor_units(abs(balance.net_amount))} {currency}")
    typer.echo("Suggested transfers:")
    if not suggestion.transactions:
        typer.echo("  Everyone is settled up.")
    for transfer in suggestion.transactions:
        typer.echo(
            f"  {transfer.from_user_id} -> {transfer.to_user_id}: {format_minor_units(transfer.amount)} {currency}"
        )


def _run(action) -> None:
    """Invoke ``action`` mapping engine errors onto exit codes."""

    configure_root_logger(get_settings().log_level)
    try:
        action()
    except LedgerValidationError as error:
        typer.echo(f"Error [{error.kind.value}]: {error.message}", err=True)
        raise typer.Exit(code=2) from error
    except InvariantViolation as error:
        typer.echo(f"Internal error [{error.kind.value}]: {error.message}", err=True)
        raise typer.Exit(code=1) from error


@cli.command()
def split(
    amount: str = typer.Argument(..., help="Expense amount, e.g. 90 or 90.00."),
    policy: str = typer.Option("EQUAL", help="EQUAL, EXACT or PERCENTAGE."),
    participant: List[str] = typer.Option(
        ..., "--participant", "-p", help="Participant as user or user=value (amount or percentage)."
    ),
) -> None:
    """Show how one expense would be divided between participants."""

    def action() -> None:
        split_policy = SplitPolicy.from_str(policy)
        participants = [_parse_participant(raw, split_policy) for raw in participant]
        for share in compute_splits(amount, split_policy, participants):
            typer.echo(f"{share.user_id}: {format_minor_units(share.amount)}")

    _run(action)


@cli.command()
def settle(
    group: str = typer.Option(..., help="Group identifier inside the file."),
    user: str = typer.Option(..., help="Requesting user; must belong to the group."),
    data_file: Optional[Path] = typer.Argument(None, help="JSON file describing groups and expenses."),
    as_json: bool = typer.Option(False, "--json", help="Emit the result as JSON."),
) -> None:
    """Print group balances and the suggested transfers that clear them."""

    def action() -> None:
        store = _load_store(data_file)
        suggestion = SettlementSuggester(store, store).suggest_for_group(group, user)
        _echo_suggestion(suggestion, as_json)

    _run(action)


@cli.command()
def balances(
    user: str = typer.Option(..., help="User whose cross-group position is shown."),
    data_file: Optional[Path] = typer.Argument(None, help="JSON file describing groups and expenses."),
) -> None:
    """Print a user's net balance in every group they belong to."""

    def action() -> None:
        store = _load_store(data_file)
        report = SettlementSuggester(store, store).user_balances(user)
        typer.echo(json.dumps(report.as_dict(), indent=2))

    _run(action)


@cli.command()
def demo(as_json: bool = typer.Option(False, "--json", help="Emit the result as JSON.")) -> None:
    """Run the settlement suggester against built-in demo data."""

    def action() -> None:
        store = InMemoryGroupStore.with_demo_data()
        suggestion = SettlementSuggester(store, store).suggest_for_group("weekend_trip", "alice")
        _echo_suggestion(suggestion, as_json)

    _run(action)


if __name__ == "__main__":
    cli()
