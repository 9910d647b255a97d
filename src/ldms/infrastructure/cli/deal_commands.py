"""CLI commands for the Deal aggregate."""

from __future__ import annotations

import click

from ldms.application.create_deal import CreateDealHandler
from ldms.application.dto import DealChanges, DealDTO
from ldms.application.show_deal import ListDealsHandler, ShowDealHandler
from ldms.application.update_deal import UpdateDealHandler
from ldms.domain.exceptions import DomainException
from ldms.infrastructure.bootstrap import Container
from ldms.infrastructure.cli.context import pass_container
from ldms.infrastructure.cli.errors import fail


def _display_deal(dto: DealDTO) -> None:
    state = "active" if dto.is_active else "expired"
    click.echo(f"Deal #{dto.id} '{dto.name}'  ({state})")
    click.echo(f"  Price:     {dto.final_price} (was {dto.actual_price})")
    click.echo(
        f"  Units:     {dto.available_units} available / {dto.total_units} total "
        f"({dto.units_sold} sold)"
    )
    click.echo(f"  Expires:   {dto.expiry_time}")


@click.command("create")
@click.option("--name", required=True, help="Deal name.")
@click.option("--actual-price", required=True, help="List price (e.g. 100.00).")
@click.option("--final-price", required=True, help="Deal price (e.g. 80.00).")
@click.option("--total-units", required=True, type=int, help="Units on offer.")
@pass_container
def deal_create(
    container: Container,
    name: str,
    actual_price: str,
    final_price: str,
    total_units: int,
) -> None:
    """Open a new lightning deal."""
    handler = CreateDealHandler(
        deal_repo=container.deal_repo,
        clock=container.clock,
        window=container.settings.deal_window,
    )

    try:
        dto = handler.handle(
            name=name,
            actual_price=actual_price,
            final_price=final_price,
            total_units=total_units,
        )
    except DomainException as exc:
        raise fail(exc) from exc

    click.echo(f"Deal #{dto.id} created.")
    _display_deal(dto)


@click.command("update")
@click.option("--id", "deal_id", required=True, type=int, help="Deal ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--actual-price", default=None, help="New list price.")
@click.option("--final-price", default=None, help="New deal price.")
@click.option("--total-units", default=None, type=int, help="New total units.")
@click.option("--available-units", default=None, type=int, help="Override available units.")
@pass_container
def deal_update(
    container: Container,
    deal_id: int,
    name: str | None,
    actual_price: str | None,
    final_price: str | None,
    total_units: int | None,
    available_units: int | None,
) -> None:
    """Update a deal's name, prices or unit counts."""
    handler = UpdateDealHandler(deal_repo=container.deal_repo, clock=container.clock)
    changes = DealChanges(
        name=name,
        actual_price=actual_price,
        final_price=final_price,
        total_units=total_units,
        available_units=available_units,
    )

    try:
        dto = handler.handle(deal_id, changes)
    except DomainException as exc:
        raise fail(exc) from exc

    click.echo(f"Deal #{dto.id} updated.")
    _display_deal(dto)


@click.command("show")
@click.option("--id", "deal_id", required=True, type=int, help="Deal ID to display.")
@pass_container
def deal_show(container: Container, deal_id: int) -> None:
    """Show details of a deal."""
    handler = ShowDealHandler(deal_repo=container.deal_repo, clock=container.clock)

    try:
        dto = handler.handle(deal_id)
    except DomainException as exc:
        raise fail(exc) from exc

    _display_deal(dto)


@click.command("list")
@pass_container
def deal_list(container: Container) -> None:
    """List all deals."""
    handler = ListDealsHandler(deal_repo=container.deal_repo, clock=container.clock)

    try:
        deals = handler.handle()
    except DomainException as exc:
        raise fail(exc) from exc

    if not deals:
        click.echo("No deals found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>10} {'Avail':>7} {'Total':>7}  State")
    click.echo("-" * 64)
    for d in deals:
        state = "active" if d.is_active else "expired"
        click.echo(
            f"{d.id:<6} {d.name:<24} {d.final_price:>10} "
            f"{d.available_units:>7} {d.total_units:>7}  {state}"
        )
