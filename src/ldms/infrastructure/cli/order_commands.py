"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from ldms.application.cancel_order import CancelOrderHandler
from ldms.application.dto import OrderDTO
from ldms.application.place_order import PlaceOrderHandler
from ldms.application.show_order import ShowOrderHandler
from ldms.domain.exceptions import DomainException
from ldms.infrastructure.bootstrap import Container
from ldms.infrastructure.cli.context import pass_container
from ldms.infrastructure.cli.errors import fail


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Deal:     #{dto.deal_id}")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Quantity: {dto.quantity}")
    click.echo(f"Total:    {dto.total_price}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.idempotency_key:
        click.echo(f"Key:      {dto.idempotency_key}")


@click.command("place")
@click.option("--deal-id", required=True, type=int, help="Deal to buy from.")
@click.option("--user-id", required=True, help="Purchasing user.")
@click.option("--quantity", required=True, type=int, help="Units to buy.")
@click.option("--idempotency-key", default=None, help="Makes retries safe to replay.")
@pass_container
def order_place(
    container: Container,
    deal_id: int,
    user_id: str,
    quantity: int,
    idempotency_key: str | None,
) -> None:
    """Place an order against a deal's remaining units."""
    handler = PlaceOrderHandler(
        deal_repo=container.deal_repo,
        order_repo=container.order_repo,
        clock=container.clock,
    )

    try:
        dto = handler.handle(
            deal_id=deal_id,
            user_id=user_id,
            quantity=quantity,
            idempotency_key=idempotency_key,
        )
    except DomainException as exc:
        raise fail(exc) from exc

    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@pass_container
def order_show(container: Container, order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=container.order_repo)

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise fail(exc) from exc

    _display_order(dto)


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@pass_container
def order_cancel(container: Container, order_id: int) -> None:
    """Cancel a confirmed order (returns its units to the deal)."""
    handler = CancelOrderHandler(
        order_repo=container.order_repo,
        deal_repo=container.deal_repo,
    )

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise fail(exc) from exc

    click.echo(f"Order #{order_id} cancelled.")
