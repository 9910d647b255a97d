import logging

import click

from ldms.domain.exceptions import DomainException
from ldms.infrastructure.cli.deal_commands import (
    deal_create,
    deal_list,
    deal_show,
    deal_update,
)
from ldms.infrastructure.cli.errors import fail
from ldms.infrastructure.cli.order_commands import order_cancel, order_place, order_show
from ldms.infrastructure.config import Settings


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """LDMS — Lightning Deal Management System"""
    try:
        settings = Settings.from_env()
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        ctx.obj = settings
    except DomainException as exc:
        raise fail(exc) from exc


@cli.group()
def deal() -> None:
    """Manage lightning deals."""


@cli.group()
def order() -> None:
    """Place and manage orders."""


# Register subcommands
deal.add_command(deal_create)
deal.add_command(deal_list)
deal.add_command(deal_show)
deal.add_command(deal_update)
order.add_command(order_cancel)
order.add_command(order_place)
order.add_command(order_show)
