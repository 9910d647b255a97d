"""Return units to a deal, retrying transient store failures.

Shared by the two paths that hand units back: compensation after a failed
order insert, and cancellation of a confirmed order.
"""

from __future__ import annotations

import logging

from ldms.domain.exceptions import StoreUnavailableError
from ldms.domain.repository.deal_repository import DealRepository

logger = logging.getLogger(__name__)

RESTORE_ATTEMPTS = 3


def restock_units(
    deal_repo: DealRepository,
    deal_id: int,
    quantity: int,
    attempts: int = RESTORE_ATTEMPTS,
) -> bool:
    """Increment ``available_units`` by *quantity*.

    Returns False if the store refuses the increment (unknown deal, or the
    deal would go above ``total_units``).  Raises the last
    StoreUnavailableError once every attempt has timed out.
    """
    for attempt in range(1, attempts + 1):
        try:
            return deal_repo.increment_available_units(deal_id, quantity)
        except StoreUnavailableError as exc:
            logger.warning(
                "[deal=%s] restock of %s unit(s) failed (attempt %s/%s): %s",
                deal_id, quantity, attempt, attempts, exc,
            )
            if attempt == attempts:
                raise
    return False
