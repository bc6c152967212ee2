"""
This module normalizes the free-text pickup dates returned by Renoweb.

Renoweb describes each pickup as text such as ``"Mandag 07-03-2025"``. The
date is pulled out of the text and turned into a ``datetime.date``.
"""
import logging
import re
from datetime import date
from typing import Iterable, List, Optional

from ..config import NO_PICKUPS_SENTINEL
from ..exceptions import MalformedDateError

logger = logging.getLogger(__name__)

date_pattern = re.compile(r"(\d{2})-(\d{2})-(\d{4})")


def normalize_date_text(raw: str) -> str:
    """
    Reorders the ``DD-MM-YYYY`` date embedded in ``raw`` to ``YYYY-MM-DD``.

    Raises:
        MalformedDateError: If ``raw`` contains no date in that format.
    """
    # The last date in the text wins, matching a greedy "anything before" prefix
    matches = date_pattern.findall(raw)
    if not matches:
        raise MalformedDateError(f"No DD-MM-YYYY date found in {raw!r}")
    day, month, year = matches[-1]
    return f"{year}-{month}-{day}"


def parse_pickup_date(raw: str) -> date:
    """Parses a single Renoweb date entry into a date."""
    iso_text = normalize_date_text(raw)
    try:
        return date.fromisoformat(iso_text)
    except ValueError as e:
        raise MalformedDateError(f"Invalid calendar date in {raw!r}: {e}") from e


def is_no_schedule(raw_dates: List[str], sentinel: str = NO_PICKUPS_SENTINEL) -> bool:
    """True when the only entry is the provider's 'no pickups' text."""
    return len(raw_dates) == 1 and raw_dates[0].strip() == sentinel


def normalize_dates(
    raw_dates: Iterable[str], sentinel: str = NO_PICKUPS_SENTINEL
) -> Optional[List[date]]:
    """
    Normalizes the date list Renoweb returns for one material.

    Args:
        raw_dates: The free-text date entries, in upstream order.
        sentinel: The text Renoweb uses when nothing is scheduled.

    Returns:
        The pickup dates in upstream order, or None if the material has no
        scheduled pickups at all.

    Raises:
        MalformedDateError: If an entry other than the sentinel has no date.
    """
    raw_dates = list(raw_dates)
    for raw in raw_dates:
        if not isinstance(raw, str):
            raise MalformedDateError(f"Expected date text, got {type(raw).__name__}")
    if is_no_schedule(raw_dates, sentinel):
        return None
    return [parse_pickup_date(raw) for raw in raw_dates]
