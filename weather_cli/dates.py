"""
Date normalization for provider requests.

Users type dates in whatever shape is natural to them. Providers want ISO
`YYYY-MM-DD`. normalize_date() bridges the two and never fails: anything it
cannot read is treated as "today" (UTC).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

ISO_FORMAT = "%Y-%m-%d"

# Checked in this order, first match wins
CANDIDATE_FORMATS = (
    "%Y-%m-%d",  # 2023-10-05
    "%d.%m.%Y",  # 05.10.2023
    "%m/%d/%Y",  # 10/05/2023 (US)
    "%d-%m-%Y",  # 05-10-2023
    "%d %b %Y",  # 05 Oct 2023
    "%Y/%m/%d",  # 2023/10/05
)


def today_iso() -> str:
    """Today's UTC date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).strftime(ISO_FORMAT)


def _parse_with_unknown_format(value: str) -> Optional[datetime]:
    for fmt in CANDIDATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def normalize_date(value: Optional[str] = None) -> str:
    """
    Normalize a loosely formatted date string to ISO `YYYY-MM-DD`.

    Args:
        value: Date text in one of CANDIDATE_FORMATS, or None

    Returns:
        The ISO date, or today's UTC date if value is None or unparseable
    """
    if value is None:
        return today_iso()

    parsed = _parse_with_unknown_format(value.strip())
    if parsed is None:
        logger.debug(f"[normalize_date] Could not parse {value!r}, using today")
        return today_iso()

    return parsed.strftime(ISO_FORMAT)
