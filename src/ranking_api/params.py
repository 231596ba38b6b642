"""Validation of ranking query parameters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from common.config import ApiConfig, get_config
from common.errors import InvalidArgument

logger = logging.getLogger(__name__)

VALID_ORDERS = ("liked",)
UNIT_MAP = {
    "daily": "day",
    "weekly": "week",
    "monthly": "month",
}
RANGE_MIN = 1


@dataclass(frozen=True)
class RankingQuery:
    unit: str
    range: int
    count: int = 10
    order: str = "liked"

    @property
    def period_unit(self) -> str:
        """Calendar unit ("day", "week", "month") for key generation."""
        return UNIT_MAP[self.unit]


def _parse_int(value: Optional[str], default: int, field_name: str) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"Invalid {field_name} parameter: {value}") from exc


def parse_query_parameters(params: Mapping[str, Optional[str]], api: ApiConfig | None = None) -> RankingQuery:
    """Validate raw query parameters.

    The accepted count and the upper range bound come from ``api``, which
    defaults to the loaded config's read settings.

    Raises:
        InvalidArgument: If any parameter is missing or out of range.
    """
    if api is None:
        api = get_config().api
    count = _parse_int(params.get("count"), api.per_period_limit, "count")
    order = params.get("order") or "liked"
    unit = params.get("unit")
    range_ = _parse_int(params.get("range"), 0, "range")

    if count != api.per_period_limit:
        logger.error("Invalid count parameter: %s", count)
        raise InvalidArgument(f"Invalid count parameter: {count}")

    if order not in VALID_ORDERS:
        logger.error("Invalid order parameter: %s", order)
        raise InvalidArgument(f"Invalid order parameter: {order}")

    if unit not in UNIT_MAP:
        logger.error("Invalid unit parameter: %s", unit)
        raise InvalidArgument(f"Invalid unit parameter: {unit}")

    if range_ < RANGE_MIN or range_ > api.max_range:
        logger.error("Invalid range parameter: %s", range_)
        raise InvalidArgument(f"Invalid range parameter: {range_}")

    return RankingQuery(unit=unit, range=range_, count=count, order=order)
