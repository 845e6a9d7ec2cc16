"""
Card Database Store
"""

from .card_db_store import build_meta, is_valid_type, load, load_all, save
from .card_diff import CardStreamDiff, build_quantity_map, diff
from .card_filter import (
    CardFilterConfig,
    PropertyFilters,
    RegexSearch,
    card_matches,
    has_filter_checks,
    log_config,
)
from .card_stream import CardStream, CardStreamOptions, MembershipTest
from .price import PriceExpression, PriceFilter, parse_price_filter
