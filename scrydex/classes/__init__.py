"""
Scrydex Class Dispatcher
"""

from .card_fields import Card, is_group_kind, unique_card_key
from .scrydex_meta import (
    CardDBType,
    GroupKind,
    ScrydexGroupsObject,
    ScrydexMetaObject,
)
