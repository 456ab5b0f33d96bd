"""
Heuristic classification of owned objects as rafflable prizes.

Sui has no NFT type standard, so compatibility is inferred from the object's
shape. Rules run in order and the first one that matches decides:
known system/capability types are excluded first, then anything NFT-shaped is
admitted, and objects with any content at all are admitted by default.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .models import LedgerObject
from .project_constants import (
    NFT_FIELD_NAMES,
    NON_RAFFLABLE_KEYWORDS,
    SYSTEM_TYPE_DENYLIST,
)


class CompatibilityRule(enum.Enum):
    MISSING_ID = "missing_id"
    MISSING_TYPE = "missing_type"
    SYSTEM_OBJECT = "system_object"
    ADMIN_CAPABILITY = "admin_capability"
    DISPLAY_NFT = "display_nft"
    FIELD_SHAPED_NFT = "field_shaped_nft"
    PERMISSIVE_FALLBACK = "permissive_fallback"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Classification:
    rule: CompatibilityRule
    is_compatible: bool
    reason: Optional[str] = None

    @staticmethod
    def compatible(rule: CompatibilityRule) -> "Classification":
        return Classification(rule=rule, is_compatible=True)

    @staticmethod
    def incompatible(rule: CompatibilityRule, reason: str) -> "Classification":
        return Classification(rule=rule, is_compatible=False, reason=reason)


Rule = Callable[[LedgerObject], Optional[Classification]]


def missing_id(obj: LedgerObject) -> Optional[Classification]:
    if not obj.object_id:
        return Classification.incompatible(CompatibilityRule.MISSING_ID, "no object id")
    return None


def missing_type(obj: LedgerObject) -> Optional[Classification]:
    if not obj.type:
        return Classification.incompatible(
            CompatibilityRule.MISSING_TYPE, "no type information"
        )
    return None


def system_object(obj: LedgerObject) -> Optional[Classification]:
    # Substring match: can false-positive on NFT types embedding e.g. "AdminCap".
    if any(pattern in (obj.type or "") for pattern in SYSTEM_TYPE_DENYLIST):
        return Classification.incompatible(CompatibilityRule.SYSTEM_OBJECT, "system object")
    return None


def admin_capability(obj: LedgerObject) -> Optional[Classification]:
    if any(keyword in (obj.type or "") for keyword in NON_RAFFLABLE_KEYWORDS):
        return Classification.incompatible(
            CompatibilityRule.ADMIN_CAPABILITY, "administrative or capability object"
        )
    return None


def display_nft(obj: LedgerObject) -> Optional[Classification]:
    display = obj.display or {}
    if display.get("name") or display.get("description"):
        return Classification.compatible(CompatibilityRule.DISPLAY_NFT)
    return None


def field_shaped_nft(obj: LedgerObject) -> Optional[Classification]:
    # A `metadata` sub-struct counts on its own, whatever it holds.
    fields = obj.fields or {}
    if any(name in fields for name in NFT_FIELD_NAMES):
        return Classification.compatible(CompatibilityRule.FIELD_SHAPED_NFT)
    return None


def permissive_fallback(obj: LedgerObject) -> Optional[Classification]:
    if obj.has_content or obj.fields or obj.display:
        return Classification.compatible(CompatibilityRule.PERMISSIVE_FALLBACK)
    return None


RULES: Tuple[Rule, ...] = (
    missing_id,
    missing_type,
    system_object,
    admin_capability,
    display_nft,
    field_shaped_nft,
    permissive_fallback,
)


def classify(obj: LedgerObject) -> Classification:
    for rule in RULES:
        result = rule(obj)
        if result is not None:
            return result
    return Classification.incompatible(
        CompatibilityRule.UNRECOGNIZED, "object structure not recognized as NFT"
    )
