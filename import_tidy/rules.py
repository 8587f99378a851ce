"""Rules module for import-tidy.

This module defines how Go import paths are classified into tiers and how
the order of those tiers is configured.

An import path with no dot in it is taken to be part of the Go standard
library, a dotted path under the project's own prefix is internal, and
everything else is an external dependency.
"""

from __future__ import annotations
from dataclasses import dataclass
import enum
from typing import Dict
from typing import Iterable
from typing import List
from typing import Tuple


class Tier(enum.Enum):
    """Ownership class of an import path."""

    STANDARD = "standard"
    EXTERNAL = "external"
    INTERNAL = "internal"


DEFAULT_TIERS: Tuple[Tier, ...] = (Tier.STANDARD, Tier.EXTERNAL, Tier.INTERNAL)
DEFAULT_ORDER_SPEC = "standard,external,internal"


@dataclass(frozen=True)
class TierOrder:
    """Total order over the three tiers."""

    tiers: Tuple[Tier, ...] = DEFAULT_TIERS

    def rank(self, tier: Tier) -> int:
        return self.tiers.index(tier)

    def __iter__(self):
        return iter(self.tiers)

    def __str__(self) -> str:
        return ",".join(tier.value for tier in self.tiers)


def classify_import(path: str, internal_prefix: str) -> Tier:
    """Classify an import path as STANDARD, EXTERNAL or INTERNAL.

    Args:
        path: The unquoted import path.
        internal_prefix: Module prefix that marks the project's own packages.

    Returns:
        The tier the path belongs to.
    """
    if "." not in path:
        return Tier.STANDARD
    if path.startswith(internal_prefix):
        return Tier.INTERNAL
    return Tier.EXTERNAL


def resolve_order(spec: str) -> TierOrder:
    """Resolve a comma-separated list of tier tokens into a TierOrder.

    Unknown and repeated tokens are dropped. Tiers not named by ``spec`` are
    appended after the named ones in the default order.
    """
    tokens = {tier.value: tier for tier in Tier}
    tiers: List[Tier] = []
    for token in (spec or "").split(","):
        tier = tokens.get(token.strip().lower())
        if tier is not None and tier not in tiers:
            tiers.append(tier)

    if not tiers:
        return TierOrder()

    tiers.extend(tier for tier in DEFAULT_TIERS if tier not in tiers)
    return TierOrder(tuple(tiers))


def split_imports(entries: Iterable, order: TierOrder) -> Dict[Tier, list]:
    """Split import entries into buckets keyed by tier, in ``order``.

    Args:
        entries: Objects with a ``tier`` attribute.
        order: Tier order used for the bucket keys.

    Returns:
        A dictionary mapping every tier to the list of its entries, preserving
        input order inside each list.
    """
    grouped: Dict[Tier, list] = {tier: [] for tier in order}
    for entry in entries:
        grouped[entry.tier].append(entry)
    return grouped
