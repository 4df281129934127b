"""
Types - Core auction data structures.

Plain frozen dataclasses shared by the validator, ranker and settler.
Records arrive already deserialized; nothing here performs I/O.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple, Union

# Currency amounts: integers (minor units) or Decimal
Amount = Union[int, Decimal]


# =============================================================================
# Enums
# =============================================================================


class BidStatus(str, Enum):
    """Lifecycle status of a bid."""
    ACTIVE = "active"
    WON = "won"
    LOST = "lost"
    CANCELLED = "cancelled"


class AuctionStatus(str, Enum):
    """Status of an auction, owned by the persistence layer."""
    OPEN = "open"
    CLOSED = "closed"
    RESOLVED = "resolved"


class PricingType(str, Enum):
    """Pricing rule applied to winners."""
    FIRST_PRICE = "first-price"     # Pay your own bid
    SECOND_PRICE = "second-price"   # Pay the second-highest bid (Vickrey)


class TieBreak(str, Enum):
    """Ordering rule for bids with equal amounts."""
    TIMESTAMP = "timestamp"   # Earliest placed_at wins
    RANDOM = "random"         # Seeded shuffle of each tied run


# =============================================================================
# Auction
# =============================================================================


@dataclass(frozen=True)
class AuctionConfig:
    """
    Rule set governing one auction.

    String values are accepted and coerced to their enums; anything
    unrecognised raises ValueError.
    """
    type: PricingType = PricingType.FIRST_PRICE
    tie_break: TieBreak = TieBreak.TIMESTAMP
    multi_unit: bool = False

    def __post_init__(self):
        object.__setattr__(self, "type", PricingType(self.type))
        object.__setattr__(self, "tie_break", TieBreak(self.tie_break))


@dataclass(frozen=True)
class Auction:
    """Auction context a bid is validated against."""
    id: str
    status: AuctionStatus
    config: AuctionConfig = field(default_factory=AuctionConfig)
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "status", AuctionStatus(self.status))


# =============================================================================
# Bids
# =============================================================================


@dataclass(frozen=True)
class Bid:
    """
    A bidder's sealed offer on one item within one auction.

    Immutable; status transitions produce a copy via with_status().
    """
    id: str
    auction_id: str
    bidder_id: str
    item_id: str
    amount: Amount
    placed_at: datetime
    status: BidStatus = BidStatus.ACTIVE

    def __post_init__(self):
        object.__setattr__(self, "status", BidStatus(self.status))

    def with_status(self, status: BidStatus) -> "Bid":
        """Return a copy of this bid with a new status."""
        return replace(self, status=BidStatus(status))


@dataclass(frozen=True)
class RankedBid(Bid):
    """A bid annotated with its rank (0 = best) within one item."""
    rank: int = 0

    @classmethod
    def from_bid(cls, bid: Bid, rank: int) -> "RankedBid":
        values = {f.name: getattr(bid, f.name) for f in fields(Bid)}
        return cls(rank=rank, **values)


# =============================================================================
# Settlement
# =============================================================================


@dataclass(frozen=True)
class Settlement:
    """One winning outcome: who won what, and what they owe."""
    bidder_id: str
    item_id: str
    won_amount: Amount      # What the winner pays
    bid_amount: Amount      # What the winner bid (audit/display)
    settled_at: datetime


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of one settlement run."""
    settlements: Tuple[Settlement, ...]
    errors: Tuple[str, ...]
    resolved_at: datetime


# =============================================================================
# Validation
# =============================================================================


@dataclass(frozen=True)
class ValidationOptions:
    """
    Per-call validation settings.

    Defaults:
        min_bid_amount: 1 (None disables the check)
        max_bid_amount: None (no ceiling)
        allow_closed_auction: False (only open auctions accept bids)
    """
    min_bid_amount: Optional[Amount] = 1
    max_bid_amount: Optional[Amount] = None
    allow_closed_auction: bool = False


@dataclass
class ValidationResult:
    """Validity verdict plus every violation found, in check order."""
    valid: bool
    errors: List[str] = field(default_factory=list)
