"""
Validator - Bid checks against auction constraints.

Every check runs and every violation is collected; validation never
raises for a bad bid, it reports it.
"""

import math
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from auction_kit.core.types import (
    Amount,
    Auction,
    AuctionStatus,
    Bid,
    BidStatus,
    ValidationOptions,
    ValidationResult,
)
from auction_kit.utils.logger import get_logger

logger = get_logger("validator")

DEFAULT_OPTIONS = ValidationOptions()

# Resolution happens after an auction closes, so the status check is relaxed
RESOLUTION_OPTIONS = ValidationOptions(allow_closed_auction=True)


# =============================================================================
# Single Bid
# =============================================================================


def validate_bid(
    bid: Bid,
    auction: Auction,
    options: Optional[ValidationOptions] = None,
) -> ValidationResult:
    """
    Validate a single bid.

    Args:
        bid: The bid to validate
        auction: Auction the bid is placed in
        options: Amount bounds and closed-auction override

    Returns:
        ValidationResult with all violations found
    """
    opts = options or DEFAULT_OPTIONS
    errors: List[str] = []

    if bid.auction_id != auction.id:
        errors.append("Bid does not belong to this auction")

    if bid.amount <= 0:
        errors.append("Bid amount must be positive")

    if opts.min_bid_amount is not None and bid.amount < opts.min_bid_amount:
        errors.append(f"Bid amount must be at least {opts.min_bid_amount}")

    if opts.max_bid_amount is not None and bid.amount > opts.max_bid_amount:
        errors.append(f"Bid amount must not exceed {opts.max_bid_amount}")

    if not opts.allow_closed_auction and auction.status != AuctionStatus.OPEN:
        errors.append(f"Cannot bid on {auction.status.value} auction")

    if not is_valid_item_id(bid.item_id):
        errors.append("Item ID cannot be empty")

    if not is_valid_bidder_id(bid.bidder_id):
        errors.append("Bidder ID cannot be empty")

    return ValidationResult(valid=not errors, errors=errors)


# =============================================================================
# Batches
# =============================================================================


def validate_bids(
    bids: Sequence[Bid],
    auction: Auction,
    options: Optional[ValidationOptions] = None,
) -> Dict[str, ValidationResult]:
    """Validate each bid; returns bid id -> result."""
    return {bid.id: validate_bid(bid, auction, options) for bid in bids}


def filter_valid_bids(
    bids: Sequence[Bid],
    auction: Auction,
    options: Optional[ValidationOptions] = None,
) -> List[Bid]:
    """Keep only valid bids, preserving their relative order."""
    valid = [bid for bid in bids if validate_bid(bid, auction, options).valid]
    if len(valid) != len(bids):
        logger.debug(f"Filtered out {len(bids) - len(valid)} invalid bid(s)")
    return valid


def validate_auction_resolution(
    auction: Auction,
    bids: Sequence[Bid],
) -> ValidationResult:
    """
    Check whether an auction can be resolved.

    Rejects auctions that are already resolved or have no active bids, and
    reports every active bid that fails validation on its own.
    """
    errors: List[str] = []

    if auction.status == AuctionStatus.RESOLVED:
        errors.append("Auction is already resolved")

    active_bids = [bid for bid in bids if bid.status == BidStatus.ACTIVE]
    if not active_bids:
        errors.append("No active bids to resolve")

    for bid in active_bids:
        result = validate_bid(bid, auction, RESOLUTION_OPTIONS)
        if not result.valid:
            errors.append(f"Invalid bid {bid.id}: {', '.join(result.errors)}")

    return ValidationResult(valid=not errors, errors=errors)


# =============================================================================
# Quick Checks
# =============================================================================


def is_valid_bid_amount(amount: Amount) -> bool:
    """True for finite, strictly positive amounts."""
    if isinstance(amount, Decimal):
        return amount.is_finite() and amount > 0
    return math.isfinite(amount) and amount > 0


def is_valid_item_id(item_id: str) -> bool:
    return bool(item_id and item_id.strip())


def is_valid_bidder_id(bidder_id: str) -> bool:
    return bool(bidder_id and bidder_id.strip())
