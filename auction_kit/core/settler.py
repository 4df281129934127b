"""
Settler - First-price and second-price sealed-bid settlement.

Settlement runs per item:
1. Group bids by item (first-seen order)
2. Rank each item's bids with the auction's tie-break
3. Pick winner(s): rank 0, or all bids tied at the top amount (multi-unit)
4. Price each winner: own bid (first-price) or second-highest bid
   (second-price, falling back to own bid when unopposed)

A failure on one item is recorded in the result's errors and never stops
the remaining items from settling.
"""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence

from auction_kit.core.ranker import get_second_price, rank_bids, top_ranked
from auction_kit.core.types import (
    Amount,
    AuctionConfig,
    Bid,
    BidStatus,
    PricingType,
    RankedBid,
    ResolutionResult,
    Settlement,
)
from auction_kit.utils.logger import get_logger

logger = get_logger("settler")


# =============================================================================
# Helpers
# =============================================================================


def group_bids_by_item(bids: Sequence[Bid]) -> Dict[str, List[Bid]]:
    """Partition bids by item_id, items in first-seen order."""
    grouped: Dict[str, List[Bid]] = {}
    for bid in bids:
        grouped.setdefault(bid.item_id, []).append(bid)
    return grouped


def compute_payment(
    winner: RankedBid,
    ranked: Sequence[RankedBid],
    pricing: PricingType,
) -> Amount:
    """
    Amount a winner owes under the given pricing rule.

    Args:
        winner: The winning ranked bid
        ranked: All ranked bids for the winner's item
        pricing: First-price or second-price

    Returns:
        Amount owed
    """
    if pricing == PricingType.FIRST_PRICE:
        return winner.amount

    if pricing == PricingType.SECOND_PRICE:
        second_price = get_second_price(ranked)
        if second_price is None:
            # Unopposed: degenerates to first-price
            return winner.amount
        return second_price

    raise ValueError(f"Unknown pricing type: {pricing!r}")


# =============================================================================
# Settlement
# =============================================================================


def settle_bids(
    bids: Sequence[Bid],
    config: AuctionConfig,
    random_seed: Optional[int] = None,
) -> ResolutionResult:
    """
    Settle bids according to an auction configuration.

    The same random_seed is reused for every item, so a whole run is
    reproducible from (bids, config, seed).

    Args:
        bids: All bids to settle
        config: Pricing, tie-break and multi-unit rules
        random_seed: Optional seed for random tie-breaking

    Returns:
        ResolutionResult with settlements, per-item errors and the run timestamp
    """
    resolved_at = datetime.now(timezone.utc)

    if not bids:
        logger.debug("No bids to settle")
        return ResolutionResult(
            settlements=(),
            errors=("No bids to settle",),
            resolved_at=resolved_at,
        )

    settlements: List[Settlement] = []
    errors: List[str] = []

    for item_id, item_bids in group_bids_by_item(bids).items():
        try:
            ranked = rank_bids(item_bids, config.tie_break, random_seed)

            if not ranked:
                errors.append(f"No valid bids for item {item_id}")
                continue

            for winner in top_ranked(ranked, config.multi_unit):
                settlements.append(
                    Settlement(
                        bidder_id=winner.bidder_id,
                        item_id=item_id,
                        won_amount=compute_payment(winner, ranked, config.type),
                        bid_amount=winner.amount,
                        settled_at=resolved_at,
                    )
                )
        except Exception as exc:
            logger.warning(f"Failed to settle item {item_id}: {exc}")
            errors.append(f"Error settling item {item_id}: {exc}")

    logger.debug(
        f"Settled {len(settlements)} winner(s) across "
        f"{len(set(s.item_id for s in settlements))} item(s), {len(errors)} error(s)"
    )
    return ResolutionResult(
        settlements=tuple(settlements),
        errors=tuple(errors),
        resolved_at=resolved_at,
    )


def determine_winners(
    bids: Sequence[Bid],
    config: AuctionConfig,
    random_seed: Optional[int] = None,
) -> Dict[str, List[str]]:
    """
    Preview winners without computing payments.

    Returns:
        Mapping of item_id to winning bid ids, in rank order
    """
    winners: Dict[str, List[str]] = {}

    for item_id, item_bids in group_bids_by_item(bids).items():
        ranked = rank_bids(item_bids, config.tie_break, random_seed)
        if not ranked:
            continue
        winners[item_id] = [bid.id for bid in top_ranked(ranked, config.multi_unit)]

    return winners


def calculate_payments(settlements: Sequence[Settlement]) -> Dict[str, Amount]:
    """Total won_amount owed by each bidder."""
    payments: Dict[str, Amount] = defaultdict(int)
    for settlement in settlements:
        payments[settlement.bidder_id] += settlement.won_amount
    return dict(payments)


def group_settlements_by_bidder(
    settlements: Sequence[Settlement],
) -> Dict[str, List[Settlement]]:
    """Partition settlements by bidder, preserving order within each bidder."""
    grouped: Dict[str, List[Settlement]] = {}
    for settlement in settlements:
        grouped.setdefault(settlement.bidder_id, []).append(settlement)
    return grouped


def apply_bid_statuses(
    bids: Sequence[Bid],
    winners: Mapping[str, Sequence[str]],
) -> List[Bid]:
    """
    Mark active bids as won or lost after resolution.

    Bids that are not active (e.g. cancelled) are returned unchanged.

    Args:
        bids: Bids that took part in settlement
        winners: Output of determine_winners for the same run

    Returns:
        New Bid list in input order
    """
    winning_ids = {bid_id for ids in winners.values() for bid_id in ids}
    updated = []
    for bid in bids:
        if bid.status != BidStatus.ACTIVE:
            updated.append(bid)
        elif bid.id in winning_ids:
            updated.append(bid.with_status(BidStatus.WON))
        else:
            updated.append(bid.with_status(BidStatus.LOST))
    return updated
