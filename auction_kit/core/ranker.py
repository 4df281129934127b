"""
Ranker - Deterministic bid ordering for a single item.

Bids are ordered by amount (highest first). Equal amounts are resolved by
the auction's tie-break strategy:
- timestamp: earliest placed_at wins
- random: each run of equal amounts is shuffled with a seeded PRNG

Given the same bids and the same seed, ranking is fully reproducible.
The only non-reproducible path is the random strategy without a seed,
which falls back to a clock-derived seed.
"""

import time
from typing import Callable, List, Optional, Sequence

from auction_kit.core.types import Amount, Bid, RankedBid, TieBreak
from auction_kit.utils.logger import get_logger

logger = get_logger("ranker")


# =============================================================================
# Constants
# =============================================================================

UINT32_MASK = 0xFFFFFFFF

# mulberry32 increment (Weyl sequence step)
MULBERRY32_INCREMENT = 0x6D2B79F5

# 2^32, maps a uint32 onto [0, 1)
UINT32_RANGE = 4294967296


# =============================================================================
# Seeded Random
# =============================================================================


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & UINT32_MASK


def create_seeded_random(seed: int) -> Callable[[], float]:
    """
    Create a mulberry32 generator producing floats in [0, 1).

    Each call builds an independent generator; nothing is shared between
    calls. Seeds are reduced modulo 2^32, so negative and oversized seeds
    are accepted.

    Args:
        seed: Integer seed

    Returns:
        Zero-argument function returning the next value of the stream
    """
    state = seed & UINT32_MASK

    def next_random() -> float:
        nonlocal state
        state = (state + MULBERRY32_INCREMENT) & UINT32_MASK
        t = _imul(state ^ (state >> 15), 1 | state)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & UINT32_MASK) ^ t
        return ((t ^ (t >> 14)) & UINT32_MASK) / UINT32_RANGE

    return next_random


def clock_seed() -> int:
    """Milliseconds since the epoch, used when no seed is supplied."""
    return int(time.time() * 1000)


# =============================================================================
# Ranking
# =============================================================================


def _shuffle_tied_runs(bids: List[Bid], rng: Callable[[], float]) -> None:
    """
    Fisher-Yates shuffle each maximal run of equal amounts in place.

    bids must already be sorted by amount descending.
    """
    i = 0
    while i < len(bids):
        j = i + 1
        while j < len(bids) and bids[j].amount == bids[i].amount:
            j += 1

        if j - i > 1:
            group = bids[i:j]
            for k in range(len(group) - 1, 0, -1):
                swap = int(rng() * (k + 1))
                group[k], group[swap] = group[swap], group[k]
            bids[i:j] = group

        i = j


def rank_bids(
    bids: Sequence[Bid],
    tie_break: TieBreak,
    random_seed: Optional[int] = None,
) -> List[RankedBid]:
    """
    Rank bids for a single item, best first.

    The input sequence is never mutated.

    Args:
        bids: Bids that all target the same item
        tie_break: Strategy for ordering equal amounts
        random_seed: Seed for the random strategy (clock-derived if None)

    Returns:
        RankedBid list where rank equals list position
    """
    if not bids:
        return []

    tie_break = TieBreak(tie_break)
    ordered = list(bids)

    if tie_break == TieBreak.TIMESTAMP:
        # Sort is stable: equal (amount, placed_at) keep input order
        ordered.sort(key=lambda b: b.placed_at)
        ordered.sort(key=lambda b: b.amount, reverse=True)
    else:
        ordered.sort(key=lambda b: b.amount, reverse=True)
        seed = random_seed if random_seed is not None else clock_seed()
        if random_seed is None:
            logger.debug(f"No random seed supplied, using clock seed {seed}")
        _shuffle_tied_runs(ordered, create_seeded_random(seed))

    return [RankedBid.from_bid(bid, rank) for rank, bid in enumerate(ordered)]


def top_ranked(ranked: Sequence[RankedBid], multi_unit: bool) -> List[RankedBid]:
    """
    Select winners from an already-ranked list.

    Single-unit: rank 0 only. Multi-unit: every bid tied at the top amount.
    """
    if not ranked:
        return []

    if not multi_unit:
        return [ranked[0]]

    top_amount = ranked[0].amount
    return [bid for bid in ranked if bid.amount == top_amount]


def get_winners(
    bids: Sequence[Bid],
    tie_break: TieBreak,
    random_seed: Optional[int] = None,
    multi_unit: bool = False,
) -> List[RankedBid]:
    """
    Rank bids for one item and return the winner(s).

    Args:
        bids: Bids for a single item
        tie_break: Strategy for ordering equal amounts
        random_seed: Seed for the random strategy
        multi_unit: Return all bids tied at the top amount instead of rank 0

    Returns:
        Winning bids in rank order (empty if no bids)
    """
    return top_ranked(rank_bids(bids, tie_break, random_seed), multi_unit)


def get_second_price(ranked_bids: Sequence[RankedBid]) -> Optional[Amount]:
    """
    Amount of the rank-1 bid, used for second-price payment.

    Returns None (not zero) when fewer than two bids were ranked.
    """
    if len(ranked_bids) < 2:
        return None
    return ranked_bids[1].amount
