"""
auction-kit core.

Pure settlement engine:
- Validator: bid checks against auction constraints
- Ranker: deterministic per-item bid ordering
- Settler: winner selection and first/second-price payment
"""

from auction_kit.core.types import (
    Amount,
    Auction,
    AuctionConfig,
    AuctionStatus,
    Bid,
    BidStatus,
    PricingType,
    RankedBid,
    ResolutionResult,
    Settlement,
    TieBreak,
    ValidationOptions,
    ValidationResult,
)

from auction_kit.core.ranker import (
    create_seeded_random,
    get_second_price,
    get_winners,
    rank_bids,
)

from auction_kit.core.settler import (
    apply_bid_statuses,
    calculate_payments,
    determine_winners,
    group_settlements_by_bidder,
    settle_bids,
)

from auction_kit.core.validator import (
    filter_valid_bids,
    is_valid_bid_amount,
    is_valid_bidder_id,
    is_valid_item_id,
    validate_auction_resolution,
    validate_bid,
    validate_bids,
)

from auction_kit.core.config import EngineConfig, load_config

__all__ = [
    # Types
    "Amount",
    "Auction",
    "AuctionConfig",
    "AuctionStatus",
    "Bid",
    "BidStatus",
    "PricingType",
    "RankedBid",
    "ResolutionResult",
    "Settlement",
    "TieBreak",
    "ValidationOptions",
    "ValidationResult",
    # Ranker
    "create_seeded_random",
    "get_second_price",
    "get_winners",
    "rank_bids",
    # Settler
    "apply_bid_statuses",
    "calculate_payments",
    "determine_winners",
    "group_settlements_by_bidder",
    "settle_bids",
    # Validator
    "filter_valid_bids",
    "is_valid_bid_amount",
    "is_valid_bidder_id",
    "is_valid_item_id",
    "validate_auction_resolution",
    "validate_bid",
    "validate_bids",
    # Config
    "EngineConfig",
    "load_config",
]
