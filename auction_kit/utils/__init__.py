"""Shared utilities for auction-kit."""

from auction_kit.utils.logger import AuctionKitLogger, get_logger, setup_logging

__all__ = [
    "AuctionKitLogger",
    "get_logger",
    "setup_logging",
]
