"""
Input records for the CLI.

Pydantic models for the JSON documents the CLI reads. Field aliases follow
the camelCase wire records produced by the auction service
(auctionId, placedAt, tieBreak, ...); snake_case names are accepted too.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from auction_kit.core.types import (
    Auction,
    AuctionConfig,
    AuctionStatus,
    Bid,
    BidStatus,
    PricingType,
    TieBreak,
)


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AuctionConfigRecord(_Record):
    type: PricingType = PricingType.FIRST_PRICE
    tie_break: TieBreak = Field(TieBreak.TIMESTAMP, alias="tieBreak")
    multi_unit: bool = Field(False, alias="multiUnit")

    def to_config(self) -> AuctionConfig:
        return AuctionConfig(
            type=self.type,
            tie_break=self.tie_break,
            multi_unit=self.multi_unit,
        )


class AuctionRecord(_Record):
    id: str
    status: AuctionStatus = AuctionStatus.OPEN
    config: AuctionConfigRecord = Field(default_factory=AuctionConfigRecord)
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    resolved_at: Optional[datetime] = Field(None, alias="resolvedAt")

    def to_auction(self) -> Auction:
        return Auction(
            id=self.id,
            status=self.status,
            config=self.config.to_config(),
            created_at=self.created_at,
            resolved_at=self.resolved_at,
        )


class BidRecord(_Record):
    id: str
    auction_id: str = Field(alias="auctionId")
    bidder_id: str = Field(alias="bidderId")
    item_id: str = Field(alias="itemId")
    # int first so whole amounts stay integers; fractional ones become Decimal
    amount: Union[int, Decimal]
    placed_at: datetime = Field(alias="placedAt")
    status: BidStatus = BidStatus.ACTIVE

    def to_bid(self) -> Bid:
        return Bid(
            id=self.id,
            auction_id=self.auction_id,
            bidder_id=self.bidder_id,
            item_id=self.item_id,
            amount=self.amount,
            placed_at=self.placed_at,
            status=self.status,
        )


class AuctionDocument(_Record):
    """Top-level CLI input: one auction and its bids."""
    auction: AuctionRecord
    bids: List[BidRecord] = Field(default_factory=list)

    def to_auction(self) -> Auction:
        return self.auction.to_auction()

    def to_bids(self) -> List[Bid]:
        return [record.to_bid() for record in self.bids]
