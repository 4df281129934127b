"""
auction-kit CLI - Command line interface for the settlement engine

Reads auction documents (JSON) and runs validation, ranking and settlement.
"""

import json
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from auction_kit import __version__
from auction_kit.cli.records import AuctionDocument
from auction_kit.utils.logger import setup_logging, get_logger

logger = get_logger("cli")


def _amount(value) -> str:
    """Serialize an amount as a decimal string."""
    return str(value)


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2)


def load_document(path: Path) -> AuctionDocument:
    """
    Parse an auction document.

    Raises:
        click.ClickException: If the file is not valid JSON or fails schema checks
    """
    try:
        return AuctionDocument.model_validate_json(path.read_text())
    except ValidationError as exc:
        raise click.ClickException(f"Invalid auction document {path}:\n{exc}") from exc


# Output mirrors the camelCase input records


def _bid_to_dict(bid) -> dict:
    data = {
        "id": bid.id,
        "auctionId": bid.auction_id,
        "bidderId": bid.bidder_id,
        "itemId": bid.item_id,
        "amount": _amount(bid.amount),
        "placedAt": bid.placed_at.isoformat(),
        "status": bid.status.value,
    }
    if hasattr(bid, "rank"):
        data["rank"] = bid.rank
    return data


def _settlement_to_dict(settlement) -> dict:
    return {
        "bidderId": settlement.bidder_id,
        "itemId": settlement.item_id,
        "wonAmount": _amount(settlement.won_amount),
        "bidAmount": _amount(settlement.bid_amount),
        "settledAt": settlement.settled_at.isoformat(),
    }


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", type=click.Path(dir_okay=False), default=None, help="Path to a .env file")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, debug, env_file):
    """auction-kit - Sealed-bid auction settlement engine"""
    import logging
    from auction_kit.core.config import load_config

    try:
        config = load_config(env_file)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    level = logging.DEBUG if debug else config.log_level
    setup_logging(level=level, log_dir=config.log_dir)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Validation
# =============================================================================


@cli.command("validate")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def validate(ctx, document):
    """Validate every bid and check the auction can be resolved"""
    from auction_kit.core import validate_bids, validate_auction_resolution

    doc = load_document(document)
    auction = doc.to_auction()
    bids = doc.to_bids()
    options = ctx.obj["config"].validation_options()

    verdicts = validate_bids(bids, auction, options)
    resolution = validate_auction_resolution(auction, bids)

    click.echo(_dump({
        "bids": {
            bid_id: {"valid": result.valid, "errors": result.errors}
            for bid_id, result in verdicts.items()
        },
        "resolution": {"valid": resolution.valid, "errors": resolution.errors},
    }))

    if not resolution.valid:
        ctx.exit(1)


# =============================================================================
# Ranking
# =============================================================================


@cli.command("rank")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--item", "item_id", required=True, help="Item to rank bids for")
@click.option("--seed", type=int, default=None, help="Seed for random tie-breaking")
def rank(document, item_id, seed):
    """Rank the bids placed on one item"""
    from auction_kit.core import rank_bids

    doc = load_document(document)
    auction = doc.to_auction()
    item_bids = [bid for bid in doc.to_bids() if bid.item_id == item_id]

    ranked = rank_bids(item_bids, auction.config.tie_break, seed)
    click.echo(_dump([_bid_to_dict(bid) for bid in ranked]))


# =============================================================================
# Settlement
# =============================================================================


@cli.command("settle")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--seed", type=int, default=None, help="Seed for random tie-breaking")
@click.option("--only-valid", is_flag=True, help="Drop bids that fail validation before settling")
@click.pass_context
def settle(ctx, document, seed, only_valid):
    """Settle active bids and print settlements, payments and bid statuses"""
    from auction_kit.core import (
        BidStatus,
        TieBreak,
        apply_bid_statuses,
        calculate_payments,
        determine_winners,
        filter_valid_bids,
        settle_bids,
    )
    from auction_kit.core.ranker import clock_seed

    doc = load_document(document)
    auction = doc.to_auction()
    bids = [bid for bid in doc.to_bids() if bid.status == BidStatus.ACTIVE]

    if only_valid:
        # Resolution happens after close; only the amount/id checks apply
        options = replace(ctx.obj["config"].validation_options(), allow_closed_auction=True)
        bids = filter_valid_bids(bids, auction, options)

    if seed is None and auction.config.tie_break == TieBreak.RANDOM:
        # Settlements and bid statuses must come from the same shuffle
        seed = clock_seed()
        logger.debug(f"No --seed given, using clock seed {seed}")

    result = settle_bids(bids, auction.config, seed)
    winners = determine_winners(bids, auction.config, seed)
    statuses = apply_bid_statuses(bids, winners)

    for error in result.errors:
        logger.warning(error)

    click.echo(_dump({
        "settlements": [_settlement_to_dict(s) for s in result.settlements],
        "errors": list(result.errors),
        "resolvedAt": result.resolved_at.isoformat(),
        "payments": {
            bidder: _amount(total)
            for bidder, total in calculate_payments(result.settlements).items()
        },
        "bids": {bid.id: bid.status.value for bid in statuses},
    }))


# =============================================================================
# Demo Command
# =============================================================================


def _demo_bids(auction_id: str):
    from auction_kit.core import Bid

    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    rows = [
        ("bid-1", "alice", "seat1", 200, 1),
        ("bid-2", "bob", "seat1", 200, 2),
        ("bid-3", "charlie", "seat1", 100, 3),
        ("bid-4", "alice", "seat2", 80, 4),
        ("bid-5", "dave", "seat2", 120, 5),
        ("bid-6", "bob", "seat3", 50, 6),
    ]
    return [
        Bid(
            id=bid_id,
            auction_id=auction_id,
            bidder_id=bidder,
            item_id=item,
            amount=amount,
            placed_at=start + timedelta(seconds=offset),
        )
        for bid_id, bidder, item, amount, offset in rows
    ]


@cli.command("demo")
@click.option("--seed", type=int, default=42, help="Seed for the random tie-break run")
def demo(seed):
    """Settle a sample auction under every pricing rule"""
    from auction_kit.core import (
        AuctionConfig,
        PricingType,
        TieBreak,
        calculate_payments,
        settle_bids,
    )

    bids = _demo_bids("demo-auction")

    click.echo("=" * 60)
    click.echo("  AUCTION-KIT - SETTLEMENT DEMO")
    click.echo("=" * 60)
    click.echo()
    for bid in bids:
        click.echo(f"  {bid.id}: {bid.bidder_id:<8} {bid.item_id}  {bid.amount}")
    click.echo()

    scenarios = [
        AuctionConfig(PricingType.FIRST_PRICE, TieBreak.TIMESTAMP, False),
        AuctionConfig(PricingType.SECOND_PRICE, TieBreak.TIMESTAMP, False),
        AuctionConfig(PricingType.FIRST_PRICE, TieBreak.TIMESTAMP, True),
        AuctionConfig(PricingType.SECOND_PRICE, TieBreak.RANDOM, False),
    ]

    for config in scenarios:
        units = "multi-unit" if config.multi_unit else "single-unit"
        click.echo(f"▶ {config.type.value}, {config.tie_break.value} tie-break, {units}")
        result = settle_bids(bids, config, random_seed=seed)
        for s in result.settlements:
            click.echo(f"  {s.item_id}: {s.bidder_id} bid {s.bid_amount}, pays {s.won_amount}")
        for bidder, total in calculate_payments(result.settlements).items():
            click.echo(f"  total owed by {bidder}: {total}")
        click.echo()


if __name__ == "__main__":
    cli()
