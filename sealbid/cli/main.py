"""
Sealbid CLI - Command Line Interface for the sealed-bid auction engine

Main entry point for all CLI commands.
"""

import json
import logging
import sys
import time
from pathlib import Path

import click

from sealbid.utils.logger import setup_logging, get_logger

logger = get_logger("cli")


def _now(now):
    return int(time.time()) if now is None else now


def _engine(ctx):
    from sealbid.core.engine import AuctionEngine
    from sealbid.core.storage import SQLiteKVStore

    if "engine" not in ctx.obj:
        cfg = ctx.obj["config"]
        ctx.obj["engine"] = AuctionEngine(SQLiteKVStore(cfg.db_path), allow_reinit=cfg.allow_reinit)
    return ctx.obj["engine"]


def _run(operation, *args):
    """Call an engine operation, turning AuctionError into a clean exit."""
    from sealbid.core.auction import AuctionError

    try:
        return operation(*args)
    except AuctionError as err:
        logger.debug(f"{operation.__name__} failed: {type(err).__name__}")
        click.echo(f"❌ {err.message}", err=True)
        sys.exit(1)


now_option = click.option(
    "--now", type=int, default=None, help="Unix time to act at (default: current time)"
)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--db", "db_path", default=None, help="Ledger database path")
@click.option("--config", "config_path", default=None, help="JSON config file")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, db_path, config_path):
    """Sealbid - Sealed-bid commit-reveal auctions"""
    from sealbid.core.config import load_config

    try:
        cfg = load_config(config_path)
    except (OSError, ValueError) as err:
        raise click.BadParameter(str(err), param_hint="--config") from err
    if db_path:
        cfg.db_path = Path(db_path).expanduser()

    level = logging.DEBUG if debug else logging.INFO
    setup_logging(level=level, log_dir=str(cfg.log_dir), log_to_file=cfg.log_to_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


# =============================================================================
# Bidder Helpers
# =============================================================================


@cli.command("commit")
@click.argument("value", type=int)
@click.argument("nonce", required=False)
def commit_cmd(value, nonce):
    """Compute the commitment for a bid VALUE and NONCE"""
    from sealbid.crypto import commit, generate_nonce

    if nonce is None:
        nonce = generate_nonce()
        click.echo(f"Nonce: {nonce}")
    click.echo(commit(value, nonce))


# =============================================================================
# Auction Commands
# =============================================================================


@cli.command("init")
@click.argument("asset")
@click.option("--bid-duration", type=int, default=None, help="Bidding window in seconds")
@click.option("--reveal-duration", type=int, default=None, help="Reveal window in seconds")
@now_option
@click.pass_context
def init_cmd(ctx, asset, bid_duration, reveal_duration, now):
    """Create an auction for ASSET"""
    cfg = ctx.obj["config"]
    if bid_duration is None:
        bid_duration = cfg.default_bid_duration
    if reveal_duration is None:
        reveal_duration = cfg.default_reveal_duration

    engine = _engine(ctx)
    auction = _run(engine.init_auction, asset, bid_duration, reveal_duration, _now(now))
    click.echo(f"✓ Auction created: {asset}")
    click.echo(f"  Bidding until: {auction.bid_end}")
    click.echo(f"  Reveal until:  {auction.reveal_end}")


@cli.command("bid")
@click.argument("asset")
@click.argument("client")
@click.argument("bid_hash")
@now_option
@click.pass_context
def bid_cmd(ctx, asset, client, bid_hash, now):
    """Place a sealed bid (commitment BID_HASH) for CLIENT"""
    _run(_engine(ctx).place_bid, asset, client, bid_hash, _now(now))
    click.echo(f"✓ Bid placed by {client} on {asset}")


@cli.command("ask")
@click.argument("asset")
@click.argument("client")
@click.argument("amount", type=int)
@click.pass_context
def ask_cmd(ctx, asset, client, amount):
    """Record an asking price for CLIENT"""
    _run(_engine(ctx).place_ask, asset, client, amount)
    click.echo(f"✓ Ask recorded for {client} on {asset}: {amount}")


@cli.command("reveal")
@click.argument("asset")
@click.argument("client")
@click.argument("value", type=int)
@click.argument("nonce")
@now_option
@click.pass_context
def reveal_cmd(ctx, asset, client, value, nonce, now):
    """Reveal CLIENT's bid VALUE and NONCE"""
    _run(_engine(ctx).reveal_bid, asset, client, value, nonce, _now(now))
    click.echo(f"✓ Bid revealed by {client} on {asset}")


@cli.command("award")
@click.argument("asset")
@now_option
@click.pass_context
def award_cmd(ctx, asset, now):
    """Award ASSET to the highest revealed bid"""
    winner = _run(_engine(ctx).award_slot, asset, _now(now))
    if winner:
        click.echo(f"✓ {asset} awarded to {winner}")
    else:
        click.echo(f"✓ {asset} awarded with no revealed bids")


@cli.command("show")
@click.argument("asset")
@now_option
@click.option("--json", "as_json", is_flag=True, help="Print the raw ledger record")
@click.pass_context
def show_cmd(ctx, asset, now, as_json):
    """Show an auction"""
    from sealbid.core.auction import AskBook, AuctionState, lifecycle_state, rank_bids, seconds_remaining

    auction = _run(_engine(ctx).get_auction, asset)
    if as_json:
        click.echo(json.dumps(json.loads(auction.to_bytes()), indent=2, sort_keys=True))
        return

    at = _now(now)
    state = lifecycle_state(auction, at)
    click.echo(f"Auction {auction.asset}")
    click.echo("-" * 40)
    click.echo(f"  State:        {state.name}")
    if state in (AuctionState.BIDDING, AuctionState.REVEAL):
        click.echo(f"  Time left:    {seconds_remaining(auction, at)}s")
    click.echo(f"  Start:        {auction.start_time}")
    click.echo(f"  Bid end:      {auction.bid_end}")
    click.echo(f"  Reveal end:   {auction.reveal_end}")
    click.echo(f"  Bids:         {len(auction.bids)} ({len(auction.revealed_bids())} revealed)")
    for rank, bid in rank_bids(auction.bids):
        click.echo(f"    {rank + 1}. {bid.client_id}: {bid.bid_value}")
    for client_id in auction.get_unrevealed_clients():
        click.echo(f"    -  {client_id}: sealed")
    click.echo(f"  Asks:         {len(auction.asks)}")
    book = AskBook(auction)
    for client_id, amount in book.entries():
        click.echo(f"    {client_id}: {amount}")
    best = book.lowest()
    if best is not None:
        click.echo(f"  Lowest ask:   {best[1]} ({best[0]})")
    if auction.awarded:
        click.echo(f"  Winner:       {auction.winner or '(none)'}")


@cli.command("list")
@click.pass_context
def list_cmd(ctx):
    """List auctions in the ledger"""
    assets = _engine(ctx).list_auctions()
    if not assets:
        click.echo("No auctions found.")
        return
    for asset in assets:
        click.echo(f"  {asset}")


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
def demo():
    """Run an end-to-end auction against an in-memory ledger"""
    from sealbid.crypto import commit
    from sealbid.core.engine import AuctionEngine
    from sealbid.core.storage import InMemoryKVStore

    click.echo("=" * 60)
    click.echo("  SEALBID - DEMO")
    click.echo("=" * 60)
    click.echo()

    engine = AuctionEngine(InMemoryKVStore())
    t0 = int(time.time())

    click.echo("🏛️  Creating auction SLOT001 (5s bidding, 5s reveal)...")
    engine.init_auction("SLOT001", 5, 5, t0)
    click.echo()

    bidders = [("alice", 1000, "n-alice"), ("bob", 1500, "n-bob"), ("carol", 1500, "n-carol")]
    click.echo("🔒 Sealed bids...")
    for client_id, value, nonce in bidders:
        engine.place_bid("SLOT001", client_id, commit(value, nonce), t0 + 1)
        click.echo(f"  ✓ {client_id} committed")
    engine.place_ask("SLOT001", "seller", 900)
    click.echo("  ✓ seller asks 900")
    click.echo()

    click.echo("🔓 Reveals...")
    for client_id, value, nonce in bidders:
        engine.reveal_bid("SLOT001", client_id, value, nonce, t0 + 6)
        click.echo(f"  ✓ {client_id} revealed {value}")
    click.echo()

    click.echo("⚖️  Awarding...")
    winner = engine.award_slot("SLOT001", t0 + 11)
    click.echo(f"  ✓ Winner: {winner} (tie at 1500 goes to the smaller client ID)")
    click.echo()
    click.echo("✅ Demo complete!")


if __name__ == "__main__":
    cli()
