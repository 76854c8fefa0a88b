from __future__ import annotations

import argparse
import logging

from .clock import ManualClock
from .config import Settings
from .deploy import deploy
from .keeper import Keeper
from .ledger import Ledger, make_address
from .project_constants import to_ether
from .verify import build_audit, verify_audit, write_audit


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def cmd_simulate(args: argparse.Namespace) -> int:
    """Runs one complete round against a local coordinator."""
    settings = Settings.from_env(network_override=args.network)
    log = logging.getLogger("simulate")

    if not settings.is_development:
        raise SystemExit(f"simulate only runs on development networks, not {settings.network!r}.")
    if args.players < 1:
        raise SystemExit("Need at least one player.")

    clock = ManualClock()
    ledger = Ledger()
    dep = deploy(settings, ledger=ledger, clock=clock)
    raffle, coordinator = dep.raffle, dep.coordinator

    players = [make_address(f"player-{i}") for i in range(args.players)]
    for addr in players:
        ledger.mint(addr, raffle.entry_fee * 10)
        raffle.enter(addr, raffle.entry_fee)
    log.info("Entrants         : %d", raffle.player_count)
    log.info("Pot              : %s", to_ether(raffle.pot))

    clock.advance(raffle.interval + 1)
    request_id = Keeper(raffle).poll()
    if request_id is None:
        raise SystemExit("Raffle did not become ready (unexpected).")
    log.info("Request id       : %d", request_id)

    if args.word is not None:
        settlement = coordinator.fulfill_random_words_with_override(request_id, raffle, [args.word])
    else:
        settlement = coordinator.fulfill_random_words(request_id, raffle)
    if settlement is None:
        raise SystemExit("Callback was ignored (unexpected).")

    write_audit(args.out, build_audit(settlement, settings.network, raffle.address, raffle.entry_fee))

    print("========================================")
    print("🎲 VRF RAFFLE ROUND")
    print("========================================")
    print(f"Network       : {settings.network}")
    print(f"Raffle        : {raffle.address}")
    print(f"Request id    : {settlement.request_id}")
    print(f"Random word   : {settlement.random_words[0]}")
    print("----------------------------------------")
    print("🏆 WINNER")
    print(f"Address       : {settlement.winner}")
    print(f"Slot          : {settlement.winner_index} of {len(settlement.participants)}")
    print(f"Prize         : {to_ether(settlement.prize)}")
    print("----------------------------------------")
    print(f"🧾 Wrote audit: {args.out}")
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    result = verify_audit(args.audit)
    print("✅ AUDIT VERIFIED")
    print(f"Winner        : {result['winner']}")
    print(f"Winner slot   : {result['winner_index']} of {result['players']}")
    print(f"Prize         : {to_ether(result['prize'])}")
    print(f"Request id    : {result['request_id']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vrf-raffle",
        description="Raffle state machine settled by verifiable randomness.",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    p.add_argument("--network", default=None, help="Override network (else RAFFLE_NETWORK).")

    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("simulate", help="Run one round locally and write an audit JSON.")
    s.add_argument("--players", type=int, default=4, help="Number of entrants.")
    s.add_argument(
        "--word",
        type=int,
        default=None,
        help="Force the random word delivered by the local coordinator.",
    )
    s.add_argument("--out", default="audit.json", help="Audit output JSON path.")
    s.set_defaults(func=cmd_simulate)

    v = sub.add_parser("verify", help="Verify an existing audit.json deterministically.")
    v.add_argument("--audit", required=True, help="Path to audit.json.")
    v.set_defaults(func=cmd_verify)

    return p


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    raise SystemExit(args.func(args))
