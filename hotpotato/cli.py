"""
Hot Potato CLI - Command-line interface for the engine.

Usage:
    hotpotato simulate [--players a,b,c] [--window N] [--seed S]   Simulate a game
    hotpotato serve [--host H] [--port P]                          Run the HTTP API
"""

import argparse
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Hot Potato - deadline-bound token passing engine",
        prog="hotpotato",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Simulate a game with automated players")
    simulate_parser.add_argument("--players", default="alice,bob,charlie", help="Comma-separated identities")
    simulate_parser.add_argument("--window", type=int, default=10, help="Deadline window in ticks")
    simulate_parser.add_argument("--policy", default="random", help="Pass policy for every player")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    simulate_parser.add_argument("--max-ticks", type=int, default=1000, help="Tick limit")
    simulate_parser.add_argument("--token-backed", action="store_true", help="Mint the token on a ledger")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_simulate(args):
    """Simulate a game and print its events."""
    from .bots import POLICIES
    from .session import GameLoop, GameSessionManager

    players = [p.strip() for p in args.players.split(",") if p.strip()]
    if not players:
        print("Error: at least one player is required")
        sys.exit(1)
    policy_cls = POLICIES.get(args.policy)
    if policy_cls is None:
        print(f"Error: unknown policy {args.policy!r} (choose from {', '.join(POLICIES)})")
        sys.exit(1)

    try:
        manager = GameSessionManager()
        session = manager.create_game(deadline_window=args.window, token_backed=args.token_backed)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    loop = GameLoop(session, {p: policy_cls() for p in players}, seed=args.seed)
    first_holder = players[1] if len(players) > 1 else players[0]
    result = loop.run(starter=players[0], first_holder=first_holder, max_ticks=args.max_ticks)

    print(f"Game {session.game_id} (window={args.window}, token_backed={args.token_backed})")
    for event in result.events:
        token = f" token={event.token_id}" if event.token_id is not None else ""
        print(f"  tick {event.tick:>5}  {event.kind.value:<9} actor={event.actor} holder={event.holder}{token}")

    print(f"\nOutcome: {result.loop_state.value} after {result.ticks} ticks, {result.passes} passes")
    if result.forfeited_by:
        print(f"Forfeited by: {result.forfeited_by}")
    return result


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
