"""
Five & Slide CLI - Command-line interface for the engine.

Usage:
    fiveslide simulate [--players N] [--difficulty D]   Play an all-bot match
    fiveslide legal <state_file>                        List legal actions
    fiveslide bot <state_file> [--difficulty D]         Ask a bot for a move

State files are JSON snapshots in the GameStateSchema format.
"""

import argparse
import json
import random
import sys

from pydantic import ValidationError

from .config import configure_logging, get_settings


PLAYER_COLORS = ["red", "blue", "green", "yellow", "purple", "orange", "teal", "pink"]


def main(argv=None):
    """Main CLI entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Five & Slide - board game engine with bot opponents",
        prog="fiveslide",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    difficulties = ["easy", "medium", "hard"]

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play an all-bot match")
    simulate_parser.add_argument("--players", type=int, default=2, help="Number of bot players")
    simulate_parser.add_argument(
        "--difficulty", choices=difficulties, default=settings.default_difficulty.value
    )
    simulate_parser.add_argument("--seed", type=int, default=settings.bot_seed, help="Random seed")
    simulate_parser.add_argument(
        "--delay", type=float, default=settings.bot_delay, help="Seconds before each bot turn"
    )
    simulate_parser.add_argument("--max-turns", type=int, default=500, help="Safety limit")
    simulate_parser.add_argument("--json", action="store_true", help="Print final state as JSON")

    # Legal command
    legal_parser = subparsers.add_parser("legal", help="List legal actions for a state")
    legal_parser.add_argument("state_file", help="Path to state JSON")

    # Bot command
    bot_parser = subparsers.add_parser("bot", help="Ask a bot to choose an action")
    bot_parser.add_argument("state_file", help="Path to state JSON")
    bot_parser.add_argument(
        "--difficulty", choices=difficulties, default=settings.default_difficulty.value
    )
    bot_parser.add_argument("--seed", type=int, default=settings.bot_seed, help="Random seed")

    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper())

    if args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "legal":
        cmd_legal(args)
    elif args.command == "bot":
        cmd_bot(args)
    else:
        parser.print_help()
        sys.exit(1)


def _load_state(path):
    from .api.schemas import GameStateSchema

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {path}: {e}")
        sys.exit(1)

    try:
        return GameStateSchema.model_validate(data).to_state()
    except ValidationError as e:
        print(f"Error: Invalid state in {path}:\n{e}")
        sys.exit(1)


def cmd_simulate(args):
    """Play an all-bot match through a session."""
    from .api.schemas import GameStateSchema
    from .engine_core.state import Difficulty, PlayerInfo, PlayerKind
    from .session import SessionManager

    if not 1 <= args.players <= len(PLAYER_COLORS):
        print(f"Error: --players must be between 1 and {len(PLAYER_COLORS)}")
        sys.exit(1)

    players = [
        PlayerInfo(
            player_id=PLAYER_COLORS[i].upper(),
            name=f"Bot {i + 1}",
            color=PLAYER_COLORS[i],
            kind=PlayerKind.BOT,
            difficulty=Difficulty(args.difficulty),
        )
        for i in range(args.players)
    ]

    manager = SessionManager(bot_delay=args.delay, seed=args.seed)
    try:
        session = manager.create_session(players)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    turns = session.run_bot_turns(max_turns=args.max_turns)
    state = session.game_state

    if args.json:
        print(GameStateSchema.from_state(state).model_dump_json(indent=2))
        return

    print(f"Turns played: {len(turns)}")
    for player in state.players:
        pid = player.player_id
        print(
            f"  {pid}: exited={state.exited[pid]} "
            f"on_board={state.tokens_on_board(pid)} unplaced={state.unplaced[pid]}"
        )
    if state.winner:
        print(f"Winner: {state.winner}")
    else:
        print("No winner within the turn limit")


def cmd_legal(args):
    """List legal actions for a saved state."""
    from .api.schemas import action_to_dict
    from .engine_core.action_generator import legal_actions

    state = _load_state(args.state_file)
    print(json.dumps([action_to_dict(a) for a in legal_actions(state)], indent=2))


def cmd_bot(args):
    """Ask a bot to choose an action for a saved state."""
    from .api.schemas import action_to_dict
    from .bots import decide

    state = _load_state(args.state_file)
    rng = random.Random(args.seed)
    decision = decide(state, args.difficulty, rng=rng)
    if decision is None:
        print("No legal action available")
        sys.exit(1)

    print(json.dumps({
        "action": action_to_dict(decision.action),
        "explanation": decision.explanation,
        "score": decision.score,
    }, indent=2))


if __name__ == "__main__":
    main()
