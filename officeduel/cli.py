"""
Office Duel CLI - Command-line interface for the engine.

Usage:
    officeduel play [--seed N] [--replay out.json]   Play one auto-vs-auto match
    officeduel simulate [--seed N] [--matches M]     Tally a batch of auto matches
    officeduel validate <cards_file>                 Validate a card definition file

Card set and tunables come from OFFICEDUEL_* environment variables
(see EngineConfig.from_env); --cards overrides the card file.
"""

import argparse
import json
import sys

from .config import EngineConfig, configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Office Duel - deterministic two-player card duel engine",
        prog="officeduel",
    )
    parser.add_argument("--cards", help="Card definition JSON file (default: built-in set)")
    parser.add_argument("--log-level", help="Logging level (default from OFFICEDUEL_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play one auto-vs-auto match")
    play_parser.add_argument("--seed", type=int, default=123456789, help="Match seed")
    play_parser.add_argument("--max-turns", type=int, default=200, help="Turn limit")
    play_parser.add_argument("--replay", help="Write the replay snapshot to this JSON file")

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Tally a batch of auto matches")
    sim_parser.add_argument("--seed", type=int, default=123456789, help="Seed of the first match")
    sim_parser.add_argument("--matches", type=int, default=100, help="Number of matches")
    sim_parser.add_argument("--deck-size", type=int, default=20, help="Cards per deck")
    sim_parser.add_argument("--max-turns", type=int, default=200, help="Turn limit per match")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a card definition file")
    validate_parser.add_argument("cards_file", help="Path to card definition JSON")

    args = parser.parse_args(argv)

    config = EngineConfig.from_env()
    if args.cards:
        config.cards_path = args.cards
    configure_logging(args.log_level or config.log_level)

    if args.command == "play":
        return cmd_play(args, config)
    elif args.command == "simulate":
        return cmd_simulate(args, config)
    elif args.command == "validate":
        return cmd_validate(args)
    parser.print_help()
    return 1


def cmd_play(args, config: EngineConfig) -> int:
    """Play one match with random offers and picks."""
    from .engine_core.replay import build_replay
    from .games.office import setup_office_match

    engine = setup_office_match(args.seed, config=config)
    turns = 0
    while turns < args.max_turns and engine.winner_index() is None:
        if not any(p.hand or p.deck for p in engine.state.players):
            break
        engine.play_turn_auto()
        turns += 1

    winner = engine.winner_index()
    outcome = engine.state.players[winner].name if winner is not None else "nobody"
    print(f"Match ended after {turns} turns, momentum {engine.state.momentum}, winner: {outcome}")

    if args.replay:
        with open(args.replay, "w", encoding="utf-8") as f:
            json.dump(build_replay(engine.state).to_dict(), f, indent=2)
        print(f"Wrote replay to {args.replay}")
    return 0


def cmd_simulate(args, config: EngineConfig) -> int:
    """Run a seeded batch and print the tally."""
    from .engine_core.simulation import run_simulation
    from .games.office import resolve_definitions

    result = run_simulation(
        resolve_definitions(config),
        seed=args.seed,
        matches=args.matches,
        deck_size=args.deck_size,
        max_turns=args.max_turns,
    )
    print(
        f"Sim: A={result.a_wins} B={result.b_wins} unfinished={result.unfinished} "
        f"out of {result.matches} (avg {result.average_turns:.1f} turns)"
    )
    return 0


def cmd_validate(args) -> int:
    """Validate a card definition file."""
    from .card_schema import DefinitionValidationError, load_definition_set

    try:
        definitions = load_definition_set(args.cards_file)
    except FileNotFoundError:
        print(f"Error: File not found: {args.cards_file}")
        return 1
    except DefinitionValidationError as e:
        print("Invalid card definitions:")
        for error in e.errors:
            print(f"  - {error}")
        return 1

    print(f"Valid: {len(definitions.cards)} cards, schema version {definitions.schema_version}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
