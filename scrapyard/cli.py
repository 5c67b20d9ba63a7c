"""
Scrapyard CLI - Command-line interface for the engine.

Usage:
    scrapyard map [--seed N] [--x X --y Y] [--radius R]   Print a window of the world
    scrapyard autoplay [--seed N] [--policy greedy]       Run an autopilot game
    scrapyard validate                                    Validate the default catalog
"""

import argparse
import sys

from .settings import Settings


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Scrapyard - Bot squad survival engine",
        prog="scrapyard",
    )
    parser.add_argument("--log-level", help="Override SCRAPYARD_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Map command
    map_parser = subparsers.add_parser("map", help="Print a window of the world")
    map_parser.add_argument("--seed", type=int, help="Game seed (places the pod)")
    map_parser.add_argument("--x", type=int, default=0, help="Window center x")
    map_parser.add_argument("--y", type=int, default=0, help="Window center y")
    map_parser.add_argument("--radius", type=int, default=12, help="Window radius")

    # Autoplay command
    autoplay_parser = subparsers.add_parser("autoplay", help="Run an autopilot game")
    autoplay_parser.add_argument("--seed", type=int, help="Game seed")
    autoplay_parser.add_argument(
        "--policy", choices=["random", "greedy"], default="greedy", help="Autopilot policy",
    )
    autoplay_parser.add_argument("--max-actions", type=int, default=5000, help="Action budget")

    # Validate command
    subparsers.add_parser("validate", help="Validate the default catalog")

    args = parser.parse_args()

    settings = Settings()
    if args.log_level:
        settings.log_level = args.log_level
    from .logging_setup import configure_logging
    configure_logging(settings)

    if args.command == "map":
        cmd_map(args, settings)
    elif args.command == "autoplay":
        cmd_autoplay(args, settings)
    elif args.command == "validate":
        cmd_validate(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_map(args, settings):
    """Print an ASCII window of the world."""
    from .content import setup_game
    from .engine_core.state import Position
    from .engine_core.world import render_window

    seed = args.seed if args.seed is not None else settings.seed
    state = setup_game(random_seed=seed)
    print(f"Pod at {state.world.pod.key}, guardian at {state.world.guardian.key}")
    print(render_window(
        state.world,
        Position(args.x, args.y),
        radius=args.radius,
        player=state.player.position,
    ))


def cmd_autoplay(args, settings):
    """Run an unattended game and print the outcome."""
    from .bots import GreedyPolicy, RandomPolicy
    from .engine_core.action_generator import ActionGenerator
    from .session import SessionManager

    manager = SessionManager(settings=settings)
    session = manager.create_session(seed=args.seed)
    generator = ActionGenerator(catalog=manager.catalog)
    if args.policy == "greedy":
        policy = GreedyPolicy(session.reducer, seed=args.seed)
    else:
        policy = RandomPolicy(seed=args.seed)

    print(f"Session {session.session_id}: pod at {session.state.world.pod.key}")

    actions_taken = 0
    while not session.state.is_over and actions_taken < args.max_actions:
        legal = generator.generate(session.state)
        if not legal:
            break
        decision = policy.select_action(session.state, legal)
        session.submit(decision.action)
        session.settle()
        actions_taken += 1

    state = session.state
    stats = state.player.stats
    print(f"Actions: {actions_taken}")
    print(f"Mode: {state.mode.value}")
    print(f"Quest: {state.player.quest.stage.value} "
          f"({state.player.quest.parts_found}/{state.player.quest.parts_needed} parts)")
    print(f"Steps: {stats.steps}  Scrap: {stats.scrap_collected}  "
          f"Recruited: {stats.bots_recruited}  Lost: {stats.bots_lost}")
    score = session.final_score()
    if score is not None:
        print(f"Final score: {score}")
    else:
        print("Game still running (action budget exhausted)")
    manager.end_session(session.session_id)


def cmd_validate(args):
    """Validate the default catalog."""
    from .content.catalog import build_default_catalog
    from .engine_core.validation import validate_catalog

    result = validate_catalog(build_default_catalog())
    print(f"Valid: {result.valid}")
    for w in result.warnings:
        print(f"  warning: {w}")
    for e in result.errors:
        print(f"  error: {e}")
    if not result.valid:
        sys.exit(1)


if __name__ == "__main__":
    main()
