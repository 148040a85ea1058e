#!/usr/bin/env python3
"""
Snake Arcade - Headless Simulation

Play autopiloted rounds without a display and summarise the results.
Useful for checking mode balance and rival difficulty.

Usage:
    python scripts/simulate.py                                   # 10 CLASSIC games
    python scripts/simulate.py --mode AI_RIVAL --difficulty MEDIUM --games 50
    python scripts/simulate.py --mode SURVIVAL --seed 7 --json   # Machine-readable output
"""
import sys
import json
import random
import argparse
import statistics
import contextlib
import io
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rich.console import Console
from rich.table import Table

from snake_arcade.core.scheduler import ManualScheduler
from snake_arcade.games.snake.autopilot import play_headless
from snake_arcade.games.snake.factory import create_session
from snake_arcade.games.snake.modes import DifficultyLevel, GameMode
from snake_arcade.services.narrator import SilentNarrator
from snake_arcade.services.storage import JsonLeaderboard, MemoryHighScoreStore
from snake_arcade.utils.config_loader import load_config


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Snake Arcade - Simulate autopiloted games",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/simulate.py --mode AI_RIVAL --games 50
  python scripts/simulate.py --mode TIME_ATTACK --difficulty HARD --seed 3
  python scripts/simulate.py --record bot --leaderboard
"""
    )

    parser.add_argument(
        "-m", "--mode",
        type=str,
        default=None,
        choices=[m.value for m in GameMode],
        help="Game mode (default: from config)"
    )
    parser.add_argument(
        "-d", "--difficulty",
        type=str,
        default=None,
        choices=[d.value for d in DifficultyLevel],
        help="Difficulty (default: from config)"
    )
    parser.add_argument(
        "--games",
        type=int,
        default=10,
        help="Number of games to play (default: 10)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible runs"
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=5000,
        help="Stop a game after this many ticks (default: 5000)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml"
    )
    parser.add_argument(
        "--record",
        type=str,
        default=None,
        metavar="NAME",
        help="Record the best score on the leaderboard under NAME"
    )
    parser.add_argument(
        "--leaderboard",
        action="store_true",
        help="Show the top 10 leaderboard entries afterwards"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results in JSON format"
    )

    return parser.parse_args()


def run_games(config, games: int, seed, max_ticks: int) -> list:
    """Play a batch of games sharing one in-memory high score."""
    store = MemoryHighScoreStore()
    master = random.Random(seed)
    results = []

    for index in range(games):
        game_seed = master.randrange(2 ** 31)
        session = create_session(
            config,
            scheduler=ManualScheduler(),
            countdown_scheduler=ManualScheduler(),
            rng=random.Random(game_seed),
            high_score_store=store,
            narrator=SilentNarrator(),
        )
        try:
            result = play_headless(session, random.Random(game_seed + 1), max_ticks=max_ticks)
        finally:
            session.shutdown()
        result["game"] = index + 1
        result["seed"] = game_seed
        results.append(result)

    return results


def summarise(results: list) -> dict:
    scores = [r["score"] for r in results]
    return {
        "games": len(results),
        "mean": statistics.mean(scores),
        "median": statistics.median(scores),
        "stdev": statistics.stdev(scores) if len(scores) > 1 else 0,
        "min": min(scores),
        "max": max(scores),
    }


def print_results(console: Console, results: list, summary: dict, title: str):
    table = Table(title=title)
    table.add_column("Game", justify="right", style="cyan")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Level", justify="right")
    table.add_column("Ticks", justify="right")
    table.add_column("Rival", justify="right")
    table.add_column("Ended By", style="magenta")

    for r in results:
        table.add_row(
            str(r["game"]), str(r["score"]), str(r["level"]),
            str(r["ticks"]), str(r["rival_score"]), r["reason"],
        )
    console.print(table)

    stats = Table(show_header=False, box=None, padding=(0, 1))
    stats.add_column("Metric", style="cyan", width=12)
    stats.add_column("Value", style="white")
    stats.add_row("Mean", f"{summary['mean']:.2f}")
    stats.add_row("Median", f"{summary['median']:.2f}")
    stats.add_row("Std Dev", f"{summary['stdev']:.2f}")
    stats.add_row("Min", f"{summary['min']}")
    stats.add_row("Max", f"[bold yellow]{summary['max']}[/]")
    console.print(stats)


def main():
    """Main entry point."""
    args = parse_args()
    config = load_config(args.config)

    if args.mode:
        config.game.mode = args.mode
    if args.difficulty:
        config.game.difficulty = args.difficulty

    if args.games < 1:
        print("Error: --games must be at least 1")
        sys.exit(1)

    if args.json:
        # Keep session log lines out of the JSON document
        with contextlib.redirect_stdout(io.StringIO()):
            results = run_games(config, args.games, args.seed, args.max_ticks)
    else:
        results = run_games(config, args.games, args.seed, args.max_ticks)
    summary = summarise(results)

    leaderboard = None
    if config.storage.leaderboard_path and (args.record or args.leaderboard):
        leaderboard = JsonLeaderboard(config.storage.leaderboard_path)
        if args.record:
            leaderboard.record(args.record, summary["max"], mode=config.game.mode)

    if args.json:
        output = {"summary": summary, "results": results, "success": True}
        if leaderboard is not None and args.leaderboard:
            output["leaderboard"] = [e.to_dict() for e in leaderboard.top(10)]
        print(json.dumps(output, indent=2))
        return

    console = Console()
    print_results(
        console, results, summary,
        title=f"Snake Arcade - {config.game.mode} / {config.game.difficulty}",
    )

    if leaderboard is not None and args.leaderboard:
        board = Table(title="Leaderboard")
        board.add_column("#", justify="right", style="cyan")
        board.add_column("Name")
        board.add_column("Score", justify="right", style="bold")
        board.add_column("Mode")
        for rank, entry in enumerate(leaderboard.top(10), start=1):
            board.add_row(str(rank), entry.name, str(entry.score), entry.mode)
        console.print(board)


if __name__ == "__main__":
    main()
