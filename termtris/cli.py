"""
Command-line front end for termtris, a falling-block puzzle game for the terminal.

Usage:
    termtris
    termtris --config my_settings.yaml
    termtris --seed 42 --style ansi --tick-ms 300
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Any

import yaml

from termtris.renderer import STYLES

# Shipped alongside the package; a user-supplied --config must exist.
DEFAULT_CONFIG_PATH = pathlib.Path(__file__).parent / "settings.yaml"

DEFAULTS: dict[str, Any] = {
    "board_width": 10,
    "board_height": 20,
    "tick_interval_ms": 500,
    "seed": None,
    "style": "emoji",
}

MIN_BOARD_WIDTH = 7
MIN_BOARD_HEIGHT = 4


def load_config(config_path: str | pathlib.Path) -> dict:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Dict of configuration key-value pairs, with defaults filled in for
        any key the file leaves out.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the file doesn't hold a mapping of settings.
    """
    config_path = pathlib.Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, "r") as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file must contain a mapping of settings: {config_path}")
    return {**DEFAULTS, **loaded}


def load_default_config() -> dict:
    """Load the bundled settings, or the built-in defaults if they are absent."""
    if not DEFAULT_CONFIG_PATH.exists():
        return dict(DEFAULTS)
    return load_config(DEFAULT_CONFIG_PATH)


def validate_config(config: dict) -> None:
    """Check the settings the game can't start without.

    Raises:
        ValueError: If a value is out of range or of the wrong type.
    """
    for key, minimum in (("board_width", MIN_BOARD_WIDTH), ("board_height", MIN_BOARD_HEIGHT)):
        value = config[key]
        if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
            raise ValueError(f"{key} must be an integer >= {minimum}, got {value!r}")
    tick = config["tick_interval_ms"]
    if not isinstance(tick, (int, float)) or isinstance(tick, bool) or tick <= 0:
        raise ValueError(f"tick_interval_ms must be positive, got {tick!r}")
    if config["style"] not in STYLES:
        raise ValueError(f"Unknown render style: {config['style']!r} (choose from {sorted(STYLES)})")
    seed = config["seed"]
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        raise ValueError(f"seed must be an integer or null, got {seed!r}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Namespace with config, seed, style and tick_ms attributes.
    """
    parser = argparse.ArgumentParser(
        prog="termtris",
        description="termtris: falling-block puzzle game in the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Controls: arrows or w/a/s/d to rotate, move and drop; z or Ctrl-C to quit.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML configuration file (default: bundled settings).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the piece bag (default: from config, else random).",
    )
    parser.add_argument(
        "--style",
        type=str,
        choices=sorted(STYLES),
        default=None,
        help="Cell style: 'emoji' squares or 'ansi' background colors.",
    )
    parser.add_argument(
        "--tick-ms",
        type=int,
        default=None,
        help="Milliseconds between gravity ticks.",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> dict:
    """Load the config file, apply command-line overrides and validate."""
    config = load_config(args.config) if args.config is not None else load_default_config()
    if args.seed is not None:
        config["seed"] = args.seed
    if args.style is not None:
        config["style"] = args.style
    if args.tick_ms is not None:
        config["tick_interval_ms"] = args.tick_ms
    validate_config(config)
    return config


def main(argv: list[str] | None = None) -> None:
    """Main entry point: parse args, load config, and start the game."""
    args = parse_args(argv)
    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    from termtris.play import play_manual
    try:
        play_manual(config)
    except (RuntimeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
