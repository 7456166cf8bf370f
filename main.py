"""
Entry point for termtris, a falling-block puzzle game for the terminal.

Usage:
    python main.py
    python main.py --config my_settings.yaml
    python main.py --seed 42 --style ansi --tick-ms 300
"""

from termtris.cli import main


if __name__ == "__main__":
    main()
