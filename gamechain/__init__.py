"""Matchmaking, runners, turn-based boards, a game registry and chain specifications."""

__version__ = "0.1.0"

__all__ = [
    "board",
    "chainspec",
    "cli",
    "codec",
    "common",
    "gameregistry",
    "guessing",
    "matchmaker",
    "primitives",
    "runner",
]