"""Logging utilities for Geocoin sessions.

Every line names the part of the game it came from, so a terminal session reads
as a trace of the world, the player and the storage backend:

    [•] [World] Generated cache 0,0 with 3 coins
    [>] [Collect] Coin 0:0#1 from cache 0,0
    [!] [Storage] Storage unavailable during set: disk full

Colours follow the same split; set ``GEOCOIN_NO_COLOR`` (or the common
``NO_COLOR``) for plain text.
"""

import os
from enum import Enum
from typing import Optional


class Color(Enum):
    """ANSI color codes for terminal output."""

    BLUE = "\033[94m"      # World generation (cells, caches, momentos)
    YELLOW = "\033[93m"    # Player actions (collect, deposit, move)
    RED = "\033[91m"       # Errors and fallbacks
    GREEN = "\033[92m"     # Storage loaded/saved
    CYAN = "\033[96m"      # Session lifecycle

    BOLD = "\033[1m"
    RESET = "\033[0m"


# Markers for operation types (color-blind accessible)
LOG_TAG_WORLD = "[•]"
LOG_TAG_PLAYER = "[>]"
LOG_TAG_ERROR = "[!]"
LOG_TAG_STORAGE = "[✓]"
LOG_TAG_SESSION = "[i]"


def colors_enabled() -> bool:
    return not (os.getenv("GEOCOIN_NO_COLOR") or os.getenv("NO_COLOR"))


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text, or the plain text when colours are switched off
    """
    if not colors_enabled():
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def format_line(tag: str, message: str, scope: Optional[str] = None) -> str:
    """Build ``"<tag> [<scope>] <message>"``, keeping leading indentation in front."""
    indent = message[: len(message) - len(message.lstrip(" "))]
    body = message.lstrip(" ")
    if scope:
        body = f"[{scope}] {body}"
    return f"{indent}{tag} {body}"


def log_world(message: str, scope: str = "World") -> None:
    """Deterministic world work: spawning, generating, restoring caches (blue)."""
    print(colored(format_line(LOG_TAG_WORLD, message, scope), Color.BLUE))


def log_player(message: str, scope: str = "Player") -> None:
    """A player-driven change: a move or a coin transfer (yellow)."""
    print(colored(format_line(LOG_TAG_PLAYER, message, scope), Color.YELLOW))


def log_storage(message: str, scope: str = "Storage") -> None:
    """Persisted state loaded or written (green)."""
    print(colored(format_line(LOG_TAG_STORAGE, message, scope), Color.GREEN))


def log_session(message: str, scope: str = "Session") -> None:
    """Session lifecycle: reset, tracking start/stop (cyan)."""
    print(colored(format_line(LOG_TAG_SESSION, message, scope), Color.CYAN))


def log_error(message: str, scope: Optional[str] = None) -> None:
    """Log an error or fallback (red). Always printed, verbose or not."""
    print(colored(format_line(LOG_TAG_ERROR, message, scope), Color.RED, bold=True))
