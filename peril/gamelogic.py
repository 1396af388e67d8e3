"""Console helpers shared by the client and the server."""

from __future__ import annotations

import random
import sys
from typing import TextIO

from peril.gamestate import GameError

MALICIOUS_LOGS = (
    "Never interrupt your enemy when he is making a mistake.",
    "The hardest thing of all for a soldier is to retreat.",
    "A soldier will fight long and hard for a bit of colored ribbon.",
    "It is well that war is so terrible, otherwise we should grow too fond of it.",
    "The art of war is simple enough. Find out where your enemy is. Get at him as soon as you "
    "can. Strike him as hard as you can, and keep moving on.",
    "All warfare is based on deception.",
)

QUIT_MESSAGE = "I hate this game! (╯°□°)╯︵ ┻━┻"

_CLIENT_COMMANDS = (
    ("move <location> <unitID> <unitID> <unitID>...", "move asia 1"),
    ("spawn <location> <rank>", "spawn europe infantry"),
    ("status", None),
    ("spam <n>", "spam 5"),
    ("quit", None),
    ("help", None),
)

_SERVER_COMMANDS = ("pause", "resume", "quit", "help")


def _emit(lines: list[str]) -> str:
    """Write the lines to standard output and return them as one block of text."""
    text = "\n".join(lines)
    sys.stdout.write(text + "\n")
    sys.stdout.flush()
    return text


def print_client_help() -> str:
    """Show the commands a client accepts and return the help text."""
    lines = ["Possible commands:"]
    for usage, example in _CLIENT_COMMANDS:
        lines.append(f"* {usage}")
        if example is not None:
            lines.append("    example:")
            lines.append(f"    {example}")
    return _emit(lines)


def print_server_help() -> str:
    """Show the commands the server accepts and return the help text."""
    lines = ["Possible commands:"]
    lines.extend(f"* {command}" for command in _SERVER_COMMANDS)
    return _emit(lines)


def get_input(stream: TextIO | None = None) -> list[str]:
    """Prompt and read one line, returning its words (empty at end of input)."""
    print("> ", end="", flush=True)
    line = (stream or sys.stdin).readline()
    return line.split()


def client_welcome(stream: TextIO | None = None) -> str:
    """Greet the player and ask for a username."""
    print("Welcome to the Peril client!")
    print("Please enter your username:")
    words = get_input(stream)
    if not words:
        raise GameError("you must enter a username. goodbye")
    username = words[0]
    print(f"Welcome, {username}!")
    print_client_help()
    return username


def get_malicious_log() -> str:
    return random.choice(MALICIOUS_LOGS)


def print_quit() -> str:
    """Show the farewell message and return it."""
    return _emit([QUIT_MESSAGE])