"""Command parser for CLI input."""

import shlex

from cli.models import (
    CidCommand,
    CommandRequest,
    EstimateCommand,
    MintCommand,
    NetworkCommand,
    StoreCommand,
)
from common.constants import NETWORKS

MINT_OPTION_KEYS = ("name", "description", "royalties", "tags", "license", "editions", "type")


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Estimate/Cid/Store/Mint/Network)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "estimate":
        return _parse_estimate(tokens[1:])
    elif command_name == "cid":
        return _parse_cid(tokens[1:])
    elif command_name == "store":
        return _parse_store(tokens[1:])
    elif command_name == "mint":
        return _parse_mint(tokens[1:])
    elif command_name == "network":
        return _parse_network(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_estimate(args: list[str]) -> EstimateCommand:
    """Parse 'estimate <file>' command."""
    if len(args) != 1:
        raise ParseError("estimate requires exactly 1 argument: <file>")
    return EstimateCommand(file_path=args[0])


def _parse_cid(args: list[str]) -> CidCommand:
    """Parse 'cid <file> [media-type]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("cid requires <file> and an optional [media-type]")
    return CidCommand(file_path=args[0], media_type=args[1] if len(args) > 1 else None)


def _parse_store(args: list[str]) -> StoreCommand:
    """Parse 'store <file> [media-type]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("store requires <file> and an optional [media-type]")
    return StoreCommand(file_path=args[0], media_type=args[1] if len(args) > 1 else None)


def _parse_mint(args: list[str]) -> MintCommand:
    """Parse 'mint <file> <collection> key=value...' command."""
    if len(args) < 2:
        raise ParseError("mint requires <file> <collection> and name=/description= options")

    file_path, collection = args[0], args[1]
    if "=" in file_path or "=" in collection:
        raise ParseError("mint requires <file> and <collection> before any key=value option")

    options: dict = {}
    attributes: list[dict] = []
    media_type = None

    for arg in args[2:]:
        key, sep, value = arg.partition("=")
        if not sep:
            raise ParseError(f"Expected key=value, got '{arg}'")

        if key.startswith("attr:"):
            attr_name = key[len("attr:"):]
            if not attr_name:
                raise ParseError(f"Attribute name missing in '{arg}'")
            attributes.append({"name": attr_name, "value": value})
            continue

        if key not in MINT_OPTION_KEYS:
            raise ParseError(f"Unknown mint option: {key}")

        if key == "type":
            media_type = value
        elif key == "editions":
            if value.lower() == "open":
                options["open_edition"] = True
            else:
                options["open_edition"] = False
                options["editions"] = value
        else:
            options[key] = value

    if attributes:
        options["attributes"] = attributes

    return MintCommand(file_path=file_path, collection=collection, options=options, media_type=media_type)


def _parse_network(args: list[str]) -> NetworkCommand:
    """Parse 'network [name]' command."""
    if len(args) > 1:
        raise ParseError("network takes at most 1 argument: [mainnet|ghostnet]")
    if args and args[0] not in NETWORKS:
        raise ParseError(f"Unknown network: {args[0]} (expected one of: {', '.join(NETWORKS)})")
    return NetworkCommand(network=args[0] if args else None)
