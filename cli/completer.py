"""Custom completer for the minter CLI with file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, FILE_COMMANDS


class MinterCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - File path completion for the first argument of file commands
    """

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        if command not in FILE_COMMANDS:
            return

        argument_index = len(tokens) - 1 if not is_typing_new_token else len(tokens)
        if argument_index != 1:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_paths(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_paths(self, partial: str) -> Iterable[Completion]:
        """
        Complete file and directory paths relative to the base directory.

        Directories are suggested with a trailing slash so completion can
        continue into them.
        """
        base = self.base_dir or Path.cwd()
        directory, _, prefix = partial.rpartition("/")
        search_dir = base / directory if directory else base

        if not search_dir.is_dir():
            return

        for item in sorted(search_dir.iterdir()):
            if item.name.startswith(".") or not item.name.startswith(prefix):
                continue
            candidate = f"{directory}/{item.name}" if directory else item.name
            if item.is_dir():
                candidate += "/"
            yield Completion(candidate, start_position=-len(partial))
