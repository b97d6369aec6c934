"""Custom completer for the chunkpost CLI."""

from typing import Iterable

from prompt_toolkit.completion import Completer, Completion, PathCompleter
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, EXPIRY_UNITS, UPLOAD_OPTIONS
from uploader.config import Config


class ChunkpostCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Option, expiry unit and file path completion for 'upload'
    - Key completion for 'config'
    """

    def __init__(self):
        self.path_completer = PathCompleter(expanduser=True)

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_words(COMMANDS, tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        current_word = "" if is_typing_new_token else tokens[-1]
        previous = tokens[:-1] if not is_typing_new_token else tokens

        if command == "config":
            if len(previous) == 1:
                yield from self._complete_words(sorted(Config.DEFAULT_CONFIG), current_word)
            return

        if command != "upload":
            return

        if len(previous) >= 2 and previous[-2] == "--expires":
            yield from self._complete_words(EXPIRY_UNITS, current_word)
        elif previous[-1] in UPLOAD_OPTIONS:
            return
        elif current_word.startswith("-"):
            yield from self._complete_words(UPLOAD_OPTIONS, current_word)
        else:
            yield from self.path_completer.get_completions(
                Document(current_word, len(current_word)), complete_event
            )

    def _complete_words(self, words: Iterable[str], partial: str) -> Iterable[Completion]:
        """Complete words matching the partial input."""
        partial_lower = partial.lower()
        for word in words:
            if word.startswith(partial_lower):
                yield Completion(word, start_position=-len(partial))
