"""Tests for ChunkpostCompleter."""

import pytest

from prompt_toolkit.document import Document

from cli.completer import ChunkpostCompleter
from cli.constants import COMMANDS, EXPIRY_UNITS, UPLOAD_OPTIONS
from uploader.config import Config


@pytest.fixture
def completer():
    """Create a ChunkpostCompleter instance."""
    return ChunkpostCompleter()


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_shows_all_commands(self, completer):
        """Empty input should suggest all commands."""
        assert get_completions_list(completer, "") == COMMANDS

    def test_partial_command_filters(self, completer):
        """Partial command should filter to matching commands."""
        assert get_completions_list(completer, "c") == ["config", "clear"]

    def test_command_completion_case_insensitive(self, completer):
        """Command completion should be case insensitive."""
        assert get_completions_list(completer, "UP") == ["upload"]

    def test_no_arguments_for_other_commands(self, completer):
        assert get_completions_list(completer, "help ") == []


class TestConfigCompletion:
    """Tests for config key completion."""

    def test_all_keys(self, completer):
        assert get_completions_list(completer, "config ") == sorted(Config.DEFAULT_CONFIG)

    def test_partial_key(self, completer):
        assert get_completions_list(completer, "config ti") == ["timeout"]

    def test_no_completion_for_value(self, completer):
        assert get_completions_list(completer, "config timeout ") == []


class TestUploadCompletion:
    """Tests for upload option, unit and path completion."""

    def test_options(self, completer):
        assert get_completions_list(completer, "upload a.bin --") == UPLOAD_OPTIONS

    def test_partial_option(self, completer):
        assert get_completions_list(completer, "upload a.bin --pa") == ["--password"]

    def test_no_completion_for_option_value(self, completer):
        assert get_completions_list(completer, "upload a.bin --password ") == []

    def test_units_after_expiry_count(self, completer):
        assert get_completions_list(completer, "upload a.bin --expires 3 ") == EXPIRY_UNITS

    def test_partial_unit(self, completer):
        assert get_completions_list(completer, "upload a.bin --expires 3 h") == ["hours"]

    def test_path_completion(self, completer, tmp_path):
        (tmp_path / "sample.bin").write_bytes(b"x")
        (tmp_path / "other.txt").write_text("y")

        completions = get_completions_list(completer, f"upload {tmp_path}/sam")

        assert completions == ["ple.bin"]
