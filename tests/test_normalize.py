"""Tests for input normalization and global command classification."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from dialogue.commands import Command, classify_command, match_choice, parse_index
from dialogue.normalize import MAX_INPUT_LENGTH, normalize, to_ascii_digits


class TestNormalize:
    def test_devanagari_digits_become_ascii(self):
        assert to_ascii_digits("९८७६५४३२१०") == "9876543210"

    def test_arabic_indic_digits_become_ascii(self):
        assert to_ascii_digits("٣") == "3"

    def test_whitespace_collapsed_and_casefolded(self):
        result = normalize("  Rahul   PATIL \n")
        assert result.raw == "Rahul PATIL"
        assert result.text == "rahul patil"

    def test_markup_characters_removed(self):
        assert normalize("<b>hello</b>").raw == "bhello/b"

    def test_none_and_blank_are_empty(self):
        assert normalize(None).is_empty
        assert normalize("   ").is_empty

    def test_truncated(self):
        assert len(normalize("a" * 2000).raw) == MAX_INPUT_LENGTH


class TestClassifyCommand:
    @pytest.mark.parametrize("text", ["hi", "hello", "restart", "new search", "नमस्कार", "hi!"])
    def test_restart(self, text):
        assert classify_command(normalize(text).text) == Command.RESTART

    @pytest.mark.parametrize("text", ["change language", "भाषा बदला"])
    def test_change_language(self, text):
        assert classify_command(normalize(text).text) == Command.CHANGE_LANGUAGE

    @pytest.mark.parametrize("text", ["help", "?", "मदत"])
    def test_help(self, text):
        assert classify_command(normalize(text).text) == Command.HELP

    @pytest.mark.parametrize("text", ["bye", "END", "समाप्त", "थांबा"])
    def test_end(self, text):
        assert classify_command(normalize(text).text) == Command.END

    def test_command_word_inside_sentence_is_not_a_command(self):
        assert classify_command("hi, i want an office") is None
        assert classify_command("my name is hello kitty") is None

    def test_empty(self):
        assert classify_command("") is None


class TestMenuMatching:
    OPTIONS = {
        1: ("office", "offices"),
        2: ("shop",),
        3: ("warehouse",),
    }

    def test_parse_index(self):
        assert parse_index("2") == 2
        assert parse_index("2.") == 2
        assert parse_index("3)") == 3
        assert parse_index("two") is None
        assert parse_index("123") is None

    def test_digit_wins(self):
        assert match_choice("2", self.OPTIONS) == 2

    def test_digit_out_of_range(self):
        assert match_choice("9", self.OPTIONS) is None
        assert match_choice("0", self.OPTIONS) is None

    def test_synonym_in_sentence(self):
        assert match_choice("i am looking for a shop", self.OPTIONS) == 2

    def test_ambiguous_returns_none(self):
        assert match_choice("office or shop", self.OPTIONS) is None

    def test_partial_word_does_not_match(self):
        assert match_choice("workshop", self.OPTIONS) is None
