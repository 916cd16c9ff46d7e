#!/usr/bin/env python3

import importlib
import math
import sys
from pathlib import Path

import pytest


sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))

splitter = importlib.import_module("telegram_bot_mcp.splitter")
split_message = splitter.split_message
utf16_len = splitter.utf16_len


def _non_whitespace(text):
    return "".join(text.split())


class TestSplitMessage:
    def test_short_text_is_single_trimmed_segment(self):
        assert split_message("  hello world \n", 100) == ["hello world"]

    def test_text_at_limit_is_not_split(self):
        text = "a" * 4096
        assert split_message(text) == [text]

    def test_blank_text_yields_no_segments(self):
        assert split_message("") == []
        assert split_message(" \n\n \t ") == []

    def test_rejects_degenerate_max_length(self):
        with pytest.raises(ValueError, match="at least 10"):
            split_message("some text that is long enough", 5)

    def test_packs_paragraphs_greedily(self):
        text = "aaaa\n\nbbbb\n\ncccc"
        assert split_message(text, 10) == ["aaaa\n\nbbbb", "cccc"]

    def test_long_paragraph_splits_on_sentences(self):
        text = "One two. Three four! Five six?"
        assert split_message(text, 20) == ["One two. Three four!", "Five six?"]

    def test_long_sentence_splits_on_words(self):
        text = "word " * 1000  # 5000 chars, no paragraph or sentence breaks

        chunks = split_message(text, 4096)

        assert len(chunks) == 2
        assert all(len(chunk) <= 4096 for chunk in chunks)
        assert chunks[0].endswith("word")
        assert " ".join(chunks).split() == text.split()

    def test_unbreakable_word_is_windowed_with_continuation_markers(self):
        word = "x" * 9000

        chunks = split_message(word, 4096)

        assert len(chunks) == math.ceil(9000 / 4093)
        assert all(len(chunk) <= 4096 for chunk in chunks)
        assert all(chunk.endswith("...") for chunk in chunks[:-1])
        assert not chunks[-1].endswith("...")
        assert "".join(chunk.removesuffix("...") for chunk in chunks) == word

    def test_buffer_is_flushed_before_oversized_word(self):
        text = "short " + "y" * 30

        chunks = split_message(text, 20)

        assert chunks[0] == "short"
        assert chunks[1] == "y" * 17 + "..."
        assert chunks[-1] == "y" * 13

    def test_mixed_text_preserves_order_and_content(self):
        paragraphs = []
        for p in range(12):
            sentences = [
                f"Paragraph {p} sentence {s} has some words in it." for s in range(p % 4 + 1)
            ]
            paragraphs.append(" ".join(sentences))
        text = "\n\n".join(paragraphs)

        chunks = split_message(text, 80)

        assert len(chunks) > 1
        assert all(0 < len(chunk) <= 80 for chunk in chunks)
        assert all(chunk == chunk.strip() for chunk in chunks)
        assert _non_whitespace("".join(chunks)) == _non_whitespace(text)

    def test_is_deterministic(self):
        text = "Alpha beta. Gamma delta!\n\n" * 50
        assert split_message(text, 64) == split_message(text, 64)

    def test_non_latin_text_falls_back_to_word_boundaries(self):
        # No ASCII sentence punctuation: sentence splitting does not apply
        text = " ".join(["привет"] * 20)

        chunks = split_message(text, 30)

        assert all(len(chunk) <= 30 for chunk in chunks)
        assert _non_whitespace("".join(chunks)) == _non_whitespace(text)

    def test_windows_are_trimmed_and_blank_windows_dropped(self):
        chunks = split_message("x" * 20 + "\t" * 3, 10)

        assert chunks == ["xxxxxxx...", "xxxxxxx...", "xxxxxx\t..."]

    def test_window_starting_with_newline_is_trimmed(self):
        chunks = split_message("y" * 7 + "\n" + "z" * 12, 10)

        assert chunks == ["yyyyyyy...", "zzzzzz...", "zzzzzz"]

    def test_astral_characters_count_as_two_units(self):
        text = "😀" * 3000  # 3000 code points, 6000 UTF-16 units

        chunks = split_message(text, 4096)

        assert len(chunks) == 2
        assert all(utf16_len(chunk) <= 4096 for chunk in chunks)
        assert "".join(chunk.removesuffix("...") for chunk in chunks) == text

    def test_packing_measures_utf16_units(self):
        text = " ".join(["😀😀😀"] * 15)  # 59 code points, 104 units

        chunks = split_message(text, 70)

        assert len(chunks) == 2
        assert all(utf16_len(chunk) <= 70 for chunk in chunks)


class TestUtf16Len:
    def test_counts_code_units(self):
        assert utf16_len("abc") == 3
        assert utf16_len("😀") == 2
        assert utf16_len("é😀") == 3
