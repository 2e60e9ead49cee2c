from __future__ import annotations

import pytest

from pdftoolbox import TextStatistics, run_stats


def test_empty_text_counts_nothing() -> None:
    assert run_stats("") == TextStatistics(0, 0, 0, 0)


def test_blank_text_counts_nothing() -> None:
    assert run_stats("  \n\t \n ") == TextStatistics(0, 0, 0, 0)


def test_single_sentence() -> None:
    stats = run_stats("Hello world.")

    assert stats.words == 2
    assert stats.characters == 12
    assert stats.sentences == 1
    assert stats.paragraphs == 1


def test_lines_are_paragraphs_and_sentences() -> None:
    stats = run_stats("A.\nB.\nC.")

    assert stats.paragraphs == 3
    assert stats.sentences == 3
    assert stats.words == 3


def test_characters_counted_after_trimming() -> None:
    assert run_stats("   padded   ").characters == len("padded")


@pytest.mark.parametrize(
    ("text", "sentences"),
    [
        ("Wait... what?!", 2),
        ("No terminator", 1),
        ("One. Two! Three?", 3),
        ("...", 0),
    ],
)
def test_sentence_boundaries(text: str, sentences: int) -> None:
    assert run_stats(text).sentences == sentences


def test_blank_lines_do_not_add_paragraphs() -> None:
    stats = run_stats("First paragraph.\n\n\nSecond paragraph.")
    assert stats.paragraphs == 2
    assert stats.words == 4


def test_mixed_whitespace_splits_words() -> None:
    assert run_stats("one\ttwo   three\nfour").words == 4


def test_same_input_gives_same_counts() -> None:
    text = "Repeatable text. Counted twice!\nStill the same."
    assert run_stats(text) == run_stats(text)


def test_to_dict() -> None:
    assert run_stats("Hi there.").to_dict() == {
        "words": 2,
        "characters": 9,
        "sentences": 1,
        "paragraphs": 1,
    }


def test_byte_order_mark_is_trimmed() -> None:
    stats = run_stats("\ufeffHello world.")

    assert stats.characters == 12
    assert stats.words == 2


@pytest.mark.parametrize("separator", ["\u00a0", "\u2003", "\u3000", "\ufeff", "\u2028"])
def test_unicode_spaces_separate_words(separator: str) -> None:
    assert run_stats(f"one{separator}two").words == 2


@pytest.mark.parametrize("control", ["\x1c", "\x1d", "\x1e", "\x1f", "\x85"])
def test_separator_controls_are_not_whitespace(control: str) -> None:
    stats = run_stats(f"{control}a{control}b{control}")

    assert stats.words == 1
    assert stats.characters == 5


def test_text_of_unicode_spaces_is_blank() -> None:
    assert run_stats("\ufeff\u00a0\u3000\n") == TextStatistics(0, 0, 0, 0)
