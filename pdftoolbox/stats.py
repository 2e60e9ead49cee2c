"""Word, character, sentence and paragraph counts."""

import re
from dataclasses import dataclass

# Whitespace as browsers see it for String.prototype.trim and /\s/.
# Unlike str.isspace this includes U+FEFF and excludes U+001C..U+001F and U+0085.
WHITESPACE_CHARS = (
    "\t\n\v\f\r \u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)

_WHITESPACE = re.compile("[" + re.escape(WHITESPACE_CHARS) + "]+")
_SENTENCE_END = re.compile(r"[.!?]+")
_NEWLINES = re.compile(r"\n+")


@dataclass(frozen=True)
class TextStatistics:
    """Counts derived from a piece of text."""
    words: int = 0
    characters: int = 0
    sentences: int = 0
    paragraphs: int = 0

    def to_dict(self) -> dict:
        return {
            "words": self.words,
            "characters": self.characters,
            "sentences": self.sentences,
            "paragraphs": self.paragraphs,
        }


def run_stats(text: str) -> TextStatistics:
    """
    Count words, characters, sentences and paragraphs.

    Leading and trailing whitespace is ignored, using the same whitespace
    set as a browser so counts match the page. Characters are counted on
    the trimmed text. Sentences end at runs of ``.``, ``!`` or ``?`` and
    paragraphs at runs of newlines; empty segments are not counted.

    Args:
        text: Text to measure

    Returns:
        TextStatistics, all zero for empty or blank text
    """
    value = text.strip(WHITESPACE_CHARS)
    if not value:
        return TextStatistics()

    return TextStatistics(
        words=len(_WHITESPACE.split(value)),
        characters=len(value),
        sentences=len([s for s in _SENTENCE_END.split(value) if s]),
        paragraphs=len([p for p in _NEWLINES.split(value) if p]),
    )
