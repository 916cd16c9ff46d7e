"""
Message splitting for Telegram's per-message character limit.

Long text is broken down hierarchically: paragraphs first, then sentences,
then words, and as a last resort fixed-size character windows. Units are
packed greedily so every segment stays as close to the limit as possible.
"""

import re

# Telegram's documented message length ceiling
TELEGRAM_MESSAGE_LIMIT = 4096

# Below this the character-window fallback degenerates (window of <= 7 chars)
MIN_SEGMENT_LENGTH = 10

CONTINUATION_MARKER = "..."

PARAGRAPH_BREAK = "\n\n"
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def split_message(text: str, max_length: int = TELEGRAM_MESSAGE_LIMIT) -> list[str]:
    """
    Split text into ordered segments of at most max_length UTF-16 code units.

    Splits at paragraph breaks where possible, falling back to sentence,
    word and finally raw character boundaries only for units that are still
    too long on their own. Segments are stripped of surrounding whitespace
    and empty segments are dropped.

    Args:
        text: The message text to split
        max_length: Maximum length per segment (default: 4096)

    Returns:
        List of segments in source order. Empty for blank input.

    Raises:
        ValueError: If max_length is below MIN_SEGMENT_LENGTH

    Example:
        >>> split_message("First paragraph.\\n\\nSecond paragraph.", max_length=20)
        ['First paragraph.', 'Second paragraph.']
    """
    if max_length < MIN_SEGMENT_LENGTH:
        raise ValueError(
            f"max_length must be at least {MIN_SEGMENT_LENGTH}, got {max_length}"
        )

    if not text.strip():
        return []

    if utf16_len(text) <= max_length:
        return [text.strip()]

    chunks: list[str] = []
    current = ""
    current_len = 0

    def flush() -> None:
        nonlocal current, current_len
        chunk = current.strip()
        if chunk:
            chunks.append(chunk)
        current = ""
        current_len = 0

    def pack(unit: str, unit_len: int, separator: str) -> None:
        nonlocal current, current_len
        if not current:
            current, current_len = unit, unit_len
            return
        candidate_len = current_len + len(separator) + unit_len
        if candidate_len > max_length:
            flush()
            current, current_len = unit, unit_len
        else:
            current = f"{current}{separator}{unit}"
            current_len = candidate_len

    for paragraph in text.split(PARAGRAPH_BREAK):
        paragraph_len = utf16_len(paragraph)
        if paragraph_len <= max_length:
            pack(paragraph, paragraph_len, PARAGRAPH_BREAK)
            continue

        flush()
        for sentence in SENTENCE_BOUNDARY.split(paragraph):
            sentence_len = utf16_len(sentence)
            if sentence_len <= max_length:
                pack(sentence, sentence_len, " ")
                continue

            flush()
            for word in sentence.split(" "):
                word_len = utf16_len(word)
                if word_len <= max_length:
                    pack(word, word_len, " ")
                    continue

                flush()
                chunks.extend(slice_word(word, max_length))

    flush()
    return chunks


def utf16_len(text: str) -> int:
    """Length in UTF-16 code units, the unit Telegram measures messages in."""
    return len(text.encode("utf-16-le")) // 2


def slice_word(word: str, max_length: int) -> list[str]:
    """Cut an unbreakable word into windows, marking all but the last as continued.

    Windows are measured in UTF-16 code units and never split a character.
    Windows are stripped, and blank ones are dropped.
    """
    window = max_length - len(CONTINUATION_MARKER)
    pieces = []
    piece: list[str] = []
    piece_len = 0
    for char in word:
        char_len = 2 if ord(char) > 0xFFFF else 1
        if piece and piece_len + char_len > window:
            pieces.append("".join(piece))
            piece, piece_len = [], 0
        piece.append(char)
        piece_len += char_len
    if piece:
        pieces.append("".join(piece))

    marked = [p + CONTINUATION_MARKER for p in pieces[:-1]] + pieces[-1:]
    return [p.strip() for p in marked if p.strip()]
