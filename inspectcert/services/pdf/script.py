from typing import Optional


# Hangul syllables, Hangul Jamo, Hangul compatibility Jamo
TARGET_SCRIPT_RANGES = (
    (0xAC00, 0xD7AF),
    (0x1100, 0x11FF),
    (0x3130, 0x318F),
)


def contains_target_script(text: Optional[str]) -> bool:
    """True if any code point of `text` is Korean script."""
    if not text:
        return False
    return any(
        low <= ord(char) <= high
        for char in text
        for low, high in TARGET_SCRIPT_RANGES
    )
