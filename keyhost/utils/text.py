"""
Text helpers shared by the API, the maintenance commands and the client form.
"""

import unicodedata
from typing import Optional


class TextUtils:
    """
    Static helpers for cleaning user supplied text.
    """

    # Punctuation kept by sanitize_text in addition to letters, marks, digits and whitespace
    ALLOWED_PUNCTUATION = set(".,!?'\"():/&-")

    @staticmethod
    def sanitize_text(value: Optional[str]) -> Optional[str]:
        """
        Drop every character that is not a letter, combining mark, digit,
        whitespace or one of ``.,!?'"():/&-``.

        Works for any script, so Bengali or Arabic titles survive intact.
        """
        if not value:
            return value

        kept = []
        for ch in value:
            if ch.isspace() or ch in TextUtils.ALLOWED_PUNCTUATION:
                kept.append(ch)
            elif unicodedata.category(ch)[0] in ("L", "M", "N"):
                kept.append(ch)
        return "".join(kept)

    @staticmethod
    def _legacy_bytes(value: str) -> bytes:
        """
        Recover the bytes a Latin-1 column would have held for ``value``.

        MySQL's latin1 is cp1252 with the five undefined cp1252 bytes passed
        through, so each character is tried as cp1252 first and then as a raw
        byte. Raises UnicodeEncodeError for characters above U+00FF.
        """
        out = bytearray()
        for ch in value:
            try:
                out += ch.encode("cp1252")
            except UnicodeEncodeError:
                if ord(ch) > 0xFF:
                    raise
                out.append(ord(ch))
        return bytes(out)

    @staticmethod
    def repair_mojibake(value: Optional[str]) -> Optional[str]:
        """
        Undo UTF-8 text that was decoded as Latin-1 before being stored.

        ``"CafÃ©"`` becomes ``"Café"``. Values that are plain ASCII, contain
        characters outside Latin-1, or whose recovered bytes are not valid
        UTF-8 are returned unchanged, so clean text is never damaged.

        Args:
            value: Possibly corrupted text

        Returns:
            Repaired text, or the original value when no repair applies
        """
        if not value or value.isascii():
            return value

        try:
            return TextUtils._legacy_bytes(value).decode("utf-8")
        except (UnicodeEncodeError, UnicodeDecodeError):
            return value

    @staticmethod
    def needs_encoding_repair(value: Optional[str]) -> bool:
        """Whether repair_mojibake would change the value."""
        return bool(value) and TextUtils.repair_mojibake(value) != value
