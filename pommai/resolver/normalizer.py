"""Canonical form for transcripts and trigger phrases.

Lower-cases, turns whitespace and punctuation runs into single spaces and
drops everything that is not a letter, combining mark or digit.  Combining
marks are kept because Tamil vowel signs and the pulli are marks, not
letters; dropping them would turn "உட்கார்" into "உடகர".
"""

import unicodedata

_SEPARATOR = " "


def _char_class(char: str) -> str:
    """Return "keep", "space" or "drop" for a single character."""
    if char.isspace():
        return "space"
    category = unicodedata.category(char)
    if category[0] in ("L", "M", "N"):
        return "keep"
    if category[0] == "P":
        return "space"
    return "drop"


def normalize(text: str) -> str:
    """Return the canonical form of *text*.

    Idempotent: ``normalize(normalize(x)) == normalize(x)``.  The result has
    no leading, trailing or doubled spaces and may be empty.
    """
    if not text:
        return ""

    out: list[str] = []
    for char in text.lower():
        kind = _char_class(char)
        if kind == "keep":
            out.append(char)
        elif kind == "space":
            if out and out[-1] != _SEPARATOR:
                out.append(_SEPARATOR)

    collapsed = "".join(out).strip(_SEPARATOR)
    # Composition last: dropping a symbol can leave a base letter and a
    # mark adjacent.
    return unicodedata.normalize("NFC", collapsed)


def tokenize(text: str) -> list[str]:
    """Normalize *text* and split it into non-empty words."""
    return [word for word in normalize(text).split(_SEPARATOR) if word]


def strip_marks(text: str) -> str:
    """Remove combining marks, e.g. the pulli in "க்" -> "க"."""
    decomposed = unicodedata.normalize("NFD", text)
    base = "".join(c for c in decomposed if not unicodedata.category(c).startswith("M"))
    return unicodedata.normalize("NFC", base)
