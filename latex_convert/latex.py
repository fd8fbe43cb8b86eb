"""LaTeX source handling: size measurement and special-character escaping."""

MAX_LATEX_LENGTH = 100_000

SPECIAL_CHARS = {
    "#": r"\#",
    "$": r"\$",
    "%": r"\%",
    "&": r"\&",
    "~": r"\~{}",
    "_": r"\_",
    "^": r"\^{}",
    "{": r"\{",
    "}": r"\}",
    "\\": r"\textbackslash{}",
}


def latex_length(text: str) -> int:
    """Length of *text* in UTF-16 code units (what a browser client counts)."""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def well_formed(text: str) -> str:
    """Replace lone surrogates (from JSON escapes like ``\\ud800``) with U+FFFD."""
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def escape_special_chars(text: str) -> str:
    """Escape LaTeX special characters that are not already escaped.

    A backslash and the character after it are copied through untouched, so
    ``\\%`` stays ``\\%`` while a bare ``%`` becomes ``\\%``. A backslash at the
    very end of the text has nothing to escape and becomes
    ``\\textbackslash{}``.

    With escaping on, control sequences written with raw braces
    (``\\section{Intro}``) lose their grouping: the braces turn into
    printable glyphs.
    """
    parts = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\" and i + 1 < n:
            parts.append(text[i:i + 2])
            i += 2
            continue
        parts.append(SPECIAL_CHARS.get(ch, ch))
        i += 1
    return "".join(parts)
