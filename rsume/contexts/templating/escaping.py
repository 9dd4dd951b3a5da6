"""
LaTeX escaping for user-supplied text.

Registered in the Jinja2 environment as the `latex_escape` filter. Templates
apply it exactly once per substitution site; applying it twice double-escapes.
"""

from typing import Any

ESCAPE_FILTER_NAME = "latex_escape"

ESCAPE_MARKER = "\\"

# Escaped by prefixing the marker
MARKER_ESCAPED = frozenset("&%#$_{}")

# No two-character form exists in text mode
REPLACEMENTS = {
    "\\": r"\textbackslash{}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}

SPECIAL_CHARACTERS = MARKER_ESCAPED | frozenset(REPLACEMENTS)


def escape_latex(text: Any) -> str:
    """
    Escape characters that are syntactically significant in LaTeX text mode.

    Walks the input once, character by character, so no replacement can be
    re-escaped by a later one.

    Conversions:
    - & % # $ _ { } → prefixed with a backslash (e.g. % → \\%)
    - \\ → \\textbackslash{}
    - ~ → \\textasciitilde{}
    - ^ → \\textasciicircum{}

    Args:
        text: Plain text. None renders as an empty string; other
              non-string values (e.g. a GPA) are converted with str()

    Returns:
        LaTeX-safe string

    Example:
        >>> escape_latex("R&D at 100% #1")
        'R\\\\&D at 100\\\\% \\\\#1'
    """
    if text is None:
        return ""

    escaped = []
    for char in str(text):
        if char in MARKER_ESCAPED:
            escaped.append(ESCAPE_MARKER + char)
        else:
            escaped.append(REPLACEMENTS.get(char, char))
    return "".join(escaped)
