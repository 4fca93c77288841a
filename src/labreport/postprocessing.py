"""Post-processing for generated LaTeX.

The model is told to answer with raw LaTeX, but it sometimes wraps the whole
document in a Markdown code fence anyway::

    ```latex
    \\documentclass{article}
    ...
    ```

Such a fence would make ``report.tex`` fail to compile on its first line, so
an outer fence (with or without a language tag) is removed.  Fences that
appear inside the document body are left alone.
"""

import re

# Opening fence on the first non-blank line: ``` or ```latex / ```tex
_OPENING_FENCE = re.compile(r"\A\s*```[A-Za-z]*[ \t]*\n")
# Closing fence on the last non-blank line
_CLOSING_FENCE = re.compile(r"\n[ \t]*```\s*\Z")


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence wrapped around the whole response.

    Both fences must be present; a lone opening or closing fence is treated
    as document content.  Surrounding whitespace is trimmed and a single
    trailing newline is kept so the file ends cleanly.
    """
    opening = _OPENING_FENCE.search(text)
    closing = _CLOSING_FENCE.search(text)
    if opening and closing and opening.end() <= closing.start():
        text = text[opening.end():closing.start()]

    text = text.strip()
    return text + "\n" if text else ""
