from textwrap import wrap
from typing import List

import inflect

inflect_e = inflect.engine()


def doc_lines(text: str) -> List[str]:
    """Get a description as a set of wrapped lines."""
    docs = (text or "").split("\n")
    result = []
    for i, d in enumerate(docs):
        if i > 0:
            result.append("")
        result.extend(wrap(d.strip(), width=70))
    return result


def count_label(count: int, word: str) -> str:
    """Format a count followed by the singular or plural form of a noun.

    Args:
        count: The number of items.
        word: The noun in singular form, e.g. `entry`.

    Returns:
        A string like `1 entry` or `25 entries`.
    """
    return f"{count} {inflect_e.plural(word, count)}"  # type: ignore
