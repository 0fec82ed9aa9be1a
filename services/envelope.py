# services/envelope.py
from typing import Any, Iterable, Tuple
from xml.sax.saxutils import escape

_QUOTES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(value: Any) -> str:
    # & < > plus both quote characters; nothing else is touched
    return escape(str(value), _QUOTES)


def render_element(tag: str, value: Any) -> str:
    return f"<{tag}>{escape_xml(value)}</{tag}>"


def render_fields(obj: Any, tag_map: Iterable[Tuple[str, str]], indent: str = "") -> str:
    """
    Render one element per (attribute, tag) pair, in tag_map order,
    each on its own line with the given indent.
    """
    return "\n".join(f"{indent}{render_element(tag, getattr(obj, attr))}" for attr, tag in tag_map)
