"""A small, permissive markup layer for single-line or single-anchor fragments.

Pages are never parsed as whole documents.  The scanners cut out a fragment
(one anchor, or one line bearing an identifier), run it through the repair
steps below, and hand the result to a strict XML fragment parser.  Anything
the repairs cannot fix surfaces as :class:`xml.etree.ElementTree.ParseError`
for the caller to record.

Repair steps, each usable on its own:

* :func:`close_open_tag` — append ``>`` to a line whose last tag is cut off.
* :func:`normalize_hidden` — rewrite a bare ``hidden`` attribute as
  ``hidden="true"``.
* :func:`balance_tags` — self-close void elements, drop stray closing tags
  and append synthetic closing tags for anything left open.
* :func:`repair_entities` — turn HTML named entities into numeric character
  references and escape bare ampersands.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from html.entities import name2codepoint

WRAPPER_TAG = "fragment"

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

_XML_ENTITIES = frozenset({"lt", "gt", "amp", "quot", "apos"})

_TAG = re.compile(
    r"<(/?)([A-Za-z][\w:.-]*)((?:[^<>\"']|\"[^\"]*\"|'[^']*')*)>"
)
_OPEN_TAG_BODY = re.compile(r"<[A-Za-z][^<>]*")
_BARE_HIDDEN = re.compile(r"(\"[^\"]*\"|'[^']*')|(\s)hidden(?=[\s/>]|$)(?!\s*=)")
_ENTITY = re.compile(r"&(#\d+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)?")


# ---------------------------------------------------------------------------
# Repair steps
# ---------------------------------------------------------------------------

def close_open_tag(text: str) -> str:
    """Append ``>`` if the last ``<`` in *text* is never closed."""
    if text.rfind("<") > text.rfind(">"):
        return text.rstrip("\r\n") + ">"
    return text


def _hidden_sub(m: re.Match[str]) -> str:
    if m.group(1):
        return m.group(1)
    return m.group(2) + 'hidden="true"'


def normalize_hidden(text: str) -> str:
    """Give bare ``hidden`` attributes inside tags an explicit value."""
    return _OPEN_TAG_BODY.sub(
        lambda m: _BARE_HIDDEN.sub(_hidden_sub, m.group(0)), text
    )


def balance_tags(text: str) -> str:
    """Make every element in *text* properly closed and nested."""
    out: list[str] = []
    stack: list[str] = []
    pos = 0
    for m in _TAG.finditer(text):
        out.append(text[pos:m.start()])
        pos = m.end()
        closing, name, attrs, tag = m.group(1), m.group(2), m.group(3), m.group(0)
        lowered = name.lower()

        if attrs.rstrip().endswith("/"):
            out.append(tag)
        elif lowered in VOID_ELEMENTS:
            if not closing:
                out.append(f"<{name}{attrs.rstrip()}/>")
        elif not closing:
            stack.append(name)
            out.append(tag)
        elif name in stack:
            while stack:
                top = stack.pop()
                if top == name:
                    break
                out.append(f"</{top}>")
            out.append(tag)
        # Stray closing tags for elements opened on other lines are dropped.
    out.append(text[pos:])
    out.extend(f"</{name}>" for name in reversed(stack))
    return "".join(out)


def repair_entities(text: str) -> str:
    """Rewrite entity references so an XML parser accepts them."""

    def _sub(m: re.Match[str]) -> str:
        ref = m.group(1)
        if ref is None:
            return "&amp;"
        if ref.startswith("#"):
            return m.group(0)
        name = ref[:-1]
        if name in _XML_ENTITIES:
            return m.group(0)
        codepoint = name2codepoint.get(name)
        if codepoint is None:
            return "&amp;" + ref
        return f"&#{codepoint};"

    return _ENTITY.sub(_sub, text)


def repair_anchor(anchor: str) -> str:
    """Repair pipeline for a reconstituted ``<a ...>...</a>`` fragment."""
    return repair_entities(balance_tags(anchor))


def repair_id_line(line: str) -> str:
    """Repair pipeline for one identifier-bearing line."""
    line = close_open_tag(line.rstrip("\r\n"))
    line = normalize_hidden(line)
    line = balance_tags(line)
    return repair_entities(line)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_fragment(text: str) -> ET.Element:
    """Parse *text* as a single-root fragment.

    Raises:
        xml.etree.ElementTree.ParseError: If *text* is not well-formed.
    """
    return ET.fromstring(text)


def parse_wrapped(text: str) -> ET.Element:
    """Parse *text*, which may hold several siblings, under a synthetic root."""
    return ET.fromstring(f"<{WRAPPER_TAG}>{text}</{WRAPPER_TAG}>")
