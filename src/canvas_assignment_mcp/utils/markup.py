"""Assignment description markup helpers.

Canvas assignment descriptions are author-supplied HTML. These helpers
never parse it into a tree: each conversion is a fixed, ordered list of
case-insensitive regex substitutions applied once to the whole string.
Deeply nested or overlapping markup (a list inside a paragraph, a heading
spanning lines) may therefore render imperfectly; that is accepted.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Tuple, Union

from ..schemas import Link

_I = re.IGNORECASE
_IS = re.IGNORECASE | re.DOTALL

_TAG = re.compile(r"<[^>]+>")
_LI = re.compile(r"<li>(.*?)</li>", _I)
_ANCHOR = re.compile(r"<a [^>]*href=[\"']([^\"']+)[\"'][^>]*>(.*?)</a>", _I)

Replacement = Union[str, Callable[["re.Match[str]"], str]]


def _numbered_items(block: "re.Match[str]") -> str:
    counter = 0

    def number(item: "re.Match[str]") -> str:
        nonlocal counter
        counter += 1
        return f"{counter}. {item.group(1)}\n"

    return _LI.sub(number, block.group(0))


def _bulleted_items(block: "re.Match[str]") -> str:
    return _LI.sub(lambda item: f"- {item.group(1)}\n", block.group(0))


# Order matters: inline emphasis before list items, lists before line and
# paragraph breaks, and the catch-all tag removal last.
MARKDOWN_RULES: List[Tuple["re.Pattern[str]", Replacement]] = [
    (re.compile(r"<h1[^>]*>(.*?)</h1>", _I), r"# \1\n\n"),
    (re.compile(r"<h2[^>]*>(.*?)</h2>", _I), r"## \1\n\n"),
    (re.compile(r"<h3[^>]*>(.*?)</h3>", _I), r"### \1\n\n"),
    (re.compile(r"<strong>(.*?)</strong>", _I), r"**\1**"),
    (re.compile(r"<b>(.*?)</b>", _I), r"**\1**"),
    (re.compile(r"<em>(.*?)</em>", _I), r"*\1*"),
    (re.compile(r"<i>(.*?)</i>", _I), r"*\1*"),
    (re.compile(r"<ul>(.*?)</ul>", _IS), _bulleted_items),
    (re.compile(r"<ol>(.*?)</ol>", _IS), _numbered_items),
    # A break already followed by a newline is left to the tag-removal rule.
    (re.compile(r"<br\s*/?>(?!\n)", _I), "\n"),
    (re.compile(r"<p[^>]*>(.*?)</p>", _I), r"\1\n\n"),
    (_TAG, ""),
]


def strip_to_plain_text(markup: Optional[str]) -> str:
    """Remove every tag and decode ``&nbsp;`` and ``&amp;``.

    No other entities are decoded and whitespace is left as stripping
    leaves it.

    Example:
        >>> strip_to_plain_text("<b>Hi</b>&nbsp;there")
        'Hi there'
    """

    if not markup:
        return ""
    text = _TAG.sub("", markup)
    return text.replace("&nbsp;", " ").replace("&amp;", "&")


def to_constrained_markdown(markup: Optional[str]) -> str:
    """Convert description markup to the constrained Markdown dialect.

    Supports headings 1-3, bold, italic, unordered and ordered lists, line
    breaks and paragraphs; any other tag is dropped, keeping its text.
    """

    if not markup:
        return ""
    text = markup
    for pattern, replacement in MARKDOWN_RULES:
        text = pattern.sub(replacement, text)
    return text


def extract_links(markup: Optional[str]) -> List[Link]:
    """Return ``<a href=...>text</a>`` anchors in source order.

    Anchors without a closing tag or with empty text are not reported.
    """

    if not markup:
        return []
    links: List[Link] = []
    for match in _ANCHOR.finditer(markup):
        href, text = match.group(1), match.group(2)
        if not text.strip():
            continue
        links.append(Link(text=text, href=href))
    return links
