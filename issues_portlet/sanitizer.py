"""Display-name sanitation.

Tool names come from job data and tool registries and are rendered as table
headers, so they are treated as untrusted markup:

    sanitize("<b>Tool</b> <script>x</script>")    -> "<b>Tool</b>"
    plain_text('<i>Spot"Bugs</i>')                -> "Spot&quot;Bugs"

Only a few inline formatting elements survive (without attributes). Elements
that carry executable or non-textual content are removed together with that
content; any other tag is removed and its text kept.
"""

import html
from html.parser import HTMLParser

ALLOWED_TAGS = frozenset({
    "b", "strong", "i", "em", "u", "s", "code", "small", "sub", "sup", "br",
})

_VOID_TAGS = frozenset({"br"})

# Content of these elements is dropped along with the tags
_DROPPED_TAGS = frozenset({
    "script", "style", "iframe", "object", "embed", "noscript",
    "template", "textarea", "title",
})


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sanitize(markup: str) -> str:
    """Return *markup* reduced to whitelisted inline tags and escaped text."""
    return "".join(_parse(markup).markup).strip()


def plain_text(markup: str) -> str:
    """Return the visible text of *markup*, escaped for a quoted attribute."""
    text = "".join(_parse(markup).text).strip()
    return html.escape(text, quote=True)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def _parse(markup: str) -> "_WhitelistParser":
    parser = _WhitelistParser()
    parser.feed(markup or "")
    parser.close()
    return parser


class _WhitelistParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.markup: list[str] = []
        self.text: list[str] = []
        self._open: list[str] = []
        self._dropping: list[str] = []

    def handle_starttag(self, tag, attrs):
        if self._dropping or tag in _DROPPED_TAGS:
            if tag in _DROPPED_TAGS:
                self._dropping.append(tag)
            return
        if tag not in ALLOWED_TAGS:
            return
        self.markup.append(f"<{tag}>")
        if tag not in _VOID_TAGS:
            self._open.append(tag)

    def handle_endtag(self, tag):
        if self._dropping:
            if tag in self._dropping:
                while self._dropping.pop() != tag:
                    pass
            return
        if tag in _VOID_TAGS or tag not in self._open:
            return
        while self._open:
            current = self._open.pop()
            self.markup.append(f"</{current}>")
            if current == tag:
                break

    def handle_data(self, data):
        if self._dropping:
            return
        self.markup.append(html.escape(data, quote=False))
        self.text.append(data)

    def close(self):
        super().close()
        while self._open:
            self.markup.append(f"</{self._open.pop()}>")
