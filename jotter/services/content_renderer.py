"""
Jotter: Content Renderer
==========================

What:  Turns stored note text into display HTML, and builds list previews.
How:   Python-Markdown with nl2br, so a single newline becomes <br>. The
       HTML is then cleaned with bleach: tags outside the Markdown allowlist
       are escaped, event-handler attributes are dropped, and link targets
       are limited to http, https and mailto.
Who:   Registered as the `markdownify` and `preview` Jinja filters by
       PageRenderer.

Failure Policy:
    Rendering never fails a request. If Markdown raises, the raw content is
    returned as escaped text and a warning is logged.
"""

import logging

import bleach
import markdown
from markupsafe import Markup, escape

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

MARKDOWN_EXTENSIONS = ["nl2br", "fenced_code", "tables", "sane_lists"]

ALLOWED_TAGS = frozenset({
    "a", "abbr", "blockquote", "br", "code", "em", "h1", "h2", "h3", "h4",
    "h5", "h6", "hr", "img", "li", "ol", "p", "pre", "strong", "table",
    "tbody", "td", "th", "thead", "tr", "ul",
})

ALLOWED_ATTRIBUTES = {
    "a": ["href", "title"],
    "abbr": ["title"],
    "code": ["class"],
    "img": ["src", "alt", "title"],
    "th": ["align"],
    "td": ["align"],
}

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})


class ContentRenderer:
    """
    Attributes:
        preview_length: character budget for list previews (default 100)
    """

    def __init__(self, preview_length: int = 100):
        self.preview_length = preview_length

    def render(self, raw: str) -> Markup:
        """
        Convert markdown/plain text to HTML.

        Example:
            "Hello\\n**world**" → "<p>Hello<br>\\n<strong>world</strong></p>"
        """
        if not raw:
            return Markup("")
        try:
            html = markdown.markdown(raw, extensions=MARKDOWN_EXTENSIONS)
        except Exception as e:
            logger.warning("Markdown rendering failed, showing raw content: %s", str(e))
            return escape(raw)
        return Markup(bleach.clean(
            html,
            tags=ALLOWED_TAGS,
            attributes=ALLOWED_ATTRIBUTES,
            protocols=ALLOWED_PROTOCOLS,
        ))

    def preview(self, raw: str) -> str:
        """
        Shorten content for the list page.

        Rules:
            - content with a line break → first line + "..."
            - single line over the budget → first `preview_length` chars + "..."
            - anything else is returned unchanged
        """
        if not raw:
            return ""
        first_line, newline, _ = raw.partition("\n")
        first_line = first_line.rstrip("\r")
        if len(first_line) > self.preview_length:
            return first_line[: self.preview_length] + ELLIPSIS
        if newline:
            return first_line + ELLIPSIS
        return first_line
