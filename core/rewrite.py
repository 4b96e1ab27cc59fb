"""HTML rewriting: route document links back through the relay.

The pipeline is split into three stages so each can be used on its own:

    soup = parse_document(raw, encoding)
    transform(soup, base_url, rewriter, overlay_html)
    body = serialize_document(soup)
"""

from dataclasses import dataclass
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from bs4.element import Declaration, Doctype

from core.codec import proxied_link

SKIPPED_PREFIXES = ("data:", "javascript:", "#")


@dataclass(frozen=True)
class RewriteRule:
    """A CSS selector and the link-bearing attribute on matching elements."""

    selector: str
    attribute: str


REWRITE_RULES: tuple[RewriteRule, ...] = (
    RewriteRule("a", "href"),
    RewriteRule("img", "src"),
    RewriteRule("script", "src"),
    RewriteRule('link[rel="stylesheet"]', "href"),
    RewriteRule("iframe", "src"),
)


class LinkRewriter:
    """Rewrite link attributes so they resolve to relay URLs."""

    def __init__(
        self,
        base_path: str,
        param: str,
        rules: tuple[RewriteRule, ...] = REWRITE_RULES,
    ) -> None:
        self._base_path = base_path
        self._param = param
        self._rules = rules

    def rewrite_value(self, value: str | None, base_url: str) -> str | None:
        """Return the relay link for ``value``, or None to leave it untouched."""
        if not value:
            return None
        stripped = value.strip()
        if not stripped or stripped.lower().startswith(SKIPPED_PREFIXES):
            return None
        try:
            absolute = urljoin(base_url, stripped)
        except ValueError:
            return None
        return proxied_link(absolute, self._base_path, self._param)

    def rewrite(self, soup: BeautifulSoup, base_url: str) -> int:
        """Rewrite every rule match in place and return the number changed."""
        changed = 0
        for rule in self._rules:
            for element in soup.select(rule.selector):
                value = element.get(rule.attribute)
                if not isinstance(value, str):
                    continue
                new_value = self.rewrite_value(value, base_url)
                if new_value is None:
                    continue
                element[rule.attribute] = new_value
                changed += 1
        return changed


def parse_document(raw: bytes | str, encoding: str | None = None) -> BeautifulSoup:
    """Leniently parse an HTML document.

    Bytes are decoded with ``encoding`` when given, otherwise the parser sniffs
    the document (meta charset, BOM) before falling back to a best guess.
    """
    if isinstance(raw, bytes):
        return BeautifulSoup(raw, "html.parser", from_encoding=encoding)
    return BeautifulSoup(raw, "html.parser")


def ensure_body(soup: BeautifulSoup) -> Tag:
    """Return the body element, creating it when the markup omits the tag.

    ``html.parser`` does not imply a body, so the content following ``<head>``
    (or the whole document when there is no head) is moved into a new one.
    """
    if soup.body is not None:
        return soup.body
    parent: Tag = soup.html if soup.html is not None else soup
    nodes = list(parent.contents)
    head = parent.find("head", recursive=False)
    if head is not None:
        nodes = nodes[parent.index(head) + 1 :]
    body = soup.new_tag("body")
    for node in nodes:
        if isinstance(node, (Doctype, Declaration)):
            continue
        body.append(node.extract())
    parent.append(body)
    return body


def inject_overlay(soup: BeautifulSoup, overlay_html: str) -> None:
    """Insert the overlay fragment before the existing body content."""
    fragment = BeautifulSoup(overlay_html, "html.parser")
    container = ensure_body(soup)
    for node in reversed(list(fragment.contents)):
        container.insert(0, node.extract())


def transform(
    soup: BeautifulSoup,
    base_url: str,
    rewriter: LinkRewriter,
    overlay_html: str | None = None,
) -> int:
    """Rewrite links then prepend the overlay; returns the rewritten count."""
    changed = rewriter.rewrite(soup, base_url)
    if overlay_html:
        inject_overlay(soup, overlay_html)
    return changed


def serialize_document(soup: BeautifulSoup) -> str:
    """Serialize the tree; meta charset declarations become utf-8."""
    return soup.decode(eventual_encoding="utf-8")
