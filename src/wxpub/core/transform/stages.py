"""Platform-compatibility rewrites applied to the rendered article body.

Each stage edits a BeautifulSoup tree in place and only touches its own
element kind; on markup without that construct a stage does nothing. The
target editor drops form controls, tables, rules, links and stylesheets, and
styles native lists unreliably, so those are rewritten into plain styled
paragraphs here.
"""

from bs4 import BeautifulSoup, NavigableString, Tag

from wxpub.config import Theme


LIST_TAGS = ['ul', 'ol']
ITEM_BLOCK_TAGS = {'pre', 'blockquote', 'div', 'section', 'dl', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6'}


def _is_blank(node) -> bool:
    return isinstance(node, NavigableString) and not node.strip()


def _is_checkbox(tag: Tag) -> bool:
    return tag.name == 'input' and (tag.get('type') or '').lower() == 'checkbox'


def _outermost(soup: BeautifulSoup, names: list[str]) -> list[Tag]:
    return [t for t in soup.find_all(names) if t.find_parent(names) is None]


def neutralize_checkboxes(soup: BeautifulSoup, theme: Theme) -> None:
    """Replace checkbox inputs with literal "[x] " / "[ ] " markers."""
    for box in soup.find_all(_is_checkbox):
        marker = "[x] " if box.has_attr('checked') else "[ ] "
        following = box.next_sibling
        if type(following) is NavigableString:
            following.replace_with(NavigableString(following.lstrip()))
        box.replace_with(NavigableString(marker))


def _cell_text(cell: Tag) -> str:
    return " ".join(cell.get_text().split())


def flatten_tables(soup: BeautifulSoup, theme: Theme) -> None:
    """Turn each table into one paragraph: a line per row, cells joined by " | "."""
    for table in _outermost(soup, ['table']):
        lines = [
            " | ".join(_cell_text(cell) for cell in row.find_all(['th', 'td']))
            for row in table.find_all('tr')
        ]
        if not lines:
            table.extract()
            continue
        para = soup.new_tag('p')
        for i, line in enumerate(lines):
            if i:
                para.append(soup.new_tag('br'))
            para.append(NavigableString(line))
        table.replace_with(para)


def remove_rules(soup: BeautifulSoup, theme: Theme) -> None:
    for rule in soup.find_all('hr'):
        rule.extract()


def unwrap_links(soup: BeautifulSoup, theme: Theme) -> None:
    """Keep link text, drop the anchor and its href."""
    for link in soup.find_all('a'):
        if link.parent is not None:
            link.unwrap()


def flatten_item_paragraphs(soup: BeautifulSoup, theme: Theme) -> None:
    """Unwrap <li><p>..</p></li> so items don't get paragraph spacing."""
    for item in soup.find_all('li'):
        content = [c for c in item.contents if not _is_blank(c)]
        if len(content) == 1 and isinstance(content[0], Tag) and content[0].name == 'p':
            for blank in [c for c in item.contents if _is_blank(c)]:
                blank.extract()
            content[0].unwrap()


def remove_empty_items(soup: BeautifulSoup, theme: Theme) -> None:
    """Drop list items with no visible text; items holding an image are kept."""
    for item in soup.find_all('li'):
        if not item.get_text(strip=True) and item.find('img') is None:
            item.extract()


def _trim(nodes: list) -> list:
    """Drop blank edge nodes and strip whitespace off the edge strings."""
    nodes = list(nodes)
    while nodes and _is_blank(nodes[0]):
        nodes.pop(0)
    while nodes and _is_blank(nodes[-1]):
        nodes.pop()
    for i, strip in ((0, str.lstrip), (-1, str.rstrip)):
        if nodes and type(nodes[i]) is NavigableString:
            trimmed = NavigableString(strip(nodes[i]))
            nodes[i].replace_with(trimmed)
            nodes[i] = trimmed
    return nodes


def _item_body(soup: BeautifulSoup, item: Tag) -> tuple[list, list[Tag]]:
    """Split a list item into (inline body, trailing blocks).

    Paragraphs are joined into the body with <br>; code, quotes and other
    blocks cannot sit inside a <p> and are returned to follow it.
    """
    blocks = [
        c.extract() for c in list(item.contents)
        if isinstance(c, Tag) and c.name in ITEM_BLOCK_TAGS
    ]
    content = [c for c in item.contents if not _is_blank(c)]
    paras = [c for c in content if isinstance(c, Tag) and c.name == 'p']
    if paras and len(paras) == len(content):
        body: list = []
        for i, para in enumerate(paras):
            if i:
                body.append(soup.new_tag('br'))
            body.extend(_trim(list(para.contents)))
        return body, blocks
    return _trim(list(item.contents)), blocks


def _has_content(nodes: list) -> bool:
    return any(isinstance(n, Tag) or n.strip() for n in nodes)


def _list_start(lst: Tag) -> int:
    try:
        return int(lst.get('start', 1))
    except (TypeError, ValueError):
        return 1


def _list_paragraphs(soup: BeautifulSoup, lst: Tag, theme: Theme, depth: int) -> list[Tag]:
    ordered = lst.name == 'ol'
    items = [c for c in lst.children if isinstance(c, Tag) and c.name == 'li']
    paragraphs: list[Tag] = []

    for index, item in enumerate(items, start=_list_start(lst)):
        nested = [c.extract() for c in list(item.children) if isinstance(c, Tag) and c.name in LIST_TAGS]
        body, blocks = _item_body(soup, item)
        if _has_content(body):
            lead = theme.list_indent * depth + (f"{index}. " if ordered else theme.bullet)
            if type(body[0]) is NavigableString:
                lead += body.pop(0)
            para = soup.new_tag('p')
            para.append(NavigableString(lead))
            for node in body:
                para.append(node)
            paragraphs.append(para)
        paragraphs.extend(blocks)
        for sub in nested:
            paragraphs.extend(_list_paragraphs(soup, sub, theme, depth + 1))
    return paragraphs


def lists_to_paragraphs(soup: BeautifulSoup, theme: Theme) -> None:
    """Replace <ul>/<ol> with one paragraph per item: "• item" or "N. item".

    Nested lists follow their parent item, indented one step per level. Lists
    buried in other blocks of an item are picked up on the next pass.
    """
    while lists := _outermost(soup, LIST_TAGS):
        for lst in lists:
            for para in _list_paragraphs(soup, lst, theme, 0):
                lst.insert_before(para)
            lst.extract()


def convert_headings(soup: BeautifulSoup, theme: Theme) -> None:
    """Drop <h1> (the title travels separately) and restyle <h2>/<h3>."""
    for h1 in soup.find_all('h1'):
        h1.extract()
    for tag_name, style, span_attrs in (
        ('h2', theme.h2_style, {'leaf': '', 'style': theme.h2_span_style}),
        ('h3', theme.h3_style, {'leaf': ''}),
    ):
        for heading in soup.find_all(tag_name):
            span = soup.new_tag('span', attrs=dict(span_attrs))
            for child in list(heading.contents):
                span.append(child)
            heading.attrs = {'style': style}
            heading.append(span)


def style_paragraphs(soup: BeautifulSoup, theme: Theme) -> None:
    for tag_name, style in (('p', theme.p_style), ('blockquote', theme.blockquote_style)):
        for tag in soup.find_all(tag_name):
            if not tag.get('style'):
                tag['style'] = style


def apply_theme(soup: BeautifulSoup, theme: Theme) -> None:
    """Style links and every code element, then wrap the whole body in a themed container.

    Code blocks also get the block style on their <pre>; the language class is dropped.
    """
    for link in soup.find_all('a'):
        link['style'] = theme.link_style
    for code in soup.find_all('code'):
        if code.parent is not None and code.parent.name == 'pre':
            code.attrs.pop('class', None)
            code.parent['style'] = theme.pre_style
        code['style'] = theme.code_style

    wrapper = soup.new_tag('div', attrs={'style': theme.body_style})
    for child in list(soup.contents):
        wrapper.append(child)
    soup.append(wrapper)
