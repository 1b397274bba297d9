"""
SVG minification on top of lxml.

A pass parses the document, applies every cleanup below and serialises it
again. With multipass enabled passes repeat until the text stops changing,
which makes the result a fixed point of ``minify_svg``.
"""

import re
from typing import Optional, Union

from lxml import etree

from .constants import SVG_MAX_PASSES, SVG_PRECISION
from .errors import SvgParseError

EDITOR_NAMESPACES = {
    'http://www.inkscape.org/namespaces/inkscape',
    'http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd',
    'http://www.bohemiancoding.com/sketch/ns',
    'http://ns.adobe.com/AdobeIllustrator/10.0/',
    'http://ns.adobe.com/AdobeSVGViewerExtensions/3.0/',
}

REMOVABLE_ELEMENTS = {'metadata'}
CONTAINER_ELEMENTS = {'g', 'defs', 'symbol', 'mask', 'clipPath', 'pattern', 'marker'}
TEXT_ELEMENTS = {'text', 'tspan', 'textPath'}

NUMERIC_ATTRIBUTES = {
    'd', 'points', 'viewBox', 'transform',
    'x', 'y', 'x1', 'y1', 'x2', 'y2', 'cx', 'cy', 'r', 'rx', 'ry',
    'width', 'height', 'stroke-width', 'opacity', 'fill-opacity',
    'stroke-opacity', 'offset',
}
PATH_ATTRIBUTES = {'d', 'points'}
COLOR_ATTRIBUTES = {'fill', 'stroke', 'stop-color', 'flood-color', 'lighting-color', 'color'}

NUMBER_RE = re.compile(r'-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')
HEX_COLOR_RE = re.compile(r'^#([0-9a-fA-F])\1([0-9a-fA-F])\2([0-9a-fA-F])\3$')
WHITESPACE_RE = re.compile(r'\s+')


def make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
    )


def localname(node) -> str:
    return etree.QName(node).localname


def namespace(node) -> Optional[str]:
    return etree.QName(node).namespace


def format_number(value: float, precision: int = SVG_PRECISION, strip_leading_zero: bool = False) -> str:
    text = f'{round(value, precision):.{precision}f}'.rstrip('0').rstrip('.')
    if text in ('-0', ''):
        text = '0'
    if strip_leading_zero:
        if text.startswith('0.'):
            text = text[1:]
        elif text.startswith('-0.'):
            text = '-' + text[2:]
    return text


def round_numbers(value: str, precision: int = SVG_PRECISION, strip_leading_zero: bool = False) -> str:
    def repl(match):
        token = match.group(0)
        # Integers are left alone so compact arc flags ("011") survive
        if not any(c in token for c in '.eE'):
            return token
        return format_number(float(token), precision, strip_leading_zero)
    return NUMBER_RE.sub(repl, value)


def round_path_data(d: str, precision: int = SVG_PRECISION) -> str:
    """
    Round the numbers of a path `d` attribute.

    Arc flags are single "0"/"1" characters that may touch the next number
    ("a5 5 0 011.5 2" has flags 0, 1 and x 1.5), so the string is walked with
    the path grammar instead of a plain number regex.
    """
    out = []
    command = None
    param = 0
    i = 0
    while i < len(d):
        c = d[i]
        if c.isalpha() and c not in 'eE':
            command, param = c, 0
            out.append(c)
            i += 1
        elif c.isspace() or c == ',':
            out.append(c)
            i += 1
        elif command in ('a', 'A') and param % 7 in (3, 4) and c in '01':
            out.append(c)
            param += 1
            i += 1
        else:
            match = NUMBER_RE.match(d, i)
            if not match:
                out.append(c)
                i += 1
                continue
            out.append(round_numbers(match.group(0), precision, strip_leading_zero=True))
            param += 1
            i = match.end()
    return ''.join(out)


def shorten_color(value: str) -> str:
    value = value.strip()
    if not value.startswith('#'):
        return value
    match = HEX_COLOR_RE.match(value)
    if match:
        return ('#' + ''.join(match.groups())).lower()
    return value.lower()


def _strip_editor_data(root) -> None:
    for el in list(root.iter(tag=etree.Element)):
        if namespace(el) in EDITOR_NAMESPACES or localname(el) in REMOVABLE_ELEMENTS:
            parent = el.getparent()
            if parent is not None:
                parent.remove(el)
            continue
        for attr in list(el.attrib):
            if etree.QName(attr).namespace in EDITOR_NAMESPACES:
                del el.attrib[attr]


def _clean_attributes(root, precision: int) -> None:
    for el in root.iter(tag=etree.Element):
        for attr, value in list(el.attrib.items()):
            name = etree.QName(attr).localname
            value = WHITESPACE_RE.sub(' ', value).strip()
            if name == 'd':
                value = round_path_data(value, precision)
            elif name in NUMERIC_ATTRIBUTES:
                value = round_numbers(value, precision, strip_leading_zero=name in PATH_ATTRIBUTES)
            if name in COLOR_ATTRIBUTES:
                value = shorten_color(value)
            el.attrib[attr] = value


def _strip_whitespace_text(root) -> None:
    for el in root.iter(tag=etree.Element):
        if localname(el) not in TEXT_ELEMENTS and el.text is not None and not el.text.strip():
            el.text = None
        parent = el.getparent()
        in_text = parent is not None and localname(parent) in TEXT_ELEMENTS
        if not in_text and el.tail is not None and not el.tail.strip():
            el.tail = None


def _remove_empty_containers(root) -> None:
    # Reverse document order so emptied parents are seen after their children
    for el in reversed(list(root.iter(tag=etree.Element))):
        if el is root or localname(el) not in CONTAINER_ELEMENTS:
            continue
        if len(el) == 0 and not (el.text and el.text.strip()):
            # An empty element that is referenced by id still has to exist
            if localname(el) != 'g' and el.get('id'):
                continue
            el.getparent().remove(el)


def _collapse_groups(root) -> None:
    for group in list(root.iter(tag=etree.Element)):
        if group is root or localname(group) != 'g' or group.attrib:
            continue
        if group.text and group.text.strip():
            continue
        parent = group.getparent()
        index = parent.index(group)
        for child in reversed(list(group)):
            parent.insert(index, child)
        parent.remove(group)


def parse_svg(data: Union[str, bytes]):
    """
    Parse SVG markup. Bytes are handed to lxml untouched so the XML
    declaration decides the encoding; text is parsed as UTF-8.
    """
    if isinstance(data, str):
        data = data.encode('utf-8')
    try:
        return etree.fromstring(data, make_parser())
    except etree.XMLSyntaxError as e:
        raise SvgParseError(f'invalid SVG: {e}') from e


def minify_pass(text: Union[str, bytes], precision: int = SVG_PRECISION) -> str:
    """Run every cleanup once and return the serialised document."""
    root = parse_svg(text)

    if localname(root) != 'svg':
        raise SvgParseError(f'root element is <{localname(root)}>, expected <svg>')

    _strip_editor_data(root)
    _clean_attributes(root, precision)
    _strip_whitespace_text(root)
    _remove_empty_containers(root)
    _collapse_groups(root)
    etree.cleanup_namespaces(root)

    return etree.tostring(root, encoding='unicode')


def minify_svg(text: Union[str, bytes], multipass: bool = True, precision: int = SVG_PRECISION,
               max_passes: int = SVG_MAX_PASSES) -> str:
    """Minify SVG markup. Raises SvgParseError for malformed input."""
    current = minify_pass(text, precision)
    if not multipass:
        return current

    for _ in range(max_passes - 1):
        result = minify_pass(current, precision)
        if result == current:
            break
        current = result
    return current
