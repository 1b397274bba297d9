"""
SVG to typed React component.

``svg_to_component`` runs a list of plugins over the markup ("svgo" minifies,
"jsx" turns the document into JSX) and hands the result to a template
callback that produces the final TypeScript source.
"""

import json
import os
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from lxml import etree

from .svg import localname, minify_svg, parse_svg

XML_NS = 'http://www.w3.org/XML/1998/namespace'
XLINK_NS = 'http://www.w3.org/1999/xlink'

DEFAULT_PLUGINS: Tuple[str, ...] = ('svgo', 'jsx')
KNOWN_PLUGINS = {'svgo', 'jsx'}

RENAMED_ATTRIBUTES = {
    'class': 'className',
    'for': 'htmlFor',
    'tabindex': 'tabIndex',
}


@dataclass(frozen=True)
class ComponentVariables:
    """Everything a template needs to render a component module."""

    component_name: str
    props_type: str
    jsx: str


Template = Callable[[ComponentVariables], str]


def component_name(path: str) -> str:
    """'my-icon.svg' -> 'MyIcon'."""
    stem = os.path.splitext(os.path.basename(path))[0]
    parts = [p for p in re.split(r'[^0-9A-Za-z]+', stem) if p]
    name = ''.join(p[:1].upper() + p[1:] for p in parts)
    if not name:
        return 'SvgComponent'
    if name[0].isdigit():
        name = 'Svg' + name
    return name


def camel_case(name: str) -> str:
    head, *rest = name.split('-')
    return head + ''.join(p[:1].upper() + p[1:] for p in rest)


def jsx_attribute_name(attr: str) -> str:
    qname = etree.QName(attr)
    if qname.namespace == XML_NS:
        return 'xml' + qname.localname[:1].upper() + qname.localname[1:]
    if qname.namespace == XLINK_NS:
        return 'xlink' + qname.localname[:1].upper() + qname.localname[1:]

    name = qname.localname
    if name in RENAMED_ATTRIBUTES:
        return RENAMED_ATTRIBUTES[name]
    if name.startswith(('data-', 'aria-')):
        return name
    return camel_case(name.replace(':', '-'))


def style_object(style: str) -> str:
    """'fill:red;stroke-width:2' -> '{{ fill: "red", strokeWidth: "2" }}'."""
    entries = []
    for declaration in style.split(';'):
        prop, sep, value = declaration.partition(':')
        prop, value = prop.strip(), value.strip()
        if not sep or not prop:
            continue
        if prop.startswith('-'):
            # Vendor prefixes are capitalised: -webkit-mask -> WebkitMask
            key = camel_case(prop[1:])
            key = key[:1].upper() + key[1:]
        else:
            key = camel_case(prop)
        entries.append(f'{key}: {json.dumps(value)}')
    if not entries:
        return '{{}}'
    return '{{ ' + ', '.join(entries) + ' }}'


def jsx_attribute_value(value: str) -> str:
    if any(c in value for c in '"&\\'):
        return '{' + json.dumps(value) + '}'
    return f'"{value}"'


def jsx_text(text: str) -> Optional[str]:
    text = text.strip()
    if not text:
        return None
    if any(c in text for c in '{}<>&'):
        return '{' + json.dumps(text) + '}'
    return text


def _namespace_attributes(el) -> List[str]:
    parent = el.getparent()
    inherited = parent.nsmap if parent is not None else {}
    attrs = []
    # Default namespace first, then prefixes alphabetically
    declared = sorted(el.nsmap.items(), key=lambda item: (item[0] is not None, item[0] or ''))
    for prefix, uri in declared:
        if inherited.get(prefix) == uri:
            continue
        if prefix is None:
            attrs.append(f'xmlns="{uri}"')
        else:
            attrs.append(f'{jsx_attribute_name("xmlns-" + prefix)}="{uri}"')
    return attrs


def render_element(el, depth: int = 0, spread_props: bool = False) -> List[str]:
    pad = '  ' * depth
    tag = localname(el)

    attrs = _namespace_attributes(el)
    for attr, value in el.attrib.items():
        name = jsx_attribute_name(attr)
        if name == 'style':
            attrs.append(f'style={style_object(value)}')
        else:
            attrs.append(f'{name}={jsx_attribute_value(value)}')
    if spread_props:
        attrs.append('{...props}')

    opening = f'{pad}<{tag}' + ''.join(' ' + a for a in attrs)

    children: List[str] = []
    text = jsx_text(el.text or '')
    if text:
        children.append(f'{pad}  {text}')
    for child in el.iterchildren(tag=etree.Element):
        children.extend(render_element(child, depth + 1))
        tail = jsx_text(child.tail or '')
        if tail:
            children.append(f'{pad}  {tail}')

    if not children:
        return [opening + ' />']
    return [opening + '>'] + children + [f'{pad}</{tag}>']


def svg_to_jsx(svg_text: Union[str, bytes], depth: int = 0) -> str:
    """Convert SVG markup to a JSX expression with ``{...props}`` on the root."""
    root = parse_svg(svg_text)
    return '\n'.join(render_element(root, depth, spread_props=True))


def typescript_template(variables: ComponentVariables) -> str:
    """Default module layout: imports, props type, function component, export."""
    name = variables.component_name
    props = variables.props_type
    return (
        "import * as React from 'react';\n"
        "import type { SVGProps } from 'react';\n"
        "\n"
        f"export type {props} = SVGProps<SVGSVGElement>;\n"
        "\n"
        f"function {name}(props: {props}) {{\n"
        "  return (\n"
        f"{variables.jsx}\n"
        "  );\n"
        "}\n"
        "\n"
        f"export default {name};\n"
    )


def svg_to_component(svg_text: Union[str, bytes], name: str,
                     plugins: Sequence[str] = DEFAULT_PLUGINS,
                     template: Template = typescript_template) -> str:
    """Run ``plugins`` over the markup and render it with ``template``."""
    unknown = set(plugins) - KNOWN_PLUGINS
    if unknown:
        raise ValueError(f'unknown plugins: {", ".join(sorted(unknown))}')
    if 'jsx' not in plugins:
        raise ValueError('the "jsx" plugin is required to build a component')

    if 'svgo' in plugins:
        svg_text = minify_svg(svg_text, multipass=True)

    variables = ComponentVariables(
        component_name=name,
        props_type=f'{name}Props',
        jsx=svg_to_jsx(svg_text, depth=2),
    )
    return template(variables)
