from __future__ import annotations

import pytest

from web_optimizer.jsx import (
    ComponentVariables,
    component_name,
    jsx_attribute_name,
    style_object,
    svg_to_component,
    svg_to_jsx,
)

ICON = (
    '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" '
    'viewBox="0 0 24 24" class="icon">'
    '<!-- arrow -->'
    '<path d="M 1.0000 2.0000 L 3 4" stroke-width="2" style="fill:none;stroke-linecap:round"/>'
    '<use xlink:href="#a"/>'
    "</svg>"
)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("my-icon.svg", "MyIcon"),
        ("icons/arrow_left.svg", "ArrowLeft"),
        ("chevronDown.svg", "ChevronDown"),
        ("1st-place.svg", "Svg1stPlace"),
        ("---.svg", "SvgComponent"),
    ],
)
def test_component_name(path: str, expected: str) -> None:
    assert component_name(path) == expected


@pytest.mark.parametrize(
    "attr, expected",
    [
        ("stroke-width", "strokeWidth"),
        ("class", "className"),
        ("viewBox", "viewBox"),
        ("data-name", "data-name"),
        ("aria-hidden", "aria-hidden"),
        ("{http://www.w3.org/1999/xlink}href", "xlinkHref"),
        ("{http://www.w3.org/XML/1998/namespace}space", "xmlSpace"),
    ],
)
def test_jsx_attribute_name(attr: str, expected: str) -> None:
    assert jsx_attribute_name(attr) == expected


def test_style_object() -> None:
    assert style_object("fill:red; stroke-width: 2;") == '{{ fill: "red", strokeWidth: "2" }}'
    assert style_object("-webkit-mask:none") == '{{ WebkitMask: "none" }}'
    assert style_object(";") == "{{}}"


def test_svg_to_jsx_spreads_props_on_root() -> None:
    jsx = svg_to_jsx(ICON)

    first_line = jsx.splitlines()[0]
    assert first_line.startswith('<svg xmlns="http://www.w3.org/2000/svg"')
    assert 'xmlnsXlink="http://www.w3.org/1999/xlink"' in first_line
    assert 'className="icon"' in first_line
    assert first_line.endswith("{...props}>")
    assert '<use xlinkHref="#a" />' in jsx
    assert jsx.splitlines()[-1] == "</svg>"


def test_svg_to_component_renders_typed_function_component() -> None:
    code = svg_to_component(ICON, "MyIcon")

    assert "import * as React from 'react';" in code
    assert "import type { SVGProps } from 'react';" in code
    assert "export type MyIconProps = SVGProps<SVGSVGElement>;" in code
    assert "function MyIcon(props: MyIconProps) {" in code
    assert "export default MyIcon;" in code
    # svgo plugin ran first
    assert 'd="M 1 2 L 3 4"' in code
    assert "arrow" not in code
    assert "strokeWidth=\"2\"" in code
    assert 'style={{ fill: "none", strokeLinecap: "round" }}' in code


def test_custom_template_receives_variables() -> None:
    seen: list[ComponentVariables] = []

    def template(variables: ComponentVariables) -> str:
        seen.append(variables)
        return f"export const {variables.component_name} = () => null;\n"

    code = svg_to_component(ICON, "Arrow", template=template)

    assert code == "export const Arrow = () => null;\n"
    assert seen[0].props_type == "ArrowProps"
    assert "{...props}" in seen[0].jsx


def test_plugins_are_checked() -> None:
    with pytest.raises(ValueError):
        svg_to_component(ICON, "Icon", plugins=("svgo",))
    with pytest.raises(ValueError):
        svg_to_component(ICON, "Icon", plugins=("jsx", "prettier"))
