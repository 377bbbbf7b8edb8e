"""Tests for payload hygiene."""

from __future__ import annotations

from figure_composer.engine.placement import FigureRole
from figure_composer.svg.parser import parse_figure
from figure_composer.svg.sanitizer import strip_ns, strip_prolog
from tests.conftest import HOSTILE_SVG


def _markup() -> str:
    return parse_figure(HOSTILE_SVG, FigureRole.ACCENT, 1, 64.0).markup


def test_active_content_removed():
    markup = _markup()
    assert "script" not in markup
    assert "foreignObject" not in markup
    assert "<div" not in markup


def test_event_handlers_removed():
    markup = _markup()
    assert "onload" not in markup
    assert "onclick" not in markup


def test_external_href_removed_local_kept():
    markup = _markup()
    assert "example.com" not in markup
    assert 'xlink:href="#px"' in markup


def test_comments_removed():
    assert "tracking pixel" not in _markup()


def test_position_attributes_dropped():
    markup = _markup()
    assert 'x="5"' not in markup
    assert 'y="7"' not in markup


def test_visual_content_kept():
    markup = _markup()
    assert "#123456" in markup
    assert "<use" in markup


def test_strip_prolog():
    text = '<?xml version="1.0"?>\n<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" "x.dtd">\n<!-- c --><svg/>'
    assert strip_prolog(text) == "<svg/>"


def test_strip_ns():
    assert strip_ns("{http://www.w3.org/2000/svg}rect") == "rect"
    assert strip_ns("rect") == "rect"
