"""Tests for figure payload parsing and composition read-back."""

from __future__ import annotations

import pytest

from figure_composer.engine.placement import FigureRole, Placement
from figure_composer.exceptions import InvalidFigureError, RetrievalError
from figure_composer.svg.parser import parse_composition, parse_figure, parse_transform
from tests.conftest import ACCENT_SVG, BASE_SVG, NOT_SVG, UNSIZED_SVG


def test_parse_sized_payload():
    figure = parse_figure(BASE_SVG, FigureRole.BASE, 3, 100.0)
    assert (figure.width, figure.height) == (480, 480)
    assert figure.role is FigureRole.BASE
    assert figure.identifier == 3
    assert figure.markup.startswith("<svg")
    assert "<?xml" not in figure.markup


def test_unsized_payload_uses_role_default():
    figure = parse_figure(UNSIZED_SVG, FigureRole.ACCENT, 1, 64.0)
    assert (figure.width, figure.height) == (64, 64)
    assert 'width="64"' in figure.markup
    assert 'height="64"' in figure.markup


def test_px_lengths_accepted():
    svg = '<svg xmlns="http://www.w3.org/2000/svg" width="32px" height="16px"></svg>'
    figure = parse_figure(svg, FigureRole.ACCENT, 1, 64.0)
    assert (figure.width, figure.height) == (32, 16)


def test_percentage_length_falls_back_to_default():
    svg = '<svg xmlns="http://www.w3.org/2000/svg" width="100%" height="20"></svg>'
    figure = parse_figure(svg, FigureRole.ACCENT, 1, 64.0)
    assert (figure.width, figure.height) == (64, 20)


def test_markup_stays_in_svg_namespace():
    figure = parse_figure(ACCENT_SVG, FigureRole.ACCENT, 42, 64.0)
    assert 'xmlns="http://www.w3.org/2000/svg"' in figure.markup
    assert "ns0:" not in figure.markup


def test_payload_without_namespace_is_qualified():
    svg = '<svg width="10" height="10"><rect width="10" height="10"/></svg>'
    figure = parse_figure(svg, FigureRole.BASE, 1, 480.0)
    assert 'xmlns="http://www.w3.org/2000/svg"' in figure.markup
    assert "<rect" in figure.markup


@pytest.mark.parametrize("payload", ["", "   ", NOT_SVG, "<svg><unclosed></svg>"])
def test_invalid_payloads_rejected(payload):
    with pytest.raises(InvalidFigureError):
        parse_figure(payload, FigureRole.BASE, 1, 480.0)


def test_invalid_figure_is_a_retrieval_error():
    with pytest.raises(RetrievalError):
        parse_figure(NOT_SVG, FigureRole.BASE, 1, 480.0)


def test_parse_transform():
    assert parse_transform("translate(216,20) scale(0.6)") == Placement(216, 20, 0.6)
    assert parse_transform("translate(-1.5 2)") == Placement(-1.5, 2, 1)
    assert parse_transform("") == Placement(0, 0, 1)


def test_parse_composition_ignores_unknown_children():
    svg = '''<svg xmlns="http://www.w3.org/2000/svg" width="800" height="600" viewBox="0 0 480 360">
  <path id="background" fill="#abcdef" d="M0 0h480v360h-480z"/>
  <g id="base-figure" data-identifier="12" transform="translate(0,0) scale(1)"/>
  <g id="decoration"/>
</svg>'''
    parsed = parse_composition(svg)
    assert (parsed.width, parsed.height) == (800, 600)
    assert parsed.background == "#abcdef"
    assert parsed.placements == {FigureRole.BASE: Placement(0, 0, 1)}
    assert parsed.identifiers == {FigureRole.BASE: 12}
    assert parsed.viewport.height == 360
