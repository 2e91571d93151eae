import json

import pytest

import design_radar.normalizer as normalizer
from design_radar.errors import PreconditionError
from design_radar.rules import FilterRules


def test_filter_node_keeps_developer_relevant_properties():
    node = {
        'id': '1:1',
        'name': 'Test Button',
        'type': 'RECTANGLE',
        'visible': True,
        'opacity': 1,
        'fills': [{'blendMode': 'NORMAL', 'type': 'SOLID', 'color': {'r': 1, 'g': 0, 'b': 0, 'a': 1}}],
        'cornerRadius': 8,
        'absoluteBoundingBox': {'x': 10, 'y': 20, 'width': 100, 'height': 40},
        # dropped
        'blendMode': 'PASS_THROUGH',
        'constraints': {'vertical': 'TOP', 'horizontal': 'LEFT'},
        'exportSettings': [],
        'preserveRatio': False,
        'effects': [],
    }

    filtered = normalizer.filter_node(node)

    assert filtered == {
        'id': '1:1',
        'name': 'Test Button',
        'type': 'RECTANGLE',
        'fills': [{'type': 'SOLID', 'color': '#FF0000'}],
        'cornerRadius': 8,
        'bounds': {'x': 10, 'y': 20, 'w': 100, 'h': 40},
    }


def test_filter_node_omits_defaults():
    node = {
        'id': '1:1',
        'name': 'Test',
        'type': 'FRAME',
        'visible': True,
        'opacity': 1,
        'strokeWeight': 0,
        'cornerRadius': 0,
        'itemSpacing': 0,
        'paddingLeft': 0,
        'paddingRight': 0,
        'paddingTop': 0,
        'paddingBottom': 0,
        'layoutMode': 'NONE',
    }

    assert normalizer.filter_node(node) == {'id': '1:1', 'name': 'Test', 'type': 'FRAME'}


def test_filter_node_keeps_non_default_values():
    node = {'id': '1:1', 'visible': False, 'opacity': 0.5, 'layoutMode': 'VERTICAL', 'itemSpacing': 4}
    filtered = normalizer.filter_node(node)
    assert filtered['visible'] is False
    assert filtered['opacity'] == 0.5
    assert filtered['layoutMode'] == 'VERTICAL'
    assert filtered['itemSpacing'] == 4


def test_opacity_one_and_absent_normalize_identically():
    base = {'id': '3:1', 'name': 'Card', 'type': 'FRAME', 'cornerRadius': 4}
    with_opacity = dict(base, opacity=1)
    assert normalizer.filter_node(with_opacity) == normalizer.filter_node(base)


def test_rgba_colors_become_hex():
    node = {
        'id': '1:1',
        'type': 'RECTANGLE',
        'fills': [{'type': 'SOLID', 'color': {'r': 0.2, 'g': 0.4, 'b': 0.9, 'a': 1}}],
    }
    assert normalizer.filter_node(node)['fills'][0]['color'] == '#3366E6'


def test_hidden_fills_are_dropped():
    node = {
        'id': '1:1',
        'fills': [
            {'type': 'SOLID', 'color': {'r': 1, 'g': 0, 'b': 0, 'a': 1}, 'visible': False},
            {'type': 'SOLID', 'color': {'r': 0, 'g': 1, 'b': 0, 'a': 1}},
        ],
    }
    filtered = normalizer.filter_node(node)
    assert filtered['fills'] == [{'type': 'SOLID', 'color': '#00FF00'}]


def test_all_hidden_or_empty_paints_omit_property():
    node = {
        'id': '1:1',
        'fills': [{'type': 'SOLID', 'color': {'r': 1, 'g': 0, 'b': 0}, 'visible': False}],
        'strokes': [],
    }
    filtered = normalizer.filter_node(node)
    assert 'fills' not in filtered
    assert 'strokes' not in filtered


def test_paint_opacity_alpha_gradient_and_image():
    paints = [
        {'type': 'SOLID', 'opacity': 0.8, 'color': {'r': 0, 'g': 0, 'b': 0, 'a': 0.25}},
        {'type': 'SOLID', 'opacity': 1, 'color': {'r': 0, 'g': 0, 'b': 0, 'a': 1}},
        {
            'type': 'GRADIENT_RADIAL',
            'gradientStops': [
                {'color': {'r': 1, 'g': 1, 'b': 1, 'a': 1}, 'position': 0},
                {'color': {'r': 0, 'g': 0, 'b': 0, 'a': 1}, 'position': 1},
            ],
        },
        {'type': 'IMAGE', 'imageRef': 'abc123', 'scaleMode': 'FILL'},
    ]

    assert normalizer.simplify_paints(paints) == [
        {'type': 'SOLID', 'color': '#000000', 'alpha': 0.25, 'opacity': 0.8},
        {'type': 'SOLID', 'color': '#000000'},
        {'type': 'GRADIENT_RADIAL', 'stops': [
            {'color': '#FFFFFF', 'pos': 0},
            {'color': '#000000', 'pos': 1},
        ]},
        {'type': 'IMAGE', 'imageRef': 'abc123', 'scaleMode': 'FILL'},
    ]


def test_background_color_and_alpha():
    node = {'id': '0:1', 'backgroundColor': {'r': 1, 'g': 1, 'b': 1, 'a': 0.5}}
    filtered = normalizer.filter_node(node)
    assert filtered['backgroundColor'] == '#FFFFFF'
    assert filtered['backgroundAlpha'] == 0.5


def test_bounding_box_is_rounded():
    node = {'id': '1:1', 'absoluteBoundingBox': {'x': 10.4, 'y': 20.5, 'width': 99.6, 'height': 40.49}}
    assert normalizer.filter_node(node)['bounds'] == {'x': 10, 'y': 21, 'w': 100, 'h': 40}


def test_children_are_filtered_recursively():
    node = {
        'id': '1:1',
        'name': 'Parent',
        'type': 'FRAME',
        'children': [
            {'id': '1:2', 'name': 'Child', 'type': 'TEXT', 'characters': 'Hello', 'blendMode': 'PASS_THROUGH'},
        ],
    }
    filtered = normalizer.filter_node(node)
    assert len(filtered['children']) == 1
    assert filtered['children'][0]['characters'] == 'Hello'
    assert 'blendMode' not in filtered['children'][0]


def test_empty_children_leave_no_key():
    assert 'children' not in normalizer.filter_node({'id': '1:1', 'children': []})


def test_text_style_is_hoisted():
    node = {
        'id': '1:1',
        'type': 'TEXT',
        'fontSize': 18,
        'style': {'fontFamily': 'Inter', 'fontSize': 12, 'fontWeight': 400},
    }
    filtered = normalizer.filter_node(node)
    assert filtered['fontFamily'] == 'Inter'
    assert filtered['fontWeight'] == 400
    # top level wins
    assert filtered['fontSize'] == 18
    assert 'style' not in filtered


def test_text_style_hoisting_can_be_disabled():
    rules = FilterRules(hoist_text_style=False)
    filtered = normalizer.filter_node({'id': '1:1', 'style': {'fontSize': 12}}, rules)
    assert 'fontSize' not in filtered


def test_node_without_id_is_rejected():
    with pytest.raises(PreconditionError):
        normalizer.filter_node({'name': 'Orphan'})


def test_filter_file_builds_pages(figma_sample):
    filtered = normalizer.filter_file(figma_sample)

    assert filtered['name'] == 'My Figma Design'
    assert filtered['version'] == 'v1'
    assert len(filtered['pages']) == 1
    page = filtered['pages'][0]
    assert page['id'] == '0:1'
    assert page['name'] == 'Home Page'
    assert [n['name'] for n in page['children']] == ['Header', 'Hero Section']


def test_filter_file_sample_details(base_filtered):
    header, hero = base_filtered['pages'][0]['children']

    assert header['bounds'] == {'x': 0, 'y': 0, 'w': 1440, 'h': 80}
    assert header['paddingLeft'] == 32
    assert 'paddingTop' not in header
    assert 'strokes' not in header

    logo, login = header['children']
    assert logo['fills'][0]['color'] == '#1A1A1A'
    assert logo['fontFamily'] == 'Inter'
    assert logo['bounds'] == {'x': 32, 'y': 26, 'w': 61, 'h': 29}
    assert login['fills'] == [{'type': 'SOLID', 'color': '#3366E6'}]
    assert login['componentId'] == '10:1'
    assert 'children' not in login

    assert 'layoutMode' not in hero
    assert hero['fills'][0]['stops'] == [
        {'color': '#3366E6', 'pos': 0},
        {'color': '#8033CC', 'pos': 1},
    ]
    cta = hero['children'][1]
    assert cta['opacity'] == 0.9
    assert cta['fills'] == [{'type': 'SOLID', 'color': '#FF8000', 'opacity': 0.8}]
    assert cta['strokes'] == [{'type': 'SOLID', 'color': '#000000', 'alpha': 0.25}]


def test_filter_file_accepts_pages_shape():
    raw = {'name': 'Fixture', 'pages': [{'id': '0:1', 'name': 'P', 'children': [{'id': '1:1', 'visible': True}]}]}
    filtered = normalizer.filter_file(raw)
    assert filtered['pages'][0]['children'] == [{'id': '1:1'}]


def test_filter_file_reduces_size(figma_sample, base_filtered):
    raw_size = len(json.dumps(figma_sample))
    filtered_size = len(json.dumps(base_filtered))
    assert (raw_size - filtered_size) / raw_size > 0.3


def test_filter_node_does_not_mutate_input(figma_sample):
    before = json.dumps(figma_sample, sort_keys=True)
    normalizer.filter_file(figma_sample)
    assert json.dumps(figma_sample, sort_keys=True) == before
