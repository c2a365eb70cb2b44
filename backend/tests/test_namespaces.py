"""
Tests for namespace nesting.
"""

from builders import names, variable
from dtsbridge.models import FAKE_ANNOTATION, MODULE_ANNOTATION, ClassKind
from dtsbridge.namespaces import build_nested_module


def test_single_level():
    module = build_nested_module([], 'Leaf', [variable('v')])

    assert module.name == 'Leaf'
    assert module.kind is ClassKind.OBJECT
    assert module.annotations == [MODULE_ANNOTATION]
    assert names(module.members) == ['v']


def test_qualifier_builds_outer_objects():
    outer = build_nested_module(['N', 'M'], 'Leaf', [variable('v')], [FAKE_ANNOTATION])

    chain = []
    level = outer
    while level.members and level.members[0].kind_name == 'OBJECT':
        chain.append(level.name)
        assert level.annotations == [MODULE_ANNOTATION, FAKE_ANNOTATION]
        level = level.members[0]

    assert chain == ['N', 'M']
    assert level.name == 'Leaf'
    assert level.annotations == [MODULE_ANNOTATION, FAKE_ANNOTATION]
    assert names(level.members) == ['v']


def test_levels_do_not_share_annotation_lists():
    outer = build_nested_module(['A'], 'B', [])
    outer.annotations.append(FAKE_ANNOTATION)

    assert outer.members[0].annotations == [MODULE_ANNOTATION]
