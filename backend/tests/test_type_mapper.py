"""
Tests for the Kotlin type mapper.
"""

import pytest

from builders import kw, param, ref, signature, string_literal_type, union
from dtsbridge import ts_ast
from dtsbridge.exceptions import UnsupportedNodeError
from dtsbridge.models import FunctionType, Parameter, Type, TypeParam
from dtsbridge.type_mapper import KotlinTypeMapper


@pytest.fixture
def mapper():
    return KotlinTypeMapper()


@pytest.mark.parametrize('keyword,expected', [
    ('number', 'Number'),
    ('string', 'String'),
    ('boolean', 'Boolean'),
    ('any', 'Any'),
    ('unknown', 'Any'),
    ('void', 'Unit'),
    ('never', 'Nothing'),
    ('unique symbol', 'Any'),
])
def test_keyword_types(mapper, keyword, expected):
    assert mapper.map_type(kw(keyword)) == Type(expected)


def test_missing_type_is_any(mapper):
    assert mapper.map_type(None) == Type('Any')


def test_references(mapper):
    assert mapper.map_type(ref('Object')) == Type('Any')
    assert mapper.map_type(ref('Promise', kw('string'))).stringify() == 'Promise<String>'
    assert mapper.map_type(ref('Array')).stringify() == 'Array<Any>'


def test_array_type(mapper):
    node = ts_ast.ArrayType(ts_ast.ArrayType(kw('number')))
    assert mapper.map_type(node).stringify() == 'Array<Array<Number>>'


def test_nullable_union(mapper):
    assert mapper.map_type(union(ref('Foo'), kw('null'), kw('undefined'))) == Type('Foo', nullable=True)


def test_mixed_union_is_any(mapper):
    assert mapper.map_type(union(kw('number'), kw('string'))) == Type('Any')


def test_string_literal_union_is_string(mapper):
    node = union(string_literal_type('a'), string_literal_type('b'), kw('null'))
    assert mapper.map_type(node) == Type('String', nullable=True)


def test_function_type(mapper):
    node = ts_ast.FunctionTypeNode(signature([param('x', kw('number'))], kw('void')))
    mapped = mapper.map_type(node)

    assert isinstance(mapped, FunctionType)
    assert mapped.stringify() == '(x: Number) -> Unit'


def test_object_literal_and_tuple_are_any(mapper):
    assert mapper.map_type(ts_ast.TypeLiteral([])) == Type('Any')
    assert mapper.map_type(ts_ast.TupleType([kw('number')])) == Type('Any')


def test_type_parameters_in_scope(mapper):
    scoped = mapper.with_type_parameters([ts_ast.TypeParameter('T', ref('Base'))])

    assert scoped.map_type(ref('T')) == Type('T')
    assert scoped.map_type_params([ts_ast.TypeParameter('T', ref('Base'))]) == [TypeParam('T', Type('Base'))]


def test_map_type_union_keeps_alternatives(mapper):
    mapped = mapper.map_type_union(union(kw('number'), ref('Foo'), kw('null')))

    assert mapped.types == (Type('Number', nullable=True), Type('Foo', nullable=True))
    assert mapped.stringify() == 'Number? | Foo?'


def test_call_signature_fans_out_each_union_parameter(mapper):
    node = signature([
        param('a', union(kw('number'), kw('string'))),
        param('b', union(kw('boolean'), ref('Foo'))),
    ], kw('void'))

    overloads = mapper.map_call_signature(node)

    assert len(overloads) == 4
    assert [tuple(p.type.name for p in o.params) for o in overloads] == [
        ('Number', 'Boolean'), ('Number', 'Foo'), ('String', 'Boolean'), ('String', 'Foo'),
    ]


def test_optional_and_rest_parameters(mapper):
    node = signature([
        param('a', kw('string'), optional=True),
        param('rest', ts_ast.ArrayType(kw('number')), rest=True),
    ])

    [overload] = mapper.map_call_signature(node)

    assert overload.params == (
        Parameter('a', Type('String'), optional=True),
        Parameter('rest', Type('Number'), vararg=True),
    )
    assert overload.return_type == Type('Any')


def test_unknown_keyword_is_unsupported(mapper):
    with pytest.raises(UnsupportedNodeError):
        mapper.map_type(kw('intrinsic'))
