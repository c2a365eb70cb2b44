"""
Tests for the Kotlin printer.
"""

from dtsbridge.emitter import KotlinEmitter, render_annotation, render_type_params
from dtsbridge.models import (
    NATIVE_ANNOTATION, NO_IMPL, Annotation, Argument, CallSignature, ClassKind,
    Classifier, EnumEntry, Function, HeritageType, PackagePart, Parameter, Type,
    TypeAlias, TypeParam, TypeUnion, Variable, companion_object, module_annotation,
)


def emit(*members, fq_name=None):
    return KotlinEmitter().emit(PackagePart(fq_name, list(members)))


def test_annotation_rendering():
    assert render_annotation(NATIVE_ANNOTATION) == '@native'
    assert render_annotation(module_annotation('lazy.js')) == '@module("lazy.js")'
    assert render_annotation(Annotation('native', (Argument('x', name='name'),))) == '@native(name = "x")'


def test_type_params_with_bounds():
    assert render_type_params([TypeParam('T', Type('Base')), TypeParam('U')]) == '<T : Base, U>'


def test_top_level_variable_with_package():
    text = emit(Variable(name='x', type=Type('Number'), annotations=[NATIVE_ANNOTATION]), fq_name='lib')

    assert text == (
        'package lib\n'
        '\n'
        '@native\n'
        f'var x: Number = {NO_IMPL}\n'
    )


def test_interface_with_delegating_companion():
    shape = Classifier(
        name='Shape',
        kind=ClassKind.INTERFACE,
        members=[
            Variable(name='area', type=Type('Number'), is_var=False),
            companion_object(parents=[HeritageType('ShapeCtor', delegate=NO_IMPL)]),
        ],
        annotations=[NATIVE_ANNOTATION],
    )

    assert emit(shape) == (
        '@native\n'
        'interface Shape {\n'
        '    val area: Number\n'
        '    companion object : ShapeCtor by noImpl\n'
        '}\n'
    )


def test_open_class_with_secondary_constructor():
    point = Classifier(
        name='Point',
        kind=ClassKind.CLASS,
        constructors=[[Parameter('x', Type('Number'))], [Parameter('s', Type('String'), optional=True)]],
        members=[Function(name='dist', signature=CallSignature((), (), Type('Number')))],
        annotations=[NATIVE_ANNOTATION],
        is_open=True,
    )

    assert emit(point) == (
        '@native\n'
        'open class Point(x: Number) {\n'
        '    constructor(s: String = noImpl)\n'
        '    fun dist(): Number = noImpl\n'
        '}\n'
    )


def test_enum_entries_keep_initializers_as_comments():
    color = Classifier(name='Color', kind=ClassKind.ENUM,
                       members=[EnumEntry(name='Red'), EnumEntry(name='Green', value='2')])

    assert emit(color) == (
        'enum class Color {\n'
        '    Red,\n'
        '    Green /* = 2 */\n'
        '}\n'
    )


def test_string_enum_initializers_are_quoted():
    mode = Classifier(name='Mode', kind=ClassKind.ENUM, members=[
        EnumEntry(name='Read', value='r', is_string=True),
        EnumEntry(name='Quote', value='say "hi"', is_string=True),
    ])

    assert emit(mode) == (
        'enum class Mode {\n'
        '    Read, /* = "r" */\n'
        '    Quote /* = "say \\"hi\\"" */\n'
        '}\n'
    )


def test_module_object_with_vararg_function():
    function = Function(
        name='f',
        signature=CallSignature((Parameter('a', Type('Number'), vararg=True),), (), Type('Unit')),
    )
    module = Classifier(name='M', kind=ClassKind.OBJECT, members=[function],
                        annotations=[module_annotation('lazy.js')])

    assert emit(module) == (
        '@module("lazy.js")\n'
        'object M {\n'
        '    fun f(vararg a: Number): Unit = noImpl\n'
        '}\n'
    )


def test_extension_property():
    first = Variable(
        name='first',
        type=Type('T'),
        extends_type=Type('Array', (Type('T'),)),
        type_params=[TypeParam('T')],
        annotations=[NATIVE_ANNOTATION],
    )

    assert emit(first) == (
        '@native\n'
        'var <T> Array<T>.first: T\n'
        '    get() = noImpl\n'
        '    set(value) = noImpl\n'
    )


def test_generic_extension_function():
    shuffle = Function(
        name='shuffle',
        signature=CallSignature((), (TypeParam('T'),), Type('Unit')),
        extends_type=Type('Array', (Type('T'),)),
        is_override=True,
    )

    assert emit(shuffle) == 'override fun <T> Array<T>.shuffle(): Unit = noImpl\n'


def test_type_aliases():
    single = TypeAlias(name='Id', type=TypeUnion((Type('String'),)))
    multi = TypeAlias(name='Key', type_params=[TypeParam('T')], type=TypeUnion((Type('String'), Type('T'))))

    assert emit(single, multi) == (
        'typealias Id = String\n'
        '\n'
        'typealias Key<T> = Any /* String | T */\n'
    )
