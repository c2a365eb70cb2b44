"""
Tests for the tree-sitter declaration parser.
"""

import pytest

from dtsbridge import ts_ast
from dtsbridge.exceptions import ParsingError, UnsupportedNodeError
from dtsbridge.ts_ast import SyntaxKind, has_modifier


def test_declared_variable(parse):
    [statement] = parse('declare var x: number;')

    assert statement.kind is SyntaxKind.VARIABLE_STATEMENT
    assert has_modifier(statement.modifiers, SyntaxKind.DECLARE_KEYWORD)
    assert not statement.is_const
    [declaration] = statement.declarations
    assert declaration.name.text == 'x'
    assert declaration.type == ts_ast.KeywordType('number', declaration.type.line)


def test_const_and_line_numbers(parse):
    statements = parse('\n\ndeclare const VERSION: string;')

    assert statements[0].is_const
    assert statements[0].line == 3


def test_comments_are_skipped(parse):
    statements = parse('// header\n/** docs */\ndeclare var x: number;\n')
    assert len(statements) == 1


def test_function_signature(parse):
    [f] = parse('declare function f<T extends Base>(a: string, b?: T, ...rest: number[]): void;')

    assert f.kind is SyntaxKind.FUNCTION_DECLARATION
    assert f.name.text == 'f'
    assert not f.has_body
    a, b, rest = f.signature.parameters
    assert (a.name, a.optional, a.rest) == ('a', False, False)
    assert (b.name, b.optional) == ('b', True)
    assert rest.rest and rest.type.kind is SyntaxKind.ARRAY_TYPE
    assert f.signature.type.text == 'void'
    [type_param] = f.signature.type_parameters
    assert type_param.name == 'T'
    assert type_param.constraint.name == 'Base'


def test_interface_members(parse):
    [i] = parse('''
        interface Point extends Base<string> {
            x: number;
            label?: string | null;
            readonly id: number;
            move(dx: number): void;
            (a: number): string;
            new (s: string): Point;
            [key: string]: any;
        }
    ''')

    assert i.kind is SyntaxKind.INTERFACE_DECLARATION
    assert i.modifiers == []
    [clause] = i.heritage_clauses
    assert clause.types[0].name == 'Base'
    assert [m.kind for m in i.members] == [
        SyntaxKind.PROPERTY_SIGNATURE,
        SyntaxKind.PROPERTY_SIGNATURE,
        SyntaxKind.PROPERTY_SIGNATURE,
        SyntaxKind.METHOD_SIGNATURE,
        SyntaxKind.CALL_SIGNATURE,
        SyntaxKind.CONSTRUCT_SIGNATURE,
        SyntaxKind.INDEX_SIGNATURE,
    ]
    x, label, id_ = i.members[:3]
    assert label.optional and label.type.kind is SyntaxKind.UNION_TYPE
    assert has_modifier(id_.modifiers, SyntaxKind.READONLY_KEYWORD)
    assert not has_modifier(x.modifiers, SyntaxKind.READONLY_KEYWORD)
    assert i.members[6].parameter.name == 'key'


def test_class_members(parse):
    [c] = parse('''
        declare class Point {
            constructor(x: number);
            static origin(): Point;
            private secret: string;
            x: number;
        }
    ''')

    assert c.kind is SyntaxKind.CLASS_DECLARATION
    constructor, origin, secret, x = c.members
    assert constructor.name.text == 'constructor'
    assert has_modifier(origin.modifiers, SyntaxKind.STATIC_KEYWORD)
    assert has_modifier(secret.modifiers, SyntaxKind.PRIVATE_KEYWORD)
    assert x.type.text == 'number'


def test_class_heritage(parse):
    [c] = parse('declare class Dog extends Animal<string> implements Pet, Named {}')

    extends, implements = c.heritage_clauses
    assert extends.token == 'extends'
    assert extends.types[0].name == 'Animal'
    assert len(extends.types[0].type_arguments) == 1
    assert [t.name for t in implements.types] == ['Pet', 'Named']


def test_dotted_namespace_expands(parse):
    [n] = parse('declare namespace A.B { export var v: number; }')

    assert n.kind is SyntaxKind.MODULE_DECLARATION
    assert n.name.text == 'A'
    inner = n.body
    assert inner.kind is SyntaxKind.MODULE_DECLARATION
    assert inner.name.text == 'B'
    [v] = inner.body.statements
    assert has_modifier(v.modifiers, SyntaxKind.EXPORT_KEYWORD)


def test_external_module_with_export_assignment(parse):
    [m] = parse('''
        declare module "lazy.js" {
            var Lazy: LazyJS.LazyStatic;
            export = Lazy;
        }
    ''')

    assert m.name.kind is SyntaxKind.STRING_LITERAL
    assert m.name.text == 'lazy.js'
    variable, assignment = m.body.statements
    assert variable.declarations[0].type.name == 'LazyJS.LazyStatic'
    assert assignment.kind is SyntaxKind.EXPORT_ASSIGNMENT
    assert assignment.expression.text == 'Lazy'


def test_enum(parse):
    [e] = parse('declare enum Color { Red, Green = 2, Blue = "blue" }')

    assert [m.name.text for m in e.members] == ['Red', 'Green', 'Blue']
    red, green, blue = e.members
    assert red.initializer is None
    assert green.initializer.kind is SyntaxKind.NUMERIC_LITERAL
    assert blue.initializer.kind is SyntaxKind.STRING_LITERAL
    assert blue.initializer.text == 'blue'


def test_type_alias_and_function_type(parse):
    [alias, callback] = parse('''
        type Id = string | number;
        type Callback = (err: Error, value?: string) => void;
    ''')

    assert alias.kind is SyntaxKind.TYPE_ALIAS_DECLARATION
    assert alias.type.kind is SyntaxKind.UNION_TYPE
    assert callback.type.kind is SyntaxKind.FUNCTION_TYPE
    assert [p.name for p in callback.type.signature.parameters] == ['err', 'value']


def test_imports_are_kept_as_linkage(parse):
    [statement] = parse('import { Foo } from "./foo";')
    assert statement.kind is SyntaxKind.IMPORT_DECLARATION


@pytest.mark.parametrize('source', [
    'export { a };',
    'export default x;',
    'export as namespace Lib;',
])
def test_reexports_have_their_own_kind(parse, source):
    [statement] = parse(source)
    assert statement.kind is SyntaxKind.EXPORT_DECLARATION


def test_accessors_are_marked(parse):
    [c] = parse('declare class A { get x(): number; set x(v: number); size(): number; }')

    getter, setter, plain = c.members
    assert getter.accessor == 'get'
    assert getter.signature.type.text == 'number'
    assert setter.accessor == 'set'
    assert [p.name for p in setter.signature.parameters] == ['v']
    assert plain.name.text == 'size'
    assert plain.accessor is None


def test_mapped_type_reads_as_any(parse):
    [alias] = parse('type T<K extends string> = { [P in K]: string };')

    assert alias.type == ts_ast.KeywordType('any', alias.type.line)


def test_unique_symbol(parse):
    [statement] = parse('declare const s: unique symbol;')

    assert statement.declarations[0].type.text == 'unique symbol'


def test_syntax_error(parse):
    with pytest.raises(ParsingError) as excinfo:
        parse('declare var = ;')

    assert excinfo.value.details['file'] == 'test.d.ts'


def test_expression_statement_is_unsupported(parse):
    with pytest.raises(UnsupportedNodeError):
        parse('console.log(1);')


def test_parse_file(parser, tmp_path):
    path = tmp_path / 'lib.d.ts'
    path.write_text('declare function f(): void;\n', encoding='utf-8')

    [f] = parser.parse_file(path)
    assert f.name.text == 'f'
