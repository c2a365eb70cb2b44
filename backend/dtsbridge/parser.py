"""
TypeScript declaration file parser.

Parses ``.d.ts`` sources with tree-sitter and converts the concrete syntax
tree into the declaration AST defined in ``ts_ast``. Only declaration shapes
are read; expressions are kept as raw text.
"""

import logging
import re
from pathlib import Path
from typing import Any, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Parser

from . import ts_ast
from .exceptions import ParsingError, UnsupportedNodeError
from .ts_ast import Modifier, SyntaxKind

logger = logging.getLogger(__name__)

MODIFIER_TOKENS = {
    'declare': SyntaxKind.DECLARE_KEYWORD,
    'export': SyntaxKind.EXPORT_KEYWORD,
    'default': SyntaxKind.DEFAULT_KEYWORD,
    'static': SyntaxKind.STATIC_KEYWORD,
    'abstract': SyntaxKind.ABSTRACT_KEYWORD,
    'readonly': SyntaxKind.READONLY_KEYWORD,
    'public': SyntaxKind.PUBLIC_KEYWORD,
    'private': SyntaxKind.PRIVATE_KEYWORD,
    'protected': SyntaxKind.PROTECTED_KEYWORD,
    'const': SyntaxKind.CONST_KEYWORD,
}

# Type operators without a Kotlin counterpart; they degrade to `any`
OPAQUE_TYPES = {
    'intersection_type', 'conditional_type', 'type_query', 'lookup_type',
    'index_type_query', 'infer_type', 'template_literal_type', 'existential_type',
    'this_type', 'mapped_type_clause', 'type_predicate', 'asserts',
}

NUMBER_PATTERN = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+|0[xXoObB][0-9a-fA-F]+)$")

SKIPPED_STATEMENTS = {'comment', 'empty_statement', 'hash_bang_line'}

MEMBER_NODES = {
    'property_signature', 'public_field_definition', 'method_signature',
    'method_definition', 'abstract_method_signature', 'call_signature',
    'construct_signature', 'index_signature',
}

ACCESSOR_TOKENS = ('get', 'set')


_LANGUAGE_CACHE = {}


def get_typescript_language() -> Language:
    """Return the tree-sitter TypeScript language, loading it once."""
    if 'typescript' not in _LANGUAGE_CACHE:
        _LANGUAGE_CACHE['typescript'] = Language(tree_sitter_typescript.language_typescript())
        logger.debug("Loaded tree-sitter TypeScript grammar")
    return _LANGUAGE_CACHE['typescript']


class DeclarationParser:
    """Parses TypeScript declaration sources into ``ts_ast`` statements."""

    def __init__(self):
        self.parser = Parser(get_typescript_language())

    def parse_file(self, file_path: Path) -> List[ts_ast.Statement]:
        """Read and parse a declaration file."""
        file_path = Path(file_path)
        try:
            content = file_path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise ParsingError(str(file_path), f"not valid UTF-8: {e}")
        return self.parse(content, str(file_path))

    def parse(self, content: str, file_path: str = '<string>') -> List[ts_ast.Statement]:
        """Parse declaration source text.

        Args:
            content: Source text of a ``.d.ts`` file
            file_path: Path used in error messages

        Returns:
            Top-level statements in source order

        Raises:
            ParsingError: if tree-sitter reports a syntax error
            UnsupportedNodeError: for statements that are not declarations
        """
        source = content.encode('utf-8')
        tree = self.parser.parse(source)
        root = tree.root_node

        if root.has_error:
            error = _first_error(root)
            line = error.start_point[0] + 1 if error is not None else None
            raise ParsingError(file_path, "syntax error", line)

        statements = _TreeConverter(source).statements(root.named_children, [])
        logger.debug(f"Parsed {len(statements)} top-level statements from {file_path}")
        return statements


def _first_error(node: Any) -> Optional[Any]:
    if node.type == 'ERROR' or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


class _TreeConverter:
    """Converts tree-sitter nodes of one source into ``ts_ast`` nodes."""

    def __init__(self, source: bytes):
        self.source = source

    # ---------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------

    def _text(self, node: Any) -> str:
        return self.source[node.start_byte:node.end_byte].decode('utf-8')

    @staticmethod
    def _line(node: Any) -> int:
        return node.start_point[0] + 1

    @staticmethod
    def _named(node: Any) -> List[Any]:
        return [c for c in node.named_children if c.type != 'comment']

    @staticmethod
    def _has_token(node: Any, token: str) -> bool:
        return any(not c.is_named and c.type == token for c in node.children)

    @staticmethod
    def _is_mapped(node: Any) -> bool:
        """True for the ``[P in K]`` member of a mapped type."""
        return node.type == 'index_signature' and any(
            c.type == 'mapped_type_clause' for c in node.named_children)

    def _modifiers(self, node: Any) -> List[Modifier]:
        modifiers = []
        for child in node.children:
            if child.type == 'accessibility_modifier':
                keyword = MODIFIER_TOKENS.get(self._text(child).strip())
            elif not child.is_named:
                keyword = MODIFIER_TOKENS.get(child.type)
            else:
                continue
            if keyword is not None and keyword is not SyntaxKind.CONST_KEYWORD:
                modifiers.append(Modifier(keyword, self._line(child)))
        return modifiers

    def _string(self, node: Any) -> str:
        text = self._text(node)
        if len(text) >= 2 and text[0] in '"\'`' and text[-1] == text[0]:
            text = text[1:-1]
        return re.sub(r"\\(.)", r"\1", text)

    def _name(self, node: Any) -> ts_ast.DeclarationName:
        line = self._line(node)
        if node.type in ('identifier', 'type_identifier', 'property_identifier',
                         'shorthand_property_identifier', 'private_property_identifier'):
            return ts_ast.Identifier(self._text(node), line)
        if node.type == 'string':
            return ts_ast.StringLiteral(self._string(node), line)
        if node.type == 'number':
            return ts_ast.NumericLiteral(self._text(node), line)
        return ts_ast.Expression(self._text(node), line)

    def _literal(self, node: Any):
        line = self._line(node)
        if node.type == 'string':
            return ts_ast.StringLiteral(self._string(node), line)
        if node.type == 'number':
            return ts_ast.NumericLiteral(self._text(node), line)
        if node.type == 'unary_expression':
            text = self._text(node).replace(' ', '')
            if NUMBER_PATTERN.match(text):
                return ts_ast.NumericLiteral(text, line)
        return ts_ast.Expression(self._text(node), line)

    # ---------------------------------------------------------------
    # Statements
    # ---------------------------------------------------------------

    def statements(self, nodes: List[Any], modifiers: List[Modifier]) -> List[ts_ast.Statement]:
        result = []
        for node in nodes:
            result.extend(self.statement(node, modifiers))
        return result

    def statement(self, node: Any, modifiers: List[Modifier]) -> List[ts_ast.Statement]:
        kind = node.type
        line = self._line(node)

        if kind in SKIPPED_STATEMENTS:
            return []

        if kind == 'ambient_declaration':
            modifiers = modifiers + [Modifier(SyntaxKind.DECLARE_KEYWORD, line)]
            inner = self._named(node)
            if inner and inner[0].type == 'statement_block':
                # declare global { ... }
                return self.statements(self._named(inner[0]), modifiers)
            if not inner:
                raise UnsupportedNodeError(node, "empty ambient declaration")
            return self.statement(inner[0], modifiers)

        if kind == 'export_statement':
            return self._export_statement(node, modifiers)

        if kind == 'expression_statement':
            inner = self._named(node)
            if len(inner) == 1 and inner[0].type == 'internal_module':
                return [self._module(inner[0], modifiers)]
            raise UnsupportedNodeError(node, "expressions are not declarations")

        if kind == 'interface_declaration':
            return [self._interface(node, modifiers)]
        if kind in ('class_declaration', 'abstract_class_declaration'):
            return [self._class(node, modifiers)]
        if kind == 'enum_declaration':
            return [self._enum(node, modifiers)]
        if kind in ('module', 'internal_module'):
            return [self._module(node, modifiers)]
        if kind in ('variable_declaration', 'lexical_declaration'):
            return [self._variables(node, modifiers)]
        if kind in ('function_signature', 'function_declaration', 'generator_function_declaration'):
            return [self._function(node, modifiers)]
        if kind == 'type_alias_declaration':
            return [self._type_alias(node, modifiers)]
        if kind in ('import_statement', 'import_alias'):
            return [ts_ast.ImportDeclaration(self._text(node), line)]

        raise UnsupportedNodeError(node, "not a declaration")

    def _export_statement(self, node: Any, modifiers: List[Modifier]) -> List[ts_ast.Statement]:
        line = self._line(node)
        declaration = node.child_by_field_name('declaration')
        if declaration is not None:
            exported = modifiers + [Modifier(SyntaxKind.EXPORT_KEYWORD, line)]
            if self._has_token(node, 'default'):
                exported.append(Modifier(SyntaxKind.DEFAULT_KEYWORD, line))
            return self.statement(declaration, exported)

        if self._has_token(node, '='):
            expression = None
            seen_equals = False
            for child in node.children:
                if not child.is_named and child.type == '=':
                    seen_equals = True
                elif seen_equals and child.is_named and child.type != 'comment':
                    expression = child
                    break
            if expression is None:
                raise UnsupportedNodeError(node, "export = without expression")
            if expression.type == 'identifier':
                target = ts_ast.Identifier(self._text(expression), self._line(expression))
            else:
                target = ts_ast.Expression(self._text(expression), self._line(expression))
            return [ts_ast.ExportAssignment(target, line)]

        # export { a }, export * from "m", export as namespace X, export default x
        return [ts_ast.ExportDeclaration(self._text(node), line)]

    def _interface(self, node: Any, modifiers: List[Modifier]) -> ts_ast.InterfaceDeclaration:
        heritage = []
        for child in self._named(node):
            if child.type == 'extends_type_clause':
                heritage.append(ts_ast.HeritageClause(
                    'extends', [self._type(t) for t in self._named(child)], self._line(child)))

        body = node.child_by_field_name('body')
        return ts_ast.InterfaceDeclaration(
            name=self._name(node.child_by_field_name('name')),
            members=self._members(body),
            type_parameters=self._type_parameters(node.child_by_field_name('type_parameters')),
            heritage_clauses=heritage,
            modifiers=modifiers,
            line=self._line(node),
        )

    def _class(self, node: Any, modifiers: List[Modifier]) -> ts_ast.ClassDeclaration:
        modifiers = modifiers + self._modifiers(node)
        heritage = []
        for child in self._named(node):
            if child.type == 'class_heritage':
                for clause in self._named(child):
                    heritage.append(self._heritage_clause(clause))

        name_node = node.child_by_field_name('name')
        return ts_ast.ClassDeclaration(
            name=self._name(name_node) if name_node is not None else None,
            members=self._members(node.child_by_field_name('body')),
            type_parameters=self._type_parameters(node.child_by_field_name('type_parameters')),
            heritage_clauses=heritage,
            modifiers=modifiers,
            line=self._line(node),
        )

    def _heritage_clause(self, clause: Any) -> ts_ast.HeritageClause:
        line = self._line(clause)
        if clause.type == 'implements_clause':
            return ts_ast.HeritageClause('implements', [self._type(t) for t in self._named(clause)], line)

        # extends_clause holds expressions, each optionally followed by type arguments
        types: List[ts_ast.TypeReference] = []
        for child in self._named(clause):
            if child.type == 'type_arguments' and types:
                types[-1].type_arguments = [self._type(t) for t in self._named(child)]
            else:
                types.append(ts_ast.TypeReference(self._text(child).replace(' ', ''),
                                                  line=self._line(child)))
        return ts_ast.HeritageClause('extends', types, line)

    def _enum(self, node: Any, modifiers: List[Modifier]) -> ts_ast.EnumDeclaration:
        members = []
        body = node.child_by_field_name('body')
        for child in self._named(body) if body is not None else []:
            if child.type == 'enum_assignment':
                parts = self._named(child)
                name = child.child_by_field_name('name')
                value = child.child_by_field_name('value')
                if name is None:
                    name = parts[0]
                if value is None and len(parts) > 1:
                    value = parts[-1]
                members.append(ts_ast.EnumMember(
                    self._name(name),
                    self._literal(value) if value is not None else None,
                    self._line(child)))
            else:
                members.append(ts_ast.EnumMember(self._name(child), None, self._line(child)))

        return ts_ast.EnumDeclaration(
            name=self._name(node.child_by_field_name('name')),
            members=members,
            modifiers=modifiers,
            line=self._line(node),
        )

    def _module(self, node: Any, modifiers: List[Modifier]) -> ts_ast.ModuleDeclaration:
        line = self._line(node)
        name_node = node.child_by_field_name('name')
        body_node = node.child_by_field_name('body')

        statements = self.statements(self._named(body_node), []) if body_node is not None else []
        body = ts_ast.ModuleBlock(statements, self._line(body_node) if body_node is not None else line)

        if name_node.type == 'nested_identifier':
            segments = [s.strip() for s in self._text(name_node).split('.')]
            declaration = body
            for segment in reversed(segments[1:]):
                declaration = ts_ast.ModuleDeclaration(ts_ast.Identifier(segment, line), declaration, [], line)
            return ts_ast.ModuleDeclaration(ts_ast.Identifier(segments[0], line), declaration, modifiers, line)

        return ts_ast.ModuleDeclaration(self._name(name_node), body, modifiers, line)

    def _variables(self, node: Any, modifiers: List[Modifier]) -> ts_ast.VariableStatement:
        declarations = []
        for child in self._named(node):
            if child.type != 'variable_declarator':
                continue
            type_node = child.child_by_field_name('type')
            declarations.append(ts_ast.VariableDeclaration(
                self._name(child.child_by_field_name('name')),
                self._type(type_node) if type_node is not None else None,
                self._line(child)))

        return ts_ast.VariableStatement(
            declarations=declarations,
            modifiers=modifiers,
            is_const=self._has_token(node, 'const'),
            line=self._line(node),
        )

    def _function(self, node: Any, modifiers: List[Modifier]) -> ts_ast.FunctionDeclaration:
        name_node = node.child_by_field_name('name')
        return ts_ast.FunctionDeclaration(
            name=self._name(name_node) if name_node is not None else None,
            signature=self._signature(node),
            modifiers=modifiers,
            has_body=node.child_by_field_name('body') is not None,
            line=self._line(node),
        )

    def _type_alias(self, node: Any, modifiers: List[Modifier]) -> ts_ast.TypeAliasDeclaration:
        return ts_ast.TypeAliasDeclaration(
            name=self._name(node.child_by_field_name('name')),
            type=self._type(node.child_by_field_name('value')),
            type_parameters=self._type_parameters(node.child_by_field_name('type_parameters')),
            modifiers=modifiers,
            line=self._line(node),
        )

    # ---------------------------------------------------------------
    # Members and signatures
    # ---------------------------------------------------------------

    def _members(self, body: Any) -> List[ts_ast.TypeMember]:
        if body is None:
            return []
        members = []
        for child in self._named(body):
            if child.type in MEMBER_NODES:
                members.append(self._member(child))
            elif child.type in ('decorator', 'class_static_block'):
                logger.debug(f"Ignoring {child.type} at line {self._line(child)}")
            else:
                raise UnsupportedNodeError(child, "unexpected member")
        return members

    def _member(self, node: Any) -> ts_ast.TypeMember:
        kind = node.type
        line = self._line(node)
        modifiers = self._modifiers(node)

        if kind in ('property_signature', 'public_field_definition'):
            type_node = node.child_by_field_name('type')
            return ts_ast.PropertySignature(
                name=self._name(node.child_by_field_name('name')),
                type=self._type(type_node) if type_node is not None else None,
                optional=self._has_token(node, '?'),
                modifiers=modifiers,
                line=line,
            )

        if kind in ('method_signature', 'method_definition', 'abstract_method_signature'):
            accessor = next((t for t in ACCESSOR_TOKENS if self._has_token(node, t)), None)
            return ts_ast.MethodSignature(
                name=self._name(node.child_by_field_name('name')),
                signature=self._signature(node),
                optional=self._has_token(node, '?'),
                modifiers=modifiers,
                accessor=accessor,
                line=line,
            )

        if kind == 'call_signature':
            return ts_ast.CallSignatureDeclaration(self._signature(node), line)

        if kind == 'construct_signature':
            return ts_ast.ConstructSignatureDeclaration(self._signature(node), line)

        # index_signature
        name_node = node.child_by_field_name('name')
        if name_node is None:
            name_node = next((c for c in self._named(node) if c.type == 'identifier'), None)
        index_type = node.child_by_field_name('index_type')
        if name_node is None or index_type is None:
            raise UnsupportedNodeError(node, "mapped index signatures are not supported")
        value_type = node.child_by_field_name('type')
        return ts_ast.IndexSignatureDeclaration(
            parameter=ts_ast.ParameterDeclaration(self._text(name_node), self._type(index_type), line=line),
            type=self._type(value_type) if value_type is not None else None,
            readonly=self._has_token(node, 'readonly'),
            line=line,
        )

    def _signature(self, node: Any) -> ts_ast.Signature:
        return_node = node.child_by_field_name('return_type')
        if return_node is None:
            return_node = node.child_by_field_name('type')
        return ts_ast.Signature(
            parameters=self._parameters(node.child_by_field_name('parameters')),
            type=self._type(return_node) if return_node is not None else None,
            type_parameters=self._type_parameters(node.child_by_field_name('type_parameters')),
            line=self._line(node),
        )

    def _parameters(self, node: Any) -> List[ts_ast.ParameterDeclaration]:
        if node is None:
            return []
        params = []
        for index, child in enumerate(self._named(node)):
            if child.type not in ('required_parameter', 'optional_parameter'):
                raise UnsupportedNodeError(child, "unexpected parameter")

            pattern = child.child_by_field_name('pattern')
            if pattern is None:
                pattern = next((c for c in self._named(child)
                                if c.type not in ('accessibility_modifier', 'override_modifier',
                                                  'type_annotation', 'decorator')), None)
            if pattern is not None and pattern.type == 'this':
                continue

            rest = pattern is not None and pattern.type == 'rest_pattern'
            if rest:
                inner = self._named(pattern)
                name = self._text(inner[0]) if inner else f"args{index}"
            elif pattern is not None and pattern.type == 'identifier':
                name = self._text(pattern)
            else:
                name = f"param{index}"

            type_node = child.child_by_field_name('type')
            params.append(ts_ast.ParameterDeclaration(
                name=name,
                type=self._type(type_node) if type_node is not None else None,
                optional=child.type == 'optional_parameter',
                rest=rest,
                line=self._line(child),
            ))
        return params

    def _type_parameters(self, node: Any) -> List[ts_ast.TypeParameter]:
        if node is None:
            return []
        params = []
        for child in self._named(node):
            constraint = child.child_by_field_name('constraint')
            constraint_type = None
            if constraint is not None:
                inner = self._named(constraint)
                constraint_type = self._type(inner[0]) if inner else None
            params.append(ts_ast.TypeParameter(
                self._text(child.child_by_field_name('name')), constraint_type, self._line(child)))
        return params

    # ---------------------------------------------------------------
    # Types
    # ---------------------------------------------------------------

    def _type(self, node: Any) -> ts_ast.TypeNode:
        kind = node.type
        line = self._line(node)

        if kind in ('type_annotation', 'opting_type_annotation', 'omitting_type_annotation', 'adding_type_annotation',
                    'readonly_type', 'constraint', 'default_type'):
            return self._type(self._named(node)[0])

        if kind in ('type_predicate_annotation', 'type_predicate'):
            return ts_ast.KeywordType('boolean', line)
        if kind == 'asserts_annotation':
            return ts_ast.KeywordType('void', line)

        if kind == 'predefined_type':
            return ts_ast.KeywordType(' '.join(self._text(node).split()), line)

        if kind in ('type_identifier', 'nested_type_identifier', 'identifier'):
            return ts_ast.TypeReference(self._text(node).replace(' ', ''), line=line)

        if kind == 'generic_type':
            arguments = node.child_by_field_name('type_arguments')
            return ts_ast.TypeReference(
                self._text(node.child_by_field_name('name')).replace(' ', ''),
                [self._type(t) for t in self._named(arguments)] if arguments is not None else [],
                line)

        if kind == 'array_type':
            return ts_ast.ArrayType(self._type(self._named(node)[0]), line)

        if kind == 'union_type':
            return ts_ast.UnionType([self._type(t) for t in self._named(node)], line)

        if kind == 'parenthesized_type':
            return ts_ast.ParenthesizedType(self._type(self._named(node)[0]), line)

        if kind in ('function_type', 'constructor_type'):
            return ts_ast.FunctionTypeNode(self._signature(node), line)

        if kind == 'object_type':
            if any(self._is_mapped(c) for c in self._named(node)):
                logger.debug(f"Mapped type at line {line} has no Kotlin equivalent, using any")
                return ts_ast.KeywordType('any', line)
            return ts_ast.TypeLiteral(self._members(node), line)

        if kind == 'tuple_type':
            return ts_ast.TupleType([self._type(t) for t in self._named(node)], line)

        if kind == 'literal_type':
            inner = self._named(node)
            literal = inner[0] if inner else node
            if literal.type in ('null', 'undefined'):
                return ts_ast.KeywordType(literal.type, line)
            return ts_ast.LiteralType(self._literal(literal), line)

        if kind in ('null', 'undefined'):
            return ts_ast.KeywordType(kind, line)

        if kind in ('optional_type', 'rest_type'):
            return self._type(self._named(node)[0])

        if kind in OPAQUE_TYPES:
            logger.debug(f"Type {kind} at line {line} has no Kotlin equivalent, using any")
            return ts_ast.KeywordType('any', line)

        raise UnsupportedNodeError(node, "unknown type node")
