"""
Source-side AST for TypeScript ambient declarations.

Only the shape of declarations is modeled: names, modifiers, type nodes,
type parameters, members, initializers and heritage clauses. Every node class
carries a ``kind`` tag from SyntaxKind so consumers can dispatch on it with an
explicit table instead of relying on isinstance chains.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Union


class SyntaxKind(Enum):
    """Tags for every node kind the translator understands."""
    # Names and expressions
    IDENTIFIER = "identifier"
    STRING_LITERAL = "string_literal"
    NUMERIC_LITERAL = "numeric_literal"
    EXPRESSION = "expression"

    # Modifiers
    DECLARE_KEYWORD = "declare"
    EXPORT_KEYWORD = "export"
    DEFAULT_KEYWORD = "default"
    STATIC_KEYWORD = "static"
    ABSTRACT_KEYWORD = "abstract"
    READONLY_KEYWORD = "readonly"
    PUBLIC_KEYWORD = "public"
    PRIVATE_KEYWORD = "private"
    PROTECTED_KEYWORD = "protected"
    CONST_KEYWORD = "const"

    # Type nodes
    KEYWORD_TYPE = "keyword_type"
    TYPE_REFERENCE = "type_reference"
    ARRAY_TYPE = "array_type"
    UNION_TYPE = "union_type"
    FUNCTION_TYPE = "function_type"
    TYPE_LITERAL = "type_literal"
    LITERAL_TYPE = "literal_type"
    TUPLE_TYPE = "tuple_type"
    PARENTHESIZED_TYPE = "parenthesized_type"

    # Signatures and members
    PARAMETER = "parameter"
    TYPE_PARAMETER = "type_parameter"
    SIGNATURE = "signature"
    PROPERTY_SIGNATURE = "property_signature"
    METHOD_SIGNATURE = "method_signature"
    CALL_SIGNATURE = "call_signature"
    CONSTRUCT_SIGNATURE = "construct_signature"
    INDEX_SIGNATURE = "index_signature"
    CONSTRUCTOR = "constructor"
    HERITAGE_CLAUSE = "heritage_clause"
    ENUM_MEMBER = "enum_member"
    VARIABLE_DECLARATION = "variable_declaration"

    # Statements
    VARIABLE_STATEMENT = "variable_statement"
    FUNCTION_DECLARATION = "function_declaration"
    INTERFACE_DECLARATION = "interface_declaration"
    CLASS_DECLARATION = "class_declaration"
    ENUM_DECLARATION = "enum_declaration"
    MODULE_DECLARATION = "module_declaration"
    MODULE_BLOCK = "module_block"
    TYPE_ALIAS_DECLARATION = "type_alias_declaration"
    EXPORT_ASSIGNMENT = "export_assignment"
    IMPORT_DECLARATION = "import_declaration"
    EXPORT_DECLARATION = "export_declaration"


class Node:
    """Base class of all AST nodes."""
    kind: ClassVar[SyntaxKind]

    def describe(self) -> str:
        """Short human readable description used in diagnostics."""
        text = getattr(self, 'text', None) or getattr(self, 'name', None)
        if isinstance(text, Node):
            text = getattr(text, 'text', None)
        line = getattr(self, 'line', 0)
        where = f" at line {line}" if line else ""
        return f"{self.kind.value}({text}){where}" if text else f"{self.kind.value}{where}"


# -------------------------------------------------------------------
# Names, expressions, modifiers
# -------------------------------------------------------------------

@dataclass
class Identifier(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.IDENTIFIER
    text: str
    line: int = 0


@dataclass
class StringLiteral(Node):
    """A string literal; ``text`` holds the unescaped value without quotes."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.STRING_LITERAL
    text: str
    line: int = 0


@dataclass
class NumericLiteral(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.NUMERIC_LITERAL
    text: str
    line: int = 0


@dataclass
class Expression(Node):
    """Any other expression, kept as raw source text."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.EXPRESSION
    text: str
    line: int = 0


DeclarationName = Union[Identifier, StringLiteral, NumericLiteral, Expression]


@dataclass
class Modifier(Node):
    """A modifier keyword; the tag itself is the keyword kind."""
    keyword: SyntaxKind
    line: int = 0

    @property
    def kind(self) -> SyntaxKind:  # type: ignore[override]
        return self.keyword


def has_modifier(modifiers: List[Modifier], keyword: SyntaxKind) -> bool:
    return any(m.keyword is keyword for m in modifiers)


# -------------------------------------------------------------------
# Type nodes
# -------------------------------------------------------------------

@dataclass
class KeywordType(Node):
    """Predefined types: number, string, boolean, any, void, null, ..."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.KEYWORD_TYPE
    text: str
    line: int = 0


@dataclass
class TypeReference(Node):
    """A (possibly qualified and generic) named type such as ``A.B<T>``."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.TYPE_REFERENCE
    name: str
    type_arguments: List['TypeNode'] = field(default_factory=list)
    line: int = 0


@dataclass
class ArrayType(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.ARRAY_TYPE
    element_type: 'TypeNode'
    line: int = 0


@dataclass
class UnionType(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.UNION_TYPE
    types: List['TypeNode']
    line: int = 0


@dataclass
class FunctionTypeNode(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.FUNCTION_TYPE
    signature: 'Signature'
    line: int = 0


@dataclass
class TypeLiteral(Node):
    """An inline object type ``{ a: number }``."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.TYPE_LITERAL
    members: List['TypeMember'] = field(default_factory=list)
    line: int = 0


@dataclass
class LiteralType(Node):
    """A literal used as a type: ``"a"``, ``1``, ``true``."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.LITERAL_TYPE
    literal: Union[StringLiteral, NumericLiteral, Expression]
    line: int = 0


@dataclass
class TupleType(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TUPLE_TYPE
    element_types: List['TypeNode'] = field(default_factory=list)
    line: int = 0


@dataclass
class ParenthesizedType(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.PARENTHESIZED_TYPE
    type: 'TypeNode'
    line: int = 0


TypeNode = Union[KeywordType, TypeReference, ArrayType, UnionType, FunctionTypeNode,
                 TypeLiteral, LiteralType, TupleType, ParenthesizedType]


# -------------------------------------------------------------------
# Signatures and members
# -------------------------------------------------------------------

@dataclass
class TypeParameter(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TYPE_PARAMETER
    name: str
    constraint: Optional[TypeNode] = None
    line: int = 0


@dataclass
class ParameterDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.PARAMETER
    name: str
    type: Optional[TypeNode] = None
    optional: bool = False
    rest: bool = False
    line: int = 0


@dataclass
class Signature(Node):
    """Type parameters, parameters and return type of a callable."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.SIGNATURE
    parameters: List[ParameterDeclaration] = field(default_factory=list)
    type: Optional[TypeNode] = None
    type_parameters: List[TypeParameter] = field(default_factory=list)
    line: int = 0


@dataclass
class PropertySignature(Node):
    """A property in an interface body or a field in a class body."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.PROPERTY_SIGNATURE
    name: DeclarationName
    type: Optional[TypeNode] = None
    optional: bool = False
    modifiers: List[Modifier] = field(default_factory=list)
    line: int = 0


@dataclass
class MethodSignature(Node):
    """A method in an interface body or a class body.

    ``accessor`` is ``'get'`` or ``'set'`` for property accessors.
    """
    kind: ClassVar[SyntaxKind] = SyntaxKind.METHOD_SIGNATURE
    name: DeclarationName
    signature: Signature
    optional: bool = False
    modifiers: List[Modifier] = field(default_factory=list)
    accessor: Optional[str] = None
    line: int = 0


@dataclass
class CallSignatureDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.CALL_SIGNATURE
    signature: Signature
    line: int = 0


@dataclass
class ConstructSignatureDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.CONSTRUCT_SIGNATURE
    signature: Signature
    line: int = 0


@dataclass
class IndexSignatureDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.INDEX_SIGNATURE
    parameter: ParameterDeclaration
    type: Optional[TypeNode] = None
    readonly: bool = False
    line: int = 0


@dataclass
class ConstructorDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.CONSTRUCTOR
    parameters: List[ParameterDeclaration] = field(default_factory=list)
    modifiers: List[Modifier] = field(default_factory=list)
    line: int = 0


TypeMember = Union[PropertySignature, MethodSignature, CallSignatureDeclaration,
                   ConstructSignatureDeclaration, IndexSignatureDeclaration,
                   ConstructorDeclaration]


@dataclass
class HeritageClause(Node):
    """``extends`` or ``implements`` followed by type references."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.HERITAGE_CLAUSE
    token: str
    types: List[TypeReference] = field(default_factory=list)
    line: int = 0


@dataclass
class EnumMember(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.ENUM_MEMBER
    name: DeclarationName
    initializer: Optional[Union[StringLiteral, NumericLiteral, Expression]] = None
    line: int = 0


@dataclass
class VariableDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.VARIABLE_DECLARATION
    name: DeclarationName
    type: Optional[TypeNode] = None
    line: int = 0


# -------------------------------------------------------------------
# Statements
# -------------------------------------------------------------------

@dataclass
class VariableStatement(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.VARIABLE_STATEMENT
    declarations: List[VariableDeclaration]
    modifiers: List[Modifier] = field(default_factory=list)
    is_const: bool = False
    line: int = 0


@dataclass
class FunctionDeclaration(Node):
    """A function signature; ``has_body`` marks an implementation signature."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.FUNCTION_DECLARATION
    name: Optional[Identifier]
    signature: Signature
    modifiers: List[Modifier] = field(default_factory=list)
    has_body: bool = False
    line: int = 0


@dataclass
class InterfaceDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.INTERFACE_DECLARATION
    name: Identifier
    members: List[TypeMember] = field(default_factory=list)
    type_parameters: List[TypeParameter] = field(default_factory=list)
    heritage_clauses: List[HeritageClause] = field(default_factory=list)
    modifiers: List[Modifier] = field(default_factory=list)
    line: int = 0


@dataclass
class ClassDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.CLASS_DECLARATION
    name: Optional[Identifier]
    members: List[TypeMember] = field(default_factory=list)
    type_parameters: List[TypeParameter] = field(default_factory=list)
    heritage_clauses: List[HeritageClause] = field(default_factory=list)
    modifiers: List[Modifier] = field(default_factory=list)
    line: int = 0


@dataclass
class EnumDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.ENUM_DECLARATION
    name: Identifier
    members: List[EnumMember] = field(default_factory=list)
    modifiers: List[Modifier] = field(default_factory=list)
    line: int = 0


@dataclass
class ModuleBlock(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.MODULE_BLOCK
    statements: List['Statement'] = field(default_factory=list)
    line: int = 0


@dataclass
class ModuleDeclaration(Node):
    """``namespace A.B {}`` is represented as A whose body is ModuleDeclaration B."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.MODULE_DECLARATION
    name: DeclarationName
    body: Union['ModuleDeclaration', ModuleBlock]
    modifiers: List[Modifier] = field(default_factory=list)
    line: int = 0


@dataclass
class TypeAliasDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TYPE_ALIAS_DECLARATION
    name: Identifier
    type: TypeNode
    type_parameters: List[TypeParameter] = field(default_factory=list)
    modifiers: List[Modifier] = field(default_factory=list)
    line: int = 0


@dataclass
class ExportAssignment(Node):
    """``export = expression``."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.EXPORT_ASSIGNMENT
    expression: Union[Identifier, Expression]
    line: int = 0


@dataclass
class ImportDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.IMPORT_DECLARATION
    text: str
    line: int = 0


@dataclass
class ExportDeclaration(Node):
    """Re-exports such as ``export { a }``, ``export default x`` or ``export as namespace X``."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.EXPORT_DECLARATION
    text: str
    line: int = 0


Statement = Union[VariableStatement, FunctionDeclaration, InterfaceDeclaration,
                  ClassDeclaration, EnumDeclaration, ModuleDeclaration,
                  TypeAliasDeclaration, ExportAssignment, ImportDeclaration,
                  ExportDeclaration]
