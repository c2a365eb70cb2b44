"""
Type expression mapping from TypeScript type nodes to Kotlin types.

The translator only depends on the TypeMapper interface. KotlinTypeMapper is
the default implementation used by the converter; callers may inject their
own mapper through ScopeConfig.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, List, Optional, Tuple

from . import ts_ast
from .exceptions import UnsupportedNodeError
from .models import (
    ANY, UNIT, CallSignature, FunctionType, Parameter, Type, TypeExpr,
    TypeParam, TypeUnion,
)
from .ts_ast import SyntaxKind

logger = logging.getLogger(__name__)


KEYWORD_TYPES = {
    'number': 'Number',
    'string': 'String',
    'boolean': 'Boolean',
    'any': ANY,
    'unknown': ANY,
    'object': ANY,
    'symbol': ANY,
    'unique symbol': ANY,
    'bigint': 'Number',
    'void': UNIT,
    'never': 'Nothing',
}

# Named references that have a direct Kotlin counterpart
REFERENCE_TYPES = {
    'Object': ANY,
    'Number': 'Number',
    'String': 'String',
    'Boolean': 'Boolean',
    'Array': 'Array',
    'ReadonlyArray': 'Array',
}

NULLISH = {'null', 'undefined'}


class TypeMapper(ABC):
    """Interface the translator uses to turn source types into target types."""

    @abstractmethod
    def map_type(self, node: Optional[ts_ast.TypeNode]) -> TypeExpr:
        """Map a single type node; None means the source omitted the type."""

    @abstractmethod
    def map_type_union(self, node: ts_ast.TypeNode) -> TypeUnion:
        """Map a type node keeping union alternatives apart."""

    @abstractmethod
    def map_call_signature(self, signature: ts_ast.Signature) -> List[CallSignature]:
        """Map a signature to one or more target overloads."""

    @abstractmethod
    def map_type_params(self, params: Iterable[ts_ast.TypeParameter]) -> List[TypeParam]:
        """Map generic parameter declarations."""

    @abstractmethod
    def with_type_parameters(self, params: Iterable[ts_ast.TypeParameter]) -> 'TypeMapper':
        """Return a mapper that treats ``params`` as type variables in scope."""


class KotlinTypeMapper(TypeMapper):
    """Default mapper producing Kotlin/JS type expressions."""

    def __init__(self, type_parameters: FrozenSet[str] = frozenset()):
        self.type_parameters = type_parameters

    def with_type_parameters(self, params: Iterable[ts_ast.TypeParameter]) -> 'KotlinTypeMapper':
        names = {p.name for p in params or []}
        if not names:
            return self
        return KotlinTypeMapper(self.type_parameters | names)

    def map_type_params(self, params: Iterable[ts_ast.TypeParameter]) -> List[TypeParam]:
        result = []
        for param in params or []:
            bound = self.map_type(param.constraint) if param.constraint is not None else None
            result.append(TypeParam(param.name, bound))
        return result

    def map_type(self, node: Optional[ts_ast.TypeNode]) -> TypeExpr:
        if node is None:
            return Type(ANY)

        kind = node.kind
        if kind is SyntaxKind.KEYWORD_TYPE:
            if node.text in NULLISH:
                return Type(ANY, nullable=True)
            if node.text not in KEYWORD_TYPES:
                raise UnsupportedNodeError(node, "unknown keyword type")
            return Type(KEYWORD_TYPES[node.text])

        if kind is SyntaxKind.TYPE_REFERENCE:
            return self._map_reference(node)

        if kind is SyntaxKind.ARRAY_TYPE:
            return Type('Array', (self.map_type(node.element_type),))

        if kind is SyntaxKind.UNION_TYPE:
            alternatives, nullable = self._split_nullable(node)
            if len(alternatives) == 1:
                mapped = self.map_type(alternatives[0])
                return mapped.as_nullable() if nullable else mapped
            if all(t.kind is SyntaxKind.LITERAL_TYPE and t.literal.kind is SyntaxKind.STRING_LITERAL
                   for t in alternatives):
                return Type('String', nullable=nullable)
            return Type(ANY, nullable=nullable)

        if kind is SyntaxKind.FUNCTION_TYPE:
            signature = self.with_type_parameters(node.signature.type_parameters)
            params = tuple(signature._map_parameter(p) for p in node.signature.parameters)
            return FunctionType(params, signature._map_return_type(node.signature.type))

        if kind is SyntaxKind.LITERAL_TYPE:
            literal_kind = node.literal.kind
            if literal_kind is SyntaxKind.STRING_LITERAL:
                return Type('String')
            if literal_kind is SyntaxKind.NUMERIC_LITERAL:
                return Type('Number')
            if node.literal.text in ('true', 'false'):
                return Type('Boolean')
            return Type(ANY)

        if kind is SyntaxKind.PARENTHESIZED_TYPE:
            return self.map_type(node.type)

        if kind in (SyntaxKind.TYPE_LITERAL, SyntaxKind.TUPLE_TYPE):
            # TODO: synthesize a named interface for inline object types
            return Type(ANY)

        raise UnsupportedNodeError(node, "not a type node")

    def map_type_union(self, node: ts_ast.TypeNode) -> TypeUnion:
        if node.kind is SyntaxKind.PARENTHESIZED_TYPE:
            return self.map_type_union(node.type)
        if node.kind is not SyntaxKind.UNION_TYPE:
            return TypeUnion((self.map_type(node),))

        alternatives, nullable = self._split_nullable(node)
        mapped = []
        for alternative in alternatives:
            target = self.map_type(alternative)
            if nullable:
                target = target.as_nullable()
            if target not in mapped:
                mapped.append(target)
        if not mapped:
            mapped.append(Type(ANY, nullable=True))
        return TypeUnion(tuple(mapped))

    def map_call_signature(self, signature: ts_ast.Signature) -> List[CallSignature]:
        """
        Map a signature, fanning out union-typed parameters.

        ``f(a: string | number)`` becomes ``f(a: String)`` and ``f(a: Number)``
        because Kotlin parameters cannot carry unions.
        """
        mapper = self.with_type_parameters(signature.type_parameters)
        type_params = tuple(mapper.map_type_params(signature.type_parameters))
        return_type = mapper._map_return_type(signature.type)

        choices = [mapper._parameter_alternatives(p) for p in signature.parameters]
        overloads = []
        for params in itertools.product(*choices):
            overloads.append(CallSignature(tuple(params), type_params, return_type))

        if len(overloads) > 1:
            logger.debug(f"Signature at line {signature.line} expanded into {len(overloads)} overloads")
        return overloads

    # ---------------------------------------------------------------

    def _map_reference(self, node: ts_ast.TypeReference) -> Type:
        if node.name in self.type_parameters:
            return Type(node.name)

        name = REFERENCE_TYPES.get(node.name, node.name)
        arguments = tuple(self.map_type(arg) for arg in node.type_arguments)
        if name == ANY:
            return Type(ANY)
        if name == 'Array' and not arguments:
            arguments = (Type(ANY),)
        return Type(name, arguments)

    def _map_return_type(self, node: Optional[ts_ast.TypeNode]) -> TypeExpr:
        return self.map_type(node)

    def _map_parameter(self, param: ts_ast.ParameterDeclaration) -> Parameter:
        target = self.map_type(param.type)
        if param.rest:
            target = _vararg_element(target)
        return Parameter(param.name, target, optional=param.optional, vararg=param.rest)

    def _parameter_alternatives(self, param: ts_ast.ParameterDeclaration) -> List[Parameter]:
        node = param.type
        while node is not None and node.kind is SyntaxKind.PARENTHESIZED_TYPE:
            node = node.type
        if param.rest or node is None or node.kind is not SyntaxKind.UNION_TYPE:
            return [self._map_parameter(param)]

        alternatives, nullable = self._split_nullable(node)
        if len(alternatives) < 2 or self.map_type(node) == Type('String', nullable=nullable):
            return [self._map_parameter(param)]

        result = []
        for alternative in alternatives:
            target = self.map_type(alternative)
            if nullable:
                target = target.as_nullable()
            candidate = Parameter(param.name, target, optional=param.optional)
            if candidate not in result:
                result.append(candidate)
        return result

    @staticmethod
    def _split_nullable(node: ts_ast.UnionType) -> Tuple[List[ts_ast.TypeNode], bool]:
        alternatives = []
        nullable = False
        for t in _flatten_union(node):
            if t.kind is SyntaxKind.KEYWORD_TYPE and t.text in NULLISH:
                nullable = True
            elif t.kind is SyntaxKind.LITERAL_TYPE and t.literal.text in NULLISH:
                nullable = True
            else:
                alternatives.append(t)
        return alternatives, nullable


def _flatten_union(node: ts_ast.TypeNode) -> List[ts_ast.TypeNode]:
    if node.kind is SyntaxKind.UNION_TYPE:
        result = []
        for t in node.types:
            result.extend(_flatten_union(t))
        return result
    if node.kind is SyntaxKind.PARENTHESIZED_TYPE and node.type.kind is SyntaxKind.UNION_TYPE:
        return _flatten_union(node.type)
    return [node]


def _vararg_element(target: TypeExpr) -> TypeExpr:
    """``...args: T[]`` is declared in Kotlin as ``vararg args: T``."""
    if isinstance(target, Type) and target.name == 'Array' and len(target.arguments) == 1:
        return target.arguments[0]
    return target
