"""
Translation of interface and class bodies.

Interfaces the project owns become Kotlin interfaces; interfaces that augment
a type declared elsewhere (for example ``interface Array<T>`` in a library
typing) become extension properties and functions on that type. Classes
become open classes whose static members live in a companion object.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from . import ts_ast
from .exceptions import UnsupportedNodeError
from .models import (
    GET, INVOKE, NATIVE_GETTER_ANNOTATION, NATIVE_INVOKE_ANNOTATION,
    NATIVE_NEW_ANNOTATION, NATIVE_SETTER_ANNOTATION, SET, UNIT, Annotation,
    CallSignature, ClassKind, Classifier, Function, HeritageType, Member,
    Parameter, Type, TypeExpr, TypeParam, Variable, companion_object,
)
from .ts_ast import SyntaxKind, has_modifier
from .type_mapper import TypeMapper

logger = logging.getLogger(__name__)

CONSTRUCTOR_NAME = "constructor"
GETTER = "get"
SETTER = "set"


def declaration_name(name: ts_ast.DeclarationName) -> str:
    """Return the unescaped text of a declaration name."""
    if name.kind in (SyntaxKind.IDENTIFIER, SyntaxKind.STRING_LITERAL, SyntaxKind.NUMERIC_LITERAL):
        return name.text
    raise UnsupportedNodeError(name, "computed declaration names are not supported")


class MemberTranslator:
    """Translates the members of one interface or class body.

    When ``receiver`` is set members are produced as extensions of that type,
    carrying ``receiver_type_params`` in front of their own type parameters.
    """

    def __init__(
        self,
        type_mapper: TypeMapper,
        is_override: Callable[[ts_ast.MethodSignature], bool],
        is_override_property: Callable[[ts_ast.PropertySignature], bool],
        annotations: Optional[List[Annotation]] = None,
        receiver: Optional[TypeExpr] = None,
        receiver_type_params: Optional[List[TypeParam]] = None,
    ):
        self.type_mapper = type_mapper
        self.is_override = is_override
        self.is_override_property = is_override_property
        self.annotations = list(annotations or [])
        self.receiver = receiver
        self.receiver_type_params = list(receiver_type_params or [])

        self.members: List[Member] = []
        self.static_members: List[Member] = []
        self.constructors: List[List[Parameter]] = []
        self.accessors: Dict[Tuple[bool, str], Variable] = {}

    def translate(self, nodes: List[ts_ast.TypeMember]) -> 'MemberTranslator':
        for node in nodes:
            if has_modifier(getattr(node, 'modifiers', []), SyntaxKind.PRIVATE_KEYWORD):
                logger.debug(f"Skipping private member {node.describe()}")
                continue

            kind = node.kind
            if kind is SyntaxKind.PROPERTY_SIGNATURE:
                self._visit_property(node)
            elif kind is SyntaxKind.METHOD_SIGNATURE:
                self._visit_method(node)
            elif kind is SyntaxKind.CALL_SIGNATURE:
                self._add_functions(INVOKE, node.signature, [NATIVE_INVOKE_ANNOTATION])
            elif kind is SyntaxKind.CONSTRUCT_SIGNATURE:
                self._add_functions(INVOKE, node.signature, [NATIVE_NEW_ANNOTATION])
            elif kind is SyntaxKind.INDEX_SIGNATURE:
                self._visit_index_signature(node)
            elif kind is SyntaxKind.CONSTRUCTOR:
                self._visit_constructor(node.parameters)
            else:
                raise UnsupportedNodeError(node, "unexpected member")
        return self

    # ---------------------------------------------------------------

    def _target(self, node) -> List[Member]:
        if has_modifier(getattr(node, 'modifiers', []), SyntaxKind.STATIC_KEYWORD):
            return self.static_members
        return self.members

    def _visit_property(self, node: ts_ast.PropertySignature) -> None:
        var_type = self.type_mapper.map_type(node.type)
        if node.optional:
            var_type = var_type.as_nullable()

        self._target(node).append(Variable(
            name=declaration_name(node.name),
            type=var_type,
            annotations=list(self.annotations),
            extends_type=self.receiver,
            type_params=list(self.receiver_type_params) if self.receiver else [],
            is_var=not has_modifier(node.modifiers, SyntaxKind.READONLY_KEYWORD),
            is_override=self.is_override_property(node),
        ))

    def _visit_method(self, node: ts_ast.MethodSignature) -> None:
        name = declaration_name(node.name)
        if name == CONSTRUCTOR_NAME and self.receiver is None:
            self._visit_constructor(node.signature.parameters)
            return
        if node.accessor is not None:
            self._visit_accessor(name, node)
            return

        self._add_functions(name, node.signature, [], target=self._target(node),
                            is_override=self.is_override(node))

    def _visit_accessor(self, name: str, node: ts_ast.MethodSignature) -> None:
        """Fold ``get``/``set`` accessors into one property.

        A getter alone gives a ``val``. The property type comes from the
        getter's return type, or the setter's parameter when there is no getter.
        """
        if node.accessor == GETTER:
            type_node = node.signature.type
        else:
            parameters = node.signature.parameters
            type_node = parameters[0].type if parameters else None

        is_static = has_modifier(node.modifiers, SyntaxKind.STATIC_KEYWORD)
        existing = self.accessors.get((is_static, name))
        if existing is not None:
            if node.accessor == SETTER:
                existing.is_var = True
            elif type_node is not None:
                existing.type = self.type_mapper.map_type(type_node)
            return

        variable = Variable(
            name=name,
            type=self.type_mapper.map_type(type_node),
            annotations=list(self.annotations),
            extends_type=self.receiver,
            type_params=list(self.receiver_type_params) if self.receiver else [],
            is_var=node.accessor == SETTER,
            is_override=self.is_override(node),
        )
        self.accessors[(is_static, name)] = variable
        self._target(node).append(variable)

    def _visit_constructor(self, parameters: List[ts_ast.ParameterDeclaration]) -> None:
        for signature in self.type_mapper.map_call_signature(ts_ast.Signature(parameters=parameters)):
            self.constructors.append(list(signature.params))

    def _visit_index_signature(self, node: ts_ast.IndexSignatureDeclaration) -> None:
        key = self.type_mapper.map_type(node.parameter.type)
        value = self.type_mapper.map_type(node.type).as_nullable()
        key_param = Parameter(node.parameter.name, key)

        getter = CallSignature((key_param,), (), value)
        self._add_function(GET, getter, [NATIVE_GETTER_ANNOTATION], self.members)

        if not node.readonly:
            setter = CallSignature((key_param, Parameter("value", value)), (), Type(UNIT))
            self._add_function(SET, setter, [NATIVE_SETTER_ANNOTATION], self.members)

    def _add_functions(self, name: str, signature: ts_ast.Signature,
                       extra_annotations: List[Annotation], target: Optional[List[Member]] = None,
                       is_override: bool = False) -> None:
        for call_signature in self.type_mapper.map_call_signature(signature):
            self._add_function(name, call_signature, extra_annotations,
                               self.members if target is None else target, is_override)

    def _add_function(self, name: str, signature: CallSignature, extra_annotations: List[Annotation],
                      target: List[Member], is_override: bool = False) -> None:
        if self.receiver is not None and self.receiver_type_params:
            signature = CallSignature(
                signature.params,
                tuple(self.receiver_type_params) + signature.type_params,
                signature.return_type,
            )
        target.append(Function(
            name=name,
            signature=signature,
            annotations=self.annotations + list(extra_annotations),
            extends_type=self.receiver,
            is_override=is_override,
        ))


def _heritage(clauses: List[ts_ast.HeritageClause], type_mapper: TypeMapper) -> List[HeritageType]:
    return [HeritageType(type_mapper.map_type(t).stringify())
            for clause in clauses for t in clause.types]


def translate_interface(node: ts_ast.InterfaceDeclaration, type_mapper: TypeMapper,
                        annotations: List[Annotation],
                        is_override: Callable, is_override_property: Callable) -> Classifier:
    """Translate an interface declared by this project."""
    mapper = type_mapper.with_type_parameters(node.type_parameters)
    body = MemberTranslator(mapper, is_override, is_override_property).translate(node.members)

    return Classifier(
        name=node.name.text,
        kind=ClassKind.INTERFACE,
        type_params=mapper.map_type_params(node.type_parameters),
        parents=_heritage(node.heritage_clauses, mapper),
        members=body.members + body.static_members,
        annotations=list(annotations),
        is_open=False,
    )


def translate_interface_extensions(node: ts_ast.InterfaceDeclaration, type_mapper: TypeMapper,
                                   annotations: List[Annotation],
                                   is_override: Callable, is_override_property: Callable) -> List[Member]:
    """Translate an interface that augments a type declared elsewhere."""
    mapper = type_mapper.with_type_parameters(node.type_parameters)
    type_params = mapper.map_type_params(node.type_parameters)
    receiver = Type(node.name.text, tuple(Type(p.name) for p in type_params))

    logger.debug(f"Interface {node.name.text} augments an external type, emitting extensions")
    body = MemberTranslator(mapper, is_override, is_override_property, annotations=annotations,
                            receiver=receiver, receiver_type_params=type_params).translate(node.members)
    return body.members + body.static_members


def translate_class(node: ts_ast.ClassDeclaration, type_mapper: TypeMapper,
                    annotations: List[Annotation],
                    is_override: Callable, is_override_property: Callable) -> Optional[Classifier]:
    """Translate a class; anonymous classes cannot be represented and yield None."""
    if node.name is None:
        logger.debug(f"Skipping anonymous class at line {node.line}")
        return None

    mapper = type_mapper.with_type_parameters(node.type_parameters)
    body = MemberTranslator(mapper, is_override, is_override_property).translate(node.members)

    members = list(body.members)
    if body.static_members:
        members.append(companion_object(members=body.static_members))

    return Classifier(
        name=node.name.text,
        kind=ClassKind.CLASS,
        constructors=body.constructors,
        type_params=mapper.map_type_params(node.type_parameters),
        parents=_heritage(node.heritage_clauses, mapper),
        members=members,
        annotations=list(annotations),
        is_open=True,
    )
