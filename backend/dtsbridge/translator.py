"""
Declaration-merging translator.

Translates a list of TypeScript ambient declarations into the Kotlin
declaration model. Each scope (the file itself or a namespace body) is
translated by ``translate_scope`` with a ScopeConfig describing the rules of
that scope:

- root scope: members lacking ``declare`` are placeholders (``@fake``), and
  every member gets ``@native``;
- namespace scope: ``export`` is the required modifier, no default
  annotations, and ``export =`` refers to the namespace name.

After a scope has been visited its export assignments are resolved and its
same-named declarations are merged.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from . import ts_ast
from .exceptions import InvariantViolationError, UnsupportedNodeError
from .export_assignment import resolve_export_assignments
from .members import (
    declaration_name, translate_class, translate_interface,
    translate_interface_extensions,
)
from .merger import merge_declarations
from .models import (
    DEFAULT_ANNOTATIONS, DEFAULT_FAKE_ANNOTATIONS, FAKE_ANNOTATION,
    MODULE_ANNOTATION, ANY, Annotation, ClassKind, Classifier, EnumEntry,
    Function, Member, PackagePart, Type, TypeAlias, Variable, module_annotation,
)
from .namespaces import build_nested_module
from .ts_ast import SyntaxKind, has_modifier
from .type_mapper import KotlinTypeMapper, TypeMapper

logger = logging.getLogger(__name__)


def _always_own(name: ts_ast.Identifier) -> bool:
    return True


def _never_override(node) -> bool:
    return False


@dataclass(frozen=True)
class ScopeConfig:
    """Rules for translating one scope.

    Attributes:
        default_annotations: Annotations every top-level member receives
        required_modifier: Modifier whose absence marks a placeholder
        module_name: Name of the enclosing namespace (None at the root)
        type_mapper: Maps source type nodes to target types
        is_own_declaration: False for interfaces augmenting external types
        is_override: Marks methods overriding an inherited signature
        is_override_property: Marks properties overriding an inherited one
    """
    default_annotations: List[Annotation] = field(default_factory=lambda: list(DEFAULT_ANNOTATIONS))
    required_modifier: Optional[SyntaxKind] = SyntaxKind.DECLARE_KEYWORD
    module_name: Optional[str] = None
    type_mapper: TypeMapper = field(default_factory=KotlinTypeMapper)
    is_own_declaration: Callable[[ts_ast.Identifier], bool] = _always_own
    is_override: Callable[[ts_ast.MethodSignature], bool] = _never_override
    is_override_property: Callable[[ts_ast.PropertySignature], bool] = _never_override

    def for_module(self, name: str) -> 'ScopeConfig':
        """Derive the configuration of a namespace body named ``name``."""
        return dataclasses.replace(
            self,
            default_annotations=[],
            required_modifier=SyntaxKind.EXPORT_KEYWORD,
            module_name=name,
        )


@dataclass
class ScopeResult:
    """Merged declarations of a scope plus its unresolved ``export =`` aliases."""
    declarations: List[Member]
    exported_by_assignment: Dict[str, Annotation]


class _Scope:
    """Mutable state of one scope while its statements are visited."""

    def __init__(self, config: ScopeConfig, statements: List[ts_ast.Statement]):
        self.config = config
        self.declarations: List[Member] = []
        self.exported_by_assignment: Dict[str, Annotation] = {}
        self.overloaded_functions: Set[str] = {
            s.name.text for s in statements
            if s.kind is SyntaxKind.FUNCTION_DECLARATION and s.name is not None and not s.has_body
        }

    def additional_annotations(self, node) -> List[Annotation]:
        """``@fake`` for root-scope statements that lack ``declare``."""
        required = self.config.required_modifier
        if required is SyntaxKind.DECLARE_KEYWORD and not has_modifier(node.modifiers, required):
            return list(DEFAULT_FAKE_ANNOTATIONS)
        return []

    def add(self, member: Member) -> None:
        self.declarations.append(member)


# -------------------------------------------------------------------
# Visitors
# -------------------------------------------------------------------

def _visit_variable_statement(scope: _Scope, node: ts_ast.VariableStatement) -> None:
    annotations = scope.config.default_annotations + scope.additional_annotations(node)
    for declaration in node.declarations:
        var_type = scope.config.type_mapper.map_type(declaration.type) if declaration.type else Type(ANY)
        scope.add(Variable(
            name=declaration_name(declaration.name),
            type=var_type,
            annotations=list(annotations),
            is_var=not node.is_const,
        ))


def _visit_function_declaration(scope: _Scope, node: ts_ast.FunctionDeclaration) -> None:
    if node.name is None:
        raise UnsupportedNodeError(node, "anonymous function declaration")

    name = node.name.text
    if node.has_body and name in scope.overloaded_functions:
        logger.debug(f"Dropping implementation signature of overloaded function {name}")
        return

    annotations = scope.config.default_annotations + scope.additional_annotations(node)
    for signature in scope.config.type_mapper.map_call_signature(node.signature):
        scope.add(Function(name=name, signature=signature, annotations=list(annotations)))


def _visit_interface_declaration(scope: _Scope, node: ts_ast.InterfaceDeclaration) -> None:
    config = scope.config
    if config.is_own_declaration(node.name):
        scope.add(translate_interface(node, config.type_mapper, config.default_annotations,
                                      config.is_override, config.is_override_property))
    else:
        for member in translate_interface_extensions(node, config.type_mapper, config.default_annotations,
                                                     config.is_override, config.is_override_property):
            scope.add(member)


def _visit_class_declaration(scope: _Scope, node: ts_ast.ClassDeclaration) -> None:
    config = scope.config
    annotations = config.default_annotations + scope.additional_annotations(node)
    classifier = translate_class(node, config.type_mapper, annotations,
                                 config.is_override, config.is_override_property)
    if classifier is not None:
        scope.add(classifier)


def _visit_enum_declaration(scope: _Scope, node: ts_ast.EnumDeclaration) -> None:
    entries = []
    for member in node.members:
        initializer = member.initializer
        if initializer is not None and initializer.kind not in (SyntaxKind.NUMERIC_LITERAL, SyntaxKind.STRING_LITERAL):
            raise UnsupportedNodeError(initializer, "enum initializer must be a literal")
        entries.append(EnumEntry(
            name=declaration_name(member.name),
            value=initializer.text if initializer is not None else None,
            is_string=initializer is not None and initializer.kind is SyntaxKind.STRING_LITERAL,
        ))

    scope.add(Classifier(name=node.name.text, kind=ClassKind.ENUM, members=entries))


def _module_name(node: ts_ast.ModuleDeclaration) -> str:
    if node.name.kind in (SyntaxKind.IDENTIFIER, SyntaxKind.STRING_LITERAL):
        return node.name.text
    raise UnsupportedNodeError(node.name, "namespace name must be an identifier or a string")


def _visit_module_declaration(scope: _Scope, node: ts_ast.ModuleDeclaration) -> None:
    additional_annotations = scope.additional_annotations(node)

    innermost = node
    qualifier: List[str] = []
    while innermost.body.kind is not SyntaxKind.MODULE_BLOCK:
        if innermost.body.kind is not SyntaxKind.MODULE_DECLARATION:
            raise InvariantViolationError(
                f"Expected a namespace body, got {innermost.body.kind.value}", line=innermost.line)
        qualifier.append(_module_name(innermost))
        innermost = innermost.body

    name = _module_name(innermost)
    child = translate_scope(innermost.body.statements, scope.config.for_module(name))

    is_external_module = innermost.name.kind is SyntaxKind.STRING_LITERAL
    if is_external_module and not child.exported_by_assignment:
        if _reexport_passthrough(name, child.declarations):
            logger.debug(f"Module '{name}' passes its {len(child.declarations)} declarations through")
            scope.declarations.extend(child.declarations)
            return

    scope.exported_by_assignment.update(child.exported_by_assignment)

    if is_external_module and not child.declarations:
        logger.debug(f"Module '{name}' declares nothing of its own")
        return

    scope.add(build_nested_module(qualifier, name, child.declarations, additional_annotations))


def _reexport_passthrough(name: str, declarations: List[Member]) -> bool:
    """Decide whether an external module's members belong directly to the parent.

    Two shapes qualify. Either every member is a placeholder or a plain
    interface, in which case placeholders are made real; or every member is
    already tagged as part of this module, where a lone variable takes the
    module's name.
    """
    all_fake_or_interface = all(
        FAKE_ANNOTATION in d.annotations
        or (isinstance(d, Classifier) and d.kind is ClassKind.INTERFACE and not d.has_module_annotation())
        for d in declarations
    )
    if all_fake_or_interface:
        for d in declarations:
            d.annotations = [a for a in d.annotations if a != FAKE_ANNOTATION]
        return True

    all_part_of_module = all(
        any(a == module_annotation(name) for a in d.annotations) for d in declarations
    )
    if all_part_of_module:
        if len(declarations) == 1 and isinstance(declarations[0], Variable):
            variable = declarations[0]
            variable.name = variable.module_argument()
            variable.annotations = [MODULE_ANNOTATION if a.name == MODULE_ANNOTATION.name else a
                                    for a in variable.annotations]
        return True

    return False


def _visit_type_alias_declaration(scope: _Scope, node: ts_ast.TypeAliasDeclaration) -> None:
    mapper = scope.config.type_mapper.with_type_parameters(node.type_parameters)
    scope.add(TypeAlias(
        name=node.name.text,
        type_params=mapper.map_type_params(node.type_parameters),
        type=mapper.map_type_union(node.type),
    ))


def _visit_export_assignment(scope: _Scope, node: ts_ast.ExportAssignment) -> None:
    if node.expression.kind is not SyntaxKind.IDENTIFIER:
        raise UnsupportedNodeError(node.expression, "export = expects an identifier")
    scope.exported_by_assignment[node.expression.text] = module_annotation(scope.config.module_name)


def _visit_import_declaration(scope: _Scope, node: ts_ast.ImportDeclaration) -> None:
    logger.debug(f"Ignoring import at line {node.line}")


def _visit_export_declaration(scope: _Scope, node: ts_ast.ExportDeclaration) -> None:
    logger.debug(f"Ignoring re-export at line {node.line}: {node.text}")


VISITORS = {
    SyntaxKind.VARIABLE_STATEMENT: _visit_variable_statement,
    SyntaxKind.FUNCTION_DECLARATION: _visit_function_declaration,
    SyntaxKind.INTERFACE_DECLARATION: _visit_interface_declaration,
    SyntaxKind.CLASS_DECLARATION: _visit_class_declaration,
    SyntaxKind.ENUM_DECLARATION: _visit_enum_declaration,
    SyntaxKind.MODULE_DECLARATION: _visit_module_declaration,
    SyntaxKind.TYPE_ALIAS_DECLARATION: _visit_type_alias_declaration,
    SyntaxKind.EXPORT_ASSIGNMENT: _visit_export_assignment,
    SyntaxKind.IMPORT_DECLARATION: _visit_import_declaration,
    SyntaxKind.EXPORT_DECLARATION: _visit_export_declaration,
}

DECLARATION_KINDS = frozenset({
    SyntaxKind.VARIABLE_STATEMENT,
    SyntaxKind.FUNCTION_DECLARATION,
    SyntaxKind.INTERFACE_DECLARATION,
    SyntaxKind.CLASS_DECLARATION,
    SyntaxKind.ENUM_DECLARATION,
    SyntaxKind.MODULE_DECLARATION,
    SyntaxKind.TYPE_ALIAS_DECLARATION,
    SyntaxKind.EXPORT_ASSIGNMENT,
    SyntaxKind.IMPORT_DECLARATION,
    SyntaxKind.EXPORT_DECLARATION,
})

_missing = DECLARATION_KINDS - VISITORS.keys()
if _missing:
    raise InvariantViolationError(
        f"No visitor for statement kinds: {sorted(k.value for k in _missing)}")


# -------------------------------------------------------------------
# Entry points
# -------------------------------------------------------------------

def translate_scope(statements: List[ts_ast.Statement], config: ScopeConfig) -> ScopeResult:
    """Visit a statement list and run the finishing pass for that scope."""
    scope = _Scope(config, statements)

    for statement in statements:
        visitor = VISITORS.get(statement.kind)
        if visitor is None:
            raise UnsupportedNodeError(statement, "not a declaration")
        visitor(scope, statement)

    resolve_export_assignments(scope.declarations, scope.exported_by_assignment)
    declarations = merge_declarations(scope.declarations)

    return ScopeResult(declarations, scope.exported_by_assignment)


def translate(statements: List[ts_ast.Statement], config: Optional[ScopeConfig] = None,
              fq_name: Optional[str] = None) -> PackagePart:
    """Translate a whole compilation unit.

    Raises:
        InvariantViolationError: if an ``export =`` alias was never matched
    """
    result = translate_scope(statements, config or ScopeConfig())

    if result.exported_by_assignment:
        raise InvariantViolationError(
            f"Unresolved export assignments: {sorted(result.exported_by_assignment)}",
            aliases=sorted(result.exported_by_assignment))

    return PackagePart(fq_name, result.declarations)
