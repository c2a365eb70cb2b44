"""
Kotlin declaration printer.

Renders a translated PackagePart as Kotlin/JS external declarations: native
bodies are written as ``noImpl`` and namespaces become nested objects.
"""

import logging
from typing import List, Optional

from .exceptions import InvariantViolationError
from .models import (
    NO_IMPL, Annotation, CallSignature, ClassKind, Classifier, EnumEntry,
    Function, Member, PackagePart, Parameter, TypeAlias, TypeParam, Variable,
)

logger = logging.getLogger(__name__)

INDENT = "    "


def quote(value: str) -> str:
    """Render a Kotlin string literal."""
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'


def render_annotation(annotation: Annotation) -> str:
    """Render ``@name`` or ``@name("a", key = "b")``."""
    if not annotation.arguments:
        return f"@{annotation.name}"
    arguments = []
    for argument in annotation.arguments:
        value = quote(argument.value)
        arguments.append(f"{argument.name} = {value}" if argument.name else value)
    return f"@{annotation.name}({', '.join(arguments)})"


def render_type_params(type_params: List[TypeParam]) -> str:
    if not type_params:
        return ""
    rendered = []
    for param in type_params:
        if param.upper_bound is not None:
            rendered.append(f"{param.name} : {param.upper_bound.stringify()}")
        else:
            rendered.append(param.name)
    return "<" + ", ".join(rendered) + ">"


def render_parameter(param: Parameter) -> str:
    text = f"{param.name}: {param.type.stringify()}"
    if param.vararg:
        text = "vararg " + text
    if param.optional:
        text += f" = {NO_IMPL}"
    return text


def render_parameters(params) -> str:
    return "(" + ", ".join(render_parameter(p) for p in params) + ")"


class KotlinEmitter:
    """Prints the declaration model as Kotlin source."""

    def __init__(self, indent: str = INDENT):
        self.indent = indent
        self.lines: List[str] = []

    def emit(self, package_part: PackagePart) -> str:
        """Render a whole compilation unit."""
        self.lines = []
        if package_part.fq_name:
            self.lines.append(f"package {package_part.fq_name}")
            self.lines.append("")

        for index, member in enumerate(package_part.members):
            if index:
                self.lines.append("")
            self._member(member, 0, None)

        logger.debug(f"Emitted {len(package_part.members)} top-level declarations")
        return "\n".join(self.lines) + "\n"

    # ---------------------------------------------------------------

    def _write(self, depth: int, text: str) -> None:
        self.lines.append(self.indent * depth + text)

    def _annotations(self, member: Member, depth: int) -> None:
        for annotation in member.annotations:
            self._write(depth, render_annotation(annotation))

    def _member(self, member: Member, depth: int, owner: Optional[Classifier]) -> None:
        if isinstance(member, Classifier):
            self._classifier(member, depth)
        elif isinstance(member, Variable):
            self._variable(member, depth, owner)
        elif isinstance(member, Function):
            self._function(member, depth, owner)
        elif isinstance(member, TypeAlias):
            self._type_alias(member, depth)
        elif isinstance(member, EnumEntry):
            self._write(depth, member.name)
        else:
            raise InvariantViolationError(f"Cannot emit {member.kind_name}", name=member.name)

    def _variable(self, variable: Variable, depth: int, owner: Optional[Classifier]) -> None:
        self._annotations(variable, depth)
        keyword = "var" if variable.is_var else "val"
        prefix = "override " if variable.is_override else ""

        name = variable.name
        if variable.extends_type is not None:
            name = f"{variable.extends_type.stringify()}.{name}"
            type_params = render_type_params(variable.type_params)
            if type_params:
                keyword += " " + type_params
            self._write(depth, f"{prefix}{keyword} {name}: {variable.type.stringify()}")
            self._write(depth + 1, f"get() = {NO_IMPL}")
            if variable.is_var:
                self._write(depth + 1, f"set(value) = {NO_IMPL}")
            return

        text = f"{prefix}{keyword} {name}: {variable.type.stringify()}"
        if not _is_interface(owner):
            text += f" = {NO_IMPL}"
        self._write(depth, text)

    def _function(self, function: Function, depth: int, owner: Optional[Classifier]) -> None:
        self._annotations(function, depth)
        self._write(depth, self._function_header(function.name, function.signature, function,
                                                 with_body=not _is_interface(owner)))

    @staticmethod
    def _function_header(name: str, signature: CallSignature, function: Function, with_body: bool) -> str:
        text = "override fun " if function.is_override else "fun "
        type_params = render_type_params(list(signature.type_params))
        if type_params:
            text += type_params + " "
        if function.extends_type is not None:
            text += function.extends_type.stringify() + "."
        text += f"{name}{render_parameters(signature.params)}: {signature.return_type.stringify()}"
        if with_body:
            text += f" = {NO_IMPL}"
        return text

    def _type_alias(self, alias: TypeAlias, depth: int) -> None:
        self._annotations(alias, depth)
        header = f"typealias {alias.name}{render_type_params(alias.type_params)}"
        if len(alias.type.types) == 1:
            self._write(depth, f"{header} = {alias.type.types[0].stringify()}")
        else:
            self._write(depth, f"{header} = Any /* {alias.type.stringify()} */")

    def _classifier(self, classifier: Classifier, depth: int) -> None:
        self._annotations(classifier, depth)

        if classifier.kind is ClassKind.COMPANION_OBJECT:
            header = "companion object"
        elif classifier.kind is ClassKind.CLASS and classifier.is_open:
            header = f"open class {classifier.name}"
        else:
            header = f"{classifier.kind.value} {classifier.name}"
        header += render_type_params(classifier.type_params)

        constructors = list(classifier.constructors)
        if constructors and classifier.kind is ClassKind.CLASS:
            header += render_parameters(constructors.pop(0))

        if classifier.parents:
            header += " : " + ", ".join(p.stringify() for p in classifier.parents)

        if classifier.kind is ClassKind.ENUM:
            self._enum_body(classifier, header, depth)
            return

        if not classifier.members and not constructors:
            self._write(depth, header)
            return

        self._write(depth, header + " {")
        for params in constructors:
            self._write(depth + 1, f"constructor{render_parameters(params)}")
        for member in classifier.members:
            self._member(member, depth + 1, classifier)
        self._write(depth, "}")

    def _enum_body(self, classifier: Classifier, header: str, depth: int) -> None:
        entries = [m for m in classifier.members if isinstance(m, EnumEntry)]
        others = [m for m in classifier.members if not isinstance(m, EnumEntry)]

        self._write(depth, header + " {")
        for index, entry in enumerate(entries):
            text = entry.name
            if index < len(entries) - 1:
                text += ","
            elif others:
                text += ";"
            if entry.value is not None:
                value = quote(entry.value) if entry.is_string else entry.value
                text += f" /* = {value} */"
            self._write(depth + 1, text)
        for member in others:
            self._member(member, depth + 1, classifier)
        self._write(depth, "}")


def _is_interface(owner: Optional[Classifier]) -> bool:
    return owner is not None and owner.kind is ClassKind.INTERFACE
