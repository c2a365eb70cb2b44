"""
Output declaration model for the Kotlin side of the translation.

Every translated TypeScript construct ends up as one of the Member variants
below. Members are plain mutable dataclasses owned by the declaration list of
the scope that produced them; the merger and the export-assignment resolver
are the only components that modify them after creation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union


# -------------------------------------------------------------------
# Annotations
# -------------------------------------------------------------------

@dataclass(frozen=True)
class Argument:
    """A single annotation argument. Values are stored unquoted."""
    value: str
    name: Optional[str] = None


@dataclass(frozen=True)
class Annotation:
    """An annotation applied to a member, e.g. ``@module("lazy.js")``."""
    name: str
    arguments: Tuple[Argument, ...] = ()

    def first_argument(self) -> Optional[str]:
        """Return the value of the first argument, if any."""
        return self.arguments[0].value if self.arguments else None


NATIVE = "native"
MODULE = "module"
FAKE = "fake"
NO_IMPL = "noImpl"
INVOKE = "invoke"
GET = "get"
SET = "set"

NATIVE_ANNOTATION = Annotation(NATIVE)
MODULE_ANNOTATION = Annotation(MODULE)
FAKE_ANNOTATION = Annotation(FAKE)
NATIVE_GETTER_ANNOTATION = Annotation("nativeGetter")
NATIVE_SETTER_ANNOTATION = Annotation("nativeSetter")
NATIVE_INVOKE_ANNOTATION = Annotation("nativeInvoke")
NATIVE_NEW_ANNOTATION = Annotation(NATIVE, (Argument("new"),))

DEFAULT_ANNOTATIONS: List[Annotation] = [NATIVE_ANNOTATION]
DEFAULT_MODULE_ANNOTATIONS: List[Annotation] = [MODULE_ANNOTATION]
DEFAULT_FAKE_ANNOTATIONS: List[Annotation] = [FAKE_ANNOTATION]


def module_annotation(module_name: Optional[str]) -> Annotation:
    """Build the ``@module`` annotation for a module path (bare when None)."""
    if module_name is None:
        return MODULE_ANNOTATION
    return Annotation(MODULE, (Argument(module_name),))


# -------------------------------------------------------------------
# Target type expressions
# -------------------------------------------------------------------

ANY = "Any"
UNIT = "Unit"


@dataclass(frozen=True)
class Type:
    """A named Kotlin type, optionally generic and nullable."""
    name: str
    arguments: Tuple['TypeExpr', ...] = ()
    nullable: bool = False

    def stringify(self) -> str:
        text = self.name
        if self.arguments:
            text += "<" + ", ".join(arg.stringify() for arg in self.arguments) + ">"
        return text + ("?" if self.nullable else "")

    def as_nullable(self) -> 'Type':
        return Type(self.name, self.arguments, nullable=True)


@dataclass(frozen=True)
class FunctionType:
    """A Kotlin function type ``(a: A, b: B) -> R``."""
    params: Tuple['Parameter', ...]
    return_type: 'TypeExpr'
    nullable: bool = False

    def stringify(self) -> str:
        params = ", ".join(f"{p.name}: {p.type.stringify()}" for p in self.params)
        text = f"({params}) -> {self.return_type.stringify()}"
        return f"({text})?" if self.nullable else text

    def as_nullable(self) -> 'FunctionType':
        return FunctionType(self.params, self.return_type, nullable=True)


TypeExpr = Union[Type, FunctionType]


@dataclass(frozen=True)
class TypeUnion:
    """One or more alternative types; only type aliases keep unions intact."""
    types: Tuple[TypeExpr, ...]

    def stringify(self) -> str:
        return " | ".join(t.stringify() for t in self.types)


# -------------------------------------------------------------------
# Signatures
# -------------------------------------------------------------------

@dataclass(frozen=True)
class Parameter:
    name: str
    type: TypeExpr
    optional: bool = False
    vararg: bool = False


@dataclass(frozen=True)
class TypeParam:
    name: str
    upper_bound: Optional[TypeExpr] = None


@dataclass(frozen=True)
class CallSignature:
    params: Tuple[Parameter, ...]
    type_params: Tuple[TypeParam, ...]
    return_type: TypeExpr


# -------------------------------------------------------------------
# Members
# -------------------------------------------------------------------

class ClassKind(Enum):
    """Kinds of Kotlin classifiers produced by the translator."""
    CLASS = "class"
    INTERFACE = "interface"
    OBJECT = "object"
    ENUM = "enum class"
    COMPANION_OBJECT = "companion object"


@dataclass
class Member:
    """Base for everything that can appear in a declaration list."""
    name: str
    annotations: List[Annotation] = field(default_factory=list)

    def has_annotation(self, name: str) -> bool:
        return any(a.name == name for a in self.annotations)

    def has_module_annotation(self) -> bool:
        return self.has_annotation(MODULE)

    def module_argument(self) -> Optional[str]:
        """First argument of the first ``@module`` annotation, if present."""
        for annotation in self.annotations:
            if annotation.name == MODULE:
                return annotation.first_argument()
        return None

    @property
    def kind_name(self) -> str:
        return type(self).__name__


@dataclass
class Variable(Member):
    type: TypeExpr = Type(ANY)
    extends_type: Optional[TypeExpr] = None
    type_params: List[TypeParam] = field(default_factory=list)
    is_var: bool = True
    is_override: bool = False


@dataclass
class Function(Member):
    signature: CallSignature = CallSignature((), (), Type(UNIT))
    extends_type: Optional[TypeExpr] = None
    is_override: bool = False


@dataclass
class HeritageType:
    """A supertype reference; ``delegate`` is set for ``T by noImpl``."""
    type: str
    delegate: Optional[str] = None

    def stringify(self) -> str:
        if self.delegate:
            return f"{self.type} by {self.delegate}"
        return self.type


@dataclass
class Classifier(Member):
    kind: ClassKind = ClassKind.CLASS
    constructors: List[List[Parameter]] = field(default_factory=list)
    type_params: List[TypeParam] = field(default_factory=list)
    parents: List[HeritageType] = field(default_factory=list)
    members: List[Member] = field(default_factory=list)
    is_open: bool = False

    @property
    def kind_name(self) -> str:
        return self.kind.name

    def is_module(self) -> bool:
        """An OBJECT synthesized from a namespace."""
        return self.kind is ClassKind.OBJECT and self.has_module_annotation()

    def get_companion(self) -> Optional['Classifier']:
        for member in self.members:
            if isinstance(member, Classifier) and member.kind is ClassKind.COMPANION_OBJECT:
                return member
        return None

    def add_member(self, member: Member) -> None:
        self.members.append(member)


@dataclass
class TypeAlias(Member):
    type_params: List[TypeParam] = field(default_factory=list)
    type: TypeUnion = TypeUnion((Type(ANY),))


@dataclass
class EnumEntry(Member):
    """An enum constant; ``value`` is the unquoted initializer text."""
    value: Optional[str] = None
    is_string: bool = False


def companion_object(members: Optional[List[Member]] = None,
                     parents: Optional[List[HeritageType]] = None) -> Classifier:
    """Create the static holder attached to a class or interface."""
    return Classifier(
        name="",
        kind=ClassKind.COMPANION_OBJECT,
        parents=list(parents or []),
        members=list(members or []),
    )


@dataclass
class PackagePart:
    """Result of translating one compilation unit."""
    fq_name: Optional[str]
    members: List[Member]
