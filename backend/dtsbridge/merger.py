"""
Declaration merging.

TypeScript lets several same-named declarations (interface, class, namespace,
variable, enum) describe one entity. Kotlin does not, so this module folds
every group of same-named non-function members into a single member. The rules:

| a                        | b        | result                                       |
|--------------------------|----------|----------------------------------------------|
| INTERFACE                | INTERFACE| members unioned                              |
| CLASS / INTERFACE / ENUM | OBJECT   | OBJECT members moved into the companion      |
| OBJECT                   | OBJECT   | members unioned, both must be modules        |
| Classifier               | Variable | Variable if empty, else interface + delegate |

Function overloads are never merged.
"""

import logging
from typing import Callable, Dict, List, Optional, TypeVar

from .exceptions import InvariantViolationError, MergeConflictError
from .models import (
    NO_IMPL, Annotation, ClassKind, Classifier, Function, HeritageType, Member,
    Variable, companion_object,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Kinds that can absorb a namespace as their static side
COMPANION_HOSTS = (ClassKind.CLASS, ClassKind.INTERFACE, ClassKind.ENUM)


def merge_by_name(items: List[T], can_merge: Callable[[T], bool],
                  combine: Callable[[T, T], T]) -> List[T]:
    """Fold same-named items left to right into the slot of the first one.

    Items are kept in an arena of slots; a merged-away item leaves a
    tombstone that is dropped when the arena is compacted.
    """
    slots: List[Optional[T]] = list(items)
    first_slot: Dict[str, int] = {}

    for index, item in enumerate(slots):
        if not can_merge(item):
            continue
        target = first_slot.setdefault(item.name, index)
        if target == index:
            continue
        slots[target] = combine(slots[target], item)
        slots[index] = None

    return [item for item in slots if item is not None]


def merge_declarations(members: List[Member]) -> List[Member]:
    """Merge every group of same-named non-function declarations."""
    return merge_by_name(members, lambda m: not isinstance(m, Function), merge_pair)


def merge_pair(a: Member, b: Member) -> Member:
    """Merge two same-named declarations, including their annotations."""
    logger.debug(f"Merging {a.kind_name} and {b.kind_name} named '{a.name}'")

    if isinstance(a, Classifier) and isinstance(b, Classifier):
        result = merge_classifiers(a, b)
    elif isinstance(a, Classifier) and isinstance(b, Variable):
        result = merge_classifier_and_variable(a, b)
    elif isinstance(a, Variable) and isinstance(b, Classifier):
        result = merge_classifier_and_variable(b, a)
    else:
        raise MergeConflictError(a, b, "unsupported combination")

    result.annotations = merge_annotations(a.annotations, b.annotations)
    return result


def merge_classifiers(a: Classifier, b: Classifier) -> Classifier:
    if a.kind in COMPANION_HOSTS and b.kind is ClassKind.OBJECT:
        return merge_class_and_object(a, b)
    if a.kind is ClassKind.OBJECT and b.kind in COMPANION_HOSTS:
        return merge_class_and_object(b, a)
    if a.kind is ClassKind.INTERFACE and b.kind is ClassKind.INTERFACE:
        return merge_classifier_members(a, b)
    if a.kind is ClassKind.OBJECT and b.kind is ClassKind.OBJECT:
        if not (a.has_module_annotation() and b.is_module()):
            raise MergeConflictError(a, b, "only namespace objects can be merged")
        if _conflicting(a.module_argument(), b.module_argument()):
            raise MergeConflictError(
                a, b, f"modules '{a.module_argument()}' and '{b.module_argument()}' differ")
        return merge_classifier_members(a, b)

    raise MergeConflictError(a, b, f"merging {a.kind.name} and {b.kind.name} is unsupported")


def merge_classifier_and_variable(a: Classifier, b: Variable) -> Member:
    """A value declaration merged onto a type declaration.

    An empty classifier carries no information and gives way to the variable.
    A non-empty interface (or namespace) keeps its members and gets a
    companion object delegating to the variable's type.
    """
    if not a.members:
        return b

    if a.get_companion() is not None:
        raise InvariantViolationError(
            f"Unexpected companion object when merging {a.kind.name} '{a.name}' with a variable",
            classifier=a.name, kind=a.kind.name)

    if a.kind is ClassKind.INTERFACE or a.is_module():
        var_type = b.type.stringify()
        delegation = HeritageType(var_type, delegate=NO_IMPL)
        merged = Classifier(
            name=a.name,
            kind=ClassKind.INTERFACE,
            constructors=a.constructors,
            type_params=a.type_params,
            parents=a.parents,
            members=list(a.members),
            annotations=a.annotations,
            is_open=False,
        )
        merged.add_member(companion_object(parents=[delegation]))
        return merged

    raise MergeConflictError(a, b, f"non-empty {a.kind.name} cannot absorb a variable")


def merge_class_and_object(a: Classifier, b: Classifier) -> Classifier:
    """Move the members of object ``b`` into the companion of ``a``."""
    companion = a.get_companion()
    if companion is None:
        a.add_member(companion_object(members=b.members))
    else:
        add_members_from(companion, b)
    return a


def merge_classifier_members(a: Classifier, b: Classifier) -> Classifier:
    add_members_from(a, b)
    return a


def add_members_from(target: Classifier, source: Classifier) -> None:
    target.members = merge_declarations(target.members + source.members)


def merge_annotations(a: List[Annotation], b: List[Annotation]) -> List[Annotation]:
    """Combine two annotation lists, collapsing same-named annotations.

    An annotation without arguments gives way to one with arguments; equal
    arguments collapse to one annotation; different arguments conflict.
    """
    if not a:
        return b
    if not b:
        return a

    merged: Dict[str, Annotation] = {}
    for annotation in list(a) + list(b):
        existing = merged.get(annotation.name)
        merged[annotation.name] = annotation if existing is None else _merge_annotation(existing, annotation)
    return list(merged.values())


def _merge_annotation(a: Annotation, b: Annotation) -> Annotation:
    if not a.arguments:
        return b
    if not b.arguments:
        return a
    if a.arguments == b.arguments:
        return a
    raise MergeConflictError(a, b, f"annotation @{a.name} has different arguments")


def _conflicting(first: Optional[str], second: Optional[str]) -> bool:
    return first is not None and second is not None and first != second
