"""
Namespace nesting: turns ``namespace A.B.Leaf { ... }`` into nested objects.
"""

from typing import List, Optional, Sequence

from .models import Annotation, ClassKind, Classifier, DEFAULT_MODULE_ANNOTATIONS, Member


def build_nested_module(qualifier: Sequence[str], name: str, members: List[Member],
                        additional_annotations: Optional[List[Annotation]] = None) -> Classifier:
    """Wrap ``members`` in OBJECT ``name``, then in one OBJECT per qualifier.

    The first qualifier segment is the outermost object and ``name`` the
    innermost. Every level gets ``@module`` plus ``additional_annotations``.

    Args:
        qualifier: Outer namespace names in source order
        name: Innermost namespace name
        members: Translated declarations of the namespace body
        additional_annotations: Extra annotations, e.g. ``@fake``

    Returns:
        The outermost OBJECT classifier
    """
    annotations = DEFAULT_MODULE_ANNOTATIONS + list(additional_annotations or [])

    nested = Classifier(name=name, kind=ClassKind.OBJECT, members=list(members),
                        annotations=list(annotations))
    for outer in reversed(qualifier):
        nested = Classifier(name=outer, kind=ClassKind.OBJECT, members=[nested],
                            annotations=list(annotations))
    return nested
