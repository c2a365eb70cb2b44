"""
Resolution of ``export = X`` assignments.

While a scope is visited every ``export = X`` registers X in an alias table
together with the ``@module`` annotation X must receive. Once the scope is
complete the table is applied to the scope's top-level declarations.
"""

import logging
from typing import Dict, List, Set

from .models import FAKE, MODULE, Annotation, Member

logger = logging.getLogger(__name__)


def resolve_export_assignments(declarations: List[Member],
                               exported_by_assignment: Dict[str, Annotation]) -> Set[str]:
    """Attach pending ``@module`` annotations to the declarations they name.

    A declaration already tagged ``@module`` whose own name equals the pending
    module path is left as is. Every other match loses its ``@fake`` and old
    ``@module`` annotations and receives the pending one.

    Args:
        declarations: Top-level declarations of the finished scope
        exported_by_assignment: Alias table, modified in place

    Returns:
        Names of the aliases that were resolved and removed from the table
    """
    found: Set[str] = set()

    for declaration in declarations:
        annotation = exported_by_assignment.get(declaration.name)
        if annotation is None:
            continue

        module_path = annotation.first_argument()
        if declaration.has_module_annotation() and declaration.name == module_path:
            continue

        kept = [a for a in declaration.annotations if a.name not in (FAKE, MODULE)]
        kept.append(annotation)
        declaration.annotations = kept
        found.add(declaration.name)

    for name in found:
        del exported_by_assignment[name]

    if found:
        logger.debug(f"Resolved export assignments: {sorted(found)}")
    return found
