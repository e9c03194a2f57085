"""
Type Category Resolver

Assigns an entity its coarse category: the first root type found among the
entity's own type and its ancestors.
"""

import logging
from typing import List, Optional, Sequence

from .hierarchy import TypeHierarchy, UnknownTypeError

logger = logging.getLogger(__name__)


class TypeCategoryResolver:
    """
    Resolves exact types to root categories using an injected hierarchy.
    """

    def __init__(self, hierarchy: TypeHierarchy):
        self.hierarchy = hierarchy

    def lineage(self, exact_type: str) -> List[str]:
        """
        Get a type followed by its ancestors, upper-cased.

        Raises:
            UnknownTypeError: If the hierarchy doesn't know the type
        """
        type_id = exact_type.upper()
        return [type_id] + self.hierarchy.ancestors(type_id)

    def resolve(self, exact_type: Optional[str], roots: Sequence[str]) -> Optional[str]:
        """
        Resolve the category of a type.

        Roots are checked in order, so when a type descends from several roots
        the earliest listed one wins.

        Args:
            exact_type: Entity exact type (any case)
            roots: Ordered root category keys

        Returns:
            The matching root key, or None if unresolved
        """
        if not exact_type:
            logger.error("Could not resolve empty entity type")
            return None

        try:
            lineage = set(self.lineage(exact_type))
        except UnknownTypeError:
            logger.error(f"Error resolving entity type for {exact_type}")
            return None

        for root in roots:
            if root.upper() in lineage:
                return root.upper()

        logger.error(f"Could not resolve type {exact_type}")
        return None
