"""
Ontology Module

Taxonomy tables, type hierarchy lookup and category resolution.
"""

from .hierarchy import StaticTypeHierarchy, TypeHierarchy, UnknownTypeError
from .resolver import TypeCategoryResolver
from .taxonomy import Taxonomy

__all__ = [
    "StaticTypeHierarchy",
    "TypeHierarchy",
    "UnknownTypeError",
    "TypeCategoryResolver",
    "Taxonomy",
]
