"""
Type Hierarchy

Ancestor lookup for entity types. The resolver only depends on the abstract
TypeHierarchy, so any ontology backend can be plugged in.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections import deque
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_HIERARCHY_FILE = Path(__file__).parent / "data" / "hierarchy.json"


class UnknownTypeError(LookupError):
    """Raised when a type is not registered in the hierarchy."""

    def __init__(self, type_id: str):
        super().__init__(f"Unknown entity type: {type_id}")
        self.type_id = type_id


class TypeHierarchy(ABC):
    """Abstract ancestor lookup."""

    @abstractmethod
    def ancestors(self, type_id: str) -> List[str]:
        """
        Get the ancestors of a type, nearest first.

        Args:
            type_id: Upper-case entity type key

        Returns:
            Ordered list of ancestor type keys (excluding the type itself)

        Raises:
            UnknownTypeError: If the type is not registered
        """
        pass


class StaticTypeHierarchy(TypeHierarchy):
    """
    Hierarchy backed by an in-memory map of type -> direct parents.

    Ancestors are collected breadth-first in the declared parent order, each
    type at most once.
    """

    def __init__(self, parents: Dict[str, List[str]]):
        self.parents = {key.upper(): [p.upper() for p in value or []]
                        for key, value in parents.items()}
        logger.debug(f"StaticTypeHierarchy initialized with {len(self.parents)} types")

    def ancestors(self, type_id: str) -> List[str]:
        type_id = type_id.upper()
        if type_id not in self.parents:
            raise UnknownTypeError(type_id)

        result: List[str] = []
        seen = {type_id}
        queue = deque(self.parents[type_id])
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            result.append(current)
            queue.extend(self.parents.get(current, []))

        return result

    @classmethod
    def from_file(cls, file_path: Optional[Path] = None) -> "StaticTypeHierarchy":
        """
        Load a hierarchy from a JSON object mapping each type to its parents.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not a valid hierarchy
        """
        file_path = file_path or DEFAULT_HIERARCHY_FILE
        logger.info(f"Loading type hierarchy from: {file_path}")

        if not file_path.exists():
            raise FileNotFoundError(f"Hierarchy file not found: {file_path}")

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in hierarchy file: {e}")

        if not isinstance(data, dict):
            raise ValueError("Hierarchy file must contain a JSON object")

        return cls(data)

    @classmethod
    def default(cls) -> "StaticTypeHierarchy":
        """Load the hierarchy bundled with the package."""
        return cls.from_file(DEFAULT_HIERARCHY_FILE)
