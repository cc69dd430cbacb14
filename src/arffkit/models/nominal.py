"""
Nominal Label Tables.

A nominal column holds one of a closed set of labels. On the Python side the
same closed set is an `Enum`, a `Literal[...]` of strings, or `bool`.
`NominalTable` is the bidirectional label <-> variant mapping for one such
type, built once and cached.
"""

from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple, Type

# Accepted spellings of booleans when reading, matched case-insensitively.
_FALSE_SPELLINGS = ("0", "f", "false", "n", "no")
_TRUE_SPELLINGS = ("1", "t", "true", "y", "yes")


def enum_label(member: Enum) -> str:
    """
    Returns the label of an enum member.

    String-valued enums (e.g. `StrEnum`) are labelled by value, so labels
    such as "Iris-setosa" can be expressed; all other enums by member name.
    """
    return member.value if isinstance(member.value, str) else member.name


class NominalTable:
    """
    Closed, ordered label <-> variant table.

    Attributes:
        labels (Tuple[str, ...]): Labels in declaration order.
        variants (Tuple[Any, ...]): The Python value of each label, same order.
    """

    def __init__(
        self,
        labels: Tuple[str, ...],
        variants: Tuple[Any, ...],
        aliases: Optional[Dict[str, Any]] = None,
    ):
        if len(labels) != len(variants):
            raise ValueError("labels and variants must have the same length")
        if len(set(labels)) != len(labels):
            raise ValueError(f"duplicate nominal labels: {labels}")
        self.labels = labels
        self.variants = variants
        self._by_label: Dict[str, Any] = dict(zip(labels, variants))
        self._aliases: Dict[str, Any] = aliases or {}
        self._by_variant = {variant: label for label, variant in zip(labels, variants)}

    def __repr__(self) -> str:
        return f"NominalTable(labels={self.labels!r})"

    def variant_of(self, label: str) -> Any:
        """
        Returns the variant for `label`.

        Raises:
            KeyError: If `label` is not part of the table.
        """
        if label in self._by_label:
            return self._by_label[label]
        return self._aliases[label.lower()]

    def label_of(self, variant: Any) -> Optional[str]:
        """Returns the label of `variant`, or None if it is not a variant."""
        try:
            return self._by_variant.get(variant)
        except TypeError:
            # unhashable values are never variants
            return None

    # --- Factory Methods ---

    @staticmethod
    @lru_cache(maxsize=None)
    def for_enum(enum_type: Type[Enum]) -> "NominalTable":
        members = tuple(enum_type)
        if not members:
            raise ValueError(f"Enum {enum_type.__name__} has no members")
        return NominalTable(tuple(enum_label(m) for m in members), members)

    @staticmethod
    @lru_cache(maxsize=None)
    def for_labels(labels: Tuple[str, ...]) -> "NominalTable":
        return NominalTable(labels, labels)

    @staticmethod
    @lru_cache(maxsize=None)
    def for_bool() -> "NominalTable":
        aliases = {s: False for s in _FALSE_SPELLINGS}
        aliases.update({s: True for s in _TRUE_SPELLINGS})
        return NominalTable(("f", "t"), (False, True), aliases)
