"""
Enumerations Module.

Defines the policy options used by the writers.
"""

from enum import Enum


class NominalOrder(Enum):
    """
    Order in which nominal labels are declared in `@ATTRIBUTE` lines.
    """

    Declared = "declared"  # Enum member / Literal argument order.
    Sorted = "sorted"  # Lexicographic label order.
