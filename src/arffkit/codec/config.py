"""
Configuration Module.

This module defines the configuration structure used to control the text
produced by the writers.
"""

from dataclasses import dataclass

from arffkit.models.header import DEFAULT_RELATION

from .enum import NominalOrder


@dataclass
class EncoderConfig:
    """
    Configuration settings for `encode` and `DataSet.to_text`.

    Attributes:
        default_relation (str): Relation name used when neither the caller nor
            the container type provides one.
        nominal_order (NominalOrder): Declaration order of nominal labels.
        quote_char (str): Quote used for strings, names and labels (`'` or `"`).
    """

    default_relation: str = DEFAULT_RELATION
    nominal_order: NominalOrder = NominalOrder.Declared
    quote_char: str = "'"

    def __post_init__(self):
        if self.quote_char not in ("'", '"'):
            raise ValueError(f"quote_char must be ' or \", got {self.quote_char!r}")

    def order_labels(self, labels):
        """Returns `labels` as a list, in the configured declaration order."""
        if self.nominal_order == NominalOrder.Sorted:
            return sorted(labels)
        return list(labels)
