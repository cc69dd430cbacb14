"""
Attribute Declaration Module.

Defines `Attribute`, the in-memory form of one `@ATTRIBUTE` directive: a
column name plus its declared kind (and, for nominal columns, the ordered
label set).
"""

from typing import List, Optional

from pydantic import model_validator

from arffkit.enum import AttributeKind
from arffkit.helpers import quote_if_needed

from .base_model import BaseModel


class Attribute(BaseModel):
    """
    One column declaration.

    Attributes:
        name (str): The column name, unique within a header.
        kind (AttributeKind): NUMERIC, STRING or NOMINAL.
        labels (Optional[List[str]]): Ordered nominal labels. Present iff
            `kind` is NOMINAL.
    """

    name: str
    kind: AttributeKind
    labels: Optional[List[str]] = None

    @model_validator(mode="after")
    def _check_labels(self) -> "Attribute":
        if self.kind == AttributeKind.Nominal:
            if not self.labels:
                raise ValueError(
                    f"Nominal attribute '{self.name}' must declare at least one label."
                )
            if len(set(self.labels)) != len(self.labels):
                raise ValueError(
                    f"Nominal attribute '{self.name}' declares duplicate labels: {self.labels}."
                )
        elif self.labels is not None:
            raise ValueError(
                f"Only nominal attributes carry labels (attribute '{self.name}' is {self.kind})."
            )
        return self

    # --- Factory Methods ---

    @classmethod
    def numeric(cls, name: str) -> "Attribute":
        return cls(name=name, kind=AttributeKind.Numeric)

    @classmethod
    def string(cls, name: str) -> "Attribute":
        return cls(name=name, kind=AttributeKind.String)

    @classmethod
    def nominal(cls, name: str, labels: List[str]) -> "Attribute":
        return cls(name=name, kind=AttributeKind.Nominal, labels=list(labels))

    # --- Formatting ---

    def type_spec(self, quote_char: str = "'") -> str:
        """
        Returns the type part of the directive, e.g. `NUMERIC` or `{red, blue}`.
        """
        if self.kind == AttributeKind.Nominal:
            assert self.labels is not None
            return (
                "{"
                + ", ".join(quote_if_needed(lb, quote_char) for lb in self.labels)
                + "}"
            )
        return str(self.kind)

    def directive(self, quote_char: str = "'") -> str:
        """Returns the full `@ATTRIBUTE <name> <type>` line, without newline."""
        return (
            f"@ATTRIBUTE {quote_if_needed(self.name, quote_char)} "
            f"{self.type_spec(quote_char)}"
        )
