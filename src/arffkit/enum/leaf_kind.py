from enum import StrEnum


class LeafKind(StrEnum):
    """
    The primitive kind of one leaf of a row shape.

    The leaf kind decides how a cell is coerced; it maps onto a declared
    attribute kind when writing (`Integer`/`Float` -> NUMERIC,
    `String` -> STRING, `Boolean`/`Nominal` -> NOMINAL).
    """

    Integer = "integer"
    Float = "float"
    String = "string"
    Boolean = "boolean"
    """Written as the nominal labels `f` and `t`."""
    Nominal = "nominal"
