from enum import StrEnum


# --- Classified input lines, as produced by the lexer ---
class LineKind(StrEnum):
    Blank = "blank"
    Comment = "comment"
    Relation = "relation"
    Attribute = "attribute"
    DataMarker = "data_marker"
    Data = "data"
