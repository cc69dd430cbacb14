from .codec import (
    EncoderConfig as EncoderConfig,
    NominalOrder as NominalOrder,
    decode as decode,
    encode as encode,
)

from .dynamic import (
    ArffArray as ArffArray,
    DataSet as DataSet,
)

from .enum import (
    AttributeKind as AttributeKind,
    LeafKind as LeafKind,
)

from .errors import (
    ArffError as ArffError,
    ArffValueError as ArffValueError,
    ColumnNameError as ColumnNameError,
    DuplicateColumnError as DuplicateColumnError,
    ExtraColumnsError as ExtraColumnsError,
    FormatError as FormatError,
    InconsistentTypeError as InconsistentTypeError,
    MissingValueError as MissingValueError,
    NumberFormatError as NumberFormatError,
    NumericRangeError as NumericRangeError,
    RecordValidationError as RecordValidationError,
    RowArityError as RowArityError,
    RowCountError as RowCountError,
    ShapeError as ShapeError,
    TruncatedRowError as TruncatedRowError,
    UnknownVariantError as UnknownVariantError,
    UnsupportedShapeError as UnsupportedShapeError,
)

from .models import (
    Attribute as Attribute,
    Header as Header,
    Record as Record,
    array_of as array_of,
    dataset_shape_of as dataset_shape_of,
    shape_of as shape_of,
    struct_of as struct_of,
    tuple_of as tuple_of,
)

# useful to do like: `from arffkit import decode, Record`
__all__ = [
    "ArffArray",
    "ArffError",
    "ArffValueError",
    "Attribute",
    "AttributeKind",
    "ColumnNameError",
    "DataSet",
    "DuplicateColumnError",
    "EncoderConfig",
    "ExtraColumnsError",
    "FormatError",
    "Header",
    "InconsistentTypeError",
    "LeafKind",
    "MissingValueError",
    "NominalOrder",
    "NumberFormatError",
    "NumericRangeError",
    "Record",
    "RecordValidationError",
    "RowArityError",
    "RowCountError",
    "ShapeError",
    "TruncatedRowError",
    "UnknownVariantError",
    "UnsupportedShapeError",
    "array_of",
    "dataset_shape_of",
    "decode",
    "encode",
    "shape_of",
    "struct_of",
    "tuple_of",
]
