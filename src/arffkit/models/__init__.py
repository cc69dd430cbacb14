from .attribute import Attribute as Attribute
from .base_model import Record as Record
from .column_value import (
    MISSING as MISSING,
    ColumnValue as ColumnValue,
    Nominal as Nominal,
    Number as Number,
    Text as Text,
)
from .header import (
    DEFAULT_RELATION as DEFAULT_RELATION,
    Header as Header,
    build_header as build_header,
    parse_header as parse_header,
)
from .internal.type_mapper import (
    dataset_shape_of as dataset_shape_of,
    infer_shape as infer_shape,
    shape_of as shape_of,
)
from .nominal import NominalTable as NominalTable, enum_label as enum_label
from .shape import (
    DynamicSequence as DynamicSequence,
    FixedSequence as FixedSequence,
    Leaf as Leaf,
    RowShape as RowShape,
    Struct as Struct,
    array_of as array_of,
    leaf as leaf,
    struct_of as struct_of,
    tuple_of as tuple_of,
)
