from .coercion import (
    from_column as from_column,
    parse_column as parse_column,
    to_column as to_column,
)
from .config import EncoderConfig as EncoderConfig
from .enum import NominalOrder as NominalOrder
from .flattener import (
    column_names as column_names,
    flatten as flatten,
    unflatten as unflatten,
)
from .transcoder import (
    declare_attributes as declare_attributes,
    decode as decode,
    encode as encode,
)
