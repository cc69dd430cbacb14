from .array import ArffArray as ArffArray
from .dataset import (
    DataSet as DataSet,
    narrowest_numeric_type as narrowest_numeric_type,
)
