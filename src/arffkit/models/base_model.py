"""
Base Model Module.

This module defines the foundational classes for the codec's data models.
It wraps Pydantic (used for runtime validation of attribute declarations,
headers and user records) so that every model shares one configuration.

Classes:
    * `BaseModel`: the frozen base of the header models.
    * `Record`: an optional base for user row types that derives and caches
      the row shape when the class is defined.
"""

from typing import ClassVar, List, Optional

import pydantic

from .internal.type_mapper import shape_of
from .shape import Struct


class BaseModel(pydantic.BaseModel):
    """
    The root base class for codec data models.

    Models are frozen: a parsed header is a value, it is never edited in
    place. Builders create new instances instead.
    """

    model_config = pydantic.ConfigDict(frozen=True, extra="forbid")


class Record(pydantic.BaseModel):
    """
    Base class for row types.

    Any pydantic model can be used as a row type; deriving from `Record`
    additionally builds the row shape once, at class-definition time, so a
    field with no fixed column layout fails immediately instead of on the
    first `encode`/`decode`.

    Example:
        ```python
        class Iris(Record):
            sepal_length: float
            petal_width: float
            species: Literal["setosa", "versicolor", "virginica"]

        Iris.column_names()  # ['sepal_length', 'petal_width', 'species']
        ```

    Attributes:
        __arff_shape__ (ClassVar): The cached row shape of the class.
    """

    __arff_shape__: ClassVar[Optional[Struct]] = None

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs):
        """
        Called by pydantic once the subclass' fields are collected.

        Raises:
            UnsupportedShapeError: If a field has no fixed column layout.
            DuplicateColumnError: If two flattened columns share a name.
        """
        super().__pydantic_init_subclass__(**kwargs)
        cls.__arff_shape__ = shape_of(cls)

    @classmethod
    def row_shape(cls) -> Struct:
        assert cls.__arff_shape__ is not None
        return cls.__arff_shape__

    @classmethod
    def column_names(cls) -> List[str]:
        return cls.row_shape().column_names()
