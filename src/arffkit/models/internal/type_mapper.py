"""
Type Hint to Row Shape Mapping.

Derives `RowShape`s from Python type hints (`shape_of`, `dataset_shape_of`)
and from sample values (`infer_shape`). Shapes are plain values: derive them
once per type and reuse them for every row.
"""

import collections.abc
import dataclasses
import inspect
import types
from enum import Enum
from typing import (
    Annotated,
    Any,
    Dict,
    Iterable,
    Literal,
    Optional,
    Set,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

import numpy as np
import pydantic
from annotated_types import Len, MaxLen, MinLen

from arffkit.enum import LeafKind
from arffkit.errors import UnsupportedShapeError

from ..shape import DynamicSequence, FixedSequence, Leaf, RowShape, Struct

# -------------------------------------------------------------------------
# Python Type to Leaf Kind Mapping
# Scalar types that map to exactly one column. Builtins map to their kind
# only; numpy types are also kept as the leaf's concrete target type, so
# reading can enforce their range.
# -------------------------------------------------------------------------
_PYTHON_TYPE_TO_LEAF_KIND: Dict[type, LeafKind] = {
    # Builtins
    bool: LeafKind.Boolean,
    int: LeafKind.Integer,
    float: LeafKind.Float,
    str: LeafKind.String,
    # Fixed width integers
    np.int8: LeafKind.Integer,
    np.int16: LeafKind.Integer,
    np.int32: LeafKind.Integer,
    np.int64: LeafKind.Integer,
    np.uint8: LeafKind.Integer,
    np.uint16: LeafKind.Integer,
    np.uint32: LeafKind.Integer,
    np.uint64: LeafKind.Integer,
    # Fixed width floats
    np.float16: LeafKind.Float,
    np.float32: LeafKind.Float,
    np.float64: LeafKind.Float,
    # Booleans
    np.bool_: LeafKind.Boolean,
}

_BUILTIN_SCALARS = (bool, int, float, str)


def _is_optional(hint) -> bool:
    origin = get_origin(hint)
    return origin in (Union, types.UnionType) and type(None) in get_args(hint)


def _fixed_length(metadata: Iterable[Any]) -> Optional[int]:
    """
    Returns `n` if the length constraints in `metadata` pin a sequence to
    exactly `n` items, None otherwise.

    Understands `annotated_types.Len`, `MinLen` and `MaxLen`, which is what
    pydantic emits for `conlist(..., min_length=n, max_length=n)` and
    `Field(min_length=n, max_length=n)`.
    """
    min_len = max_len = None
    for item in metadata:
        if isinstance(item, Len):
            min_len, max_len = item.min_length, item.max_length
        elif isinstance(item, MinLen):
            min_len = item.min_length
        elif isinstance(item, MaxLen):
            max_len = item.max_length
    if min_len is not None and min_len == max_len:
        return min_len
    return None


# --- Row shapes ---


def shape_of(hint: Any, _seen: Optional[Set[type]] = None) -> RowShape:
    """
    Builds the row shape of a type hint.

    Examples:
        - int -> Leaf(INTEGER)
        - Optional[float] -> Leaf(FLOAT, optional=True)
        - Tuple[int, Tuple[int, int]] -> FixedSequence of 3 leaves
        - a pydantic model, dataclass or NamedTuple -> Struct

    Raises:
        UnsupportedShapeError: For variable-length sequences, unions other
            than `Optional[leaf]`, recursive types and other hints with no
            fixed column layout.
    """
    if isinstance(hint, RowShape):
        return hint
    seen = _seen if _seen is not None else set()

    origin = get_origin(hint)
    if origin is Annotated:
        base, *metadata = get_args(hint)
        length = _fixed_length(metadata)
        base_origin = get_origin(base) or base
        if length is not None and base_origin in (list, tuple):
            args = get_args(base)
            if not args or (base_origin is tuple and len(args) != 2):
                raise UnsupportedShapeError(f"{hint!r} has no element type.")
            return FixedSequence((shape_of(args[0], seen),) * length, base_origin)
        return shape_of(base, seen)

    if _is_optional(hint):
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) != 1:
            raise UnsupportedShapeError(f"Union {hint!r} has no single column kind.")
        inner = shape_of(args[0], seen)
        if not isinstance(inner, Leaf):
            raise UnsupportedShapeError(
                f"Only primitive values can be optional, got {hint!r}."
            )
        return dataclasses.replace(inner, optional=True)

    if origin in (Union, types.UnionType):
        raise UnsupportedShapeError(f"Union {hint!r} has no single column kind.")

    if origin is Literal:
        labels = get_args(hint)
        if not all(isinstance(lb, str) for lb in labels):
            raise UnsupportedShapeError(f"Only string literals are nominal labels: {hint!r}.")
        return Leaf(LeafKind.Nominal, labels=tuple(labels))

    if origin is tuple:
        args = get_args(hint)
        if not args or args[-1] is Ellipsis:
            raise UnsupportedShapeError(
                f"Variable-length tuple {hint!r} cannot be a row or part of one."
            )
        return FixedSequence(tuple(shape_of(a, seen) for a in args), tuple)

    if origin is not None or hint in (list, tuple, dict, set):
        raise UnsupportedShapeError(
            f"{hint!r} has no fixed number of columns; "
            "use a Tuple or an Annotated list with a fixed length."
        )

    if not inspect.isclass(hint):
        raise UnsupportedShapeError(f"Cannot derive a row shape from {hint!r}.")

    if issubclass(hint, Enum):
        return Leaf(LeafKind.Nominal, python_type=hint)

    kind = _PYTHON_TYPE_TO_LEAF_KIND.get(hint)
    if kind is not None:
        python_type = None if hint in _BUILTIN_SCALARS or hint is np.bool_ else hint
        return Leaf(kind, python_type=python_type)

    return _record_shape(hint, seen)


def _record_shape(cls: type, seen: Set[type]) -> Struct:
    cached = cls.__dict__.get("__arff_shape__")
    if isinstance(cached, Struct):
        return cached
    if cls in seen:
        raise UnsupportedShapeError(f"Recursive type {cls.__name__} has no fixed layout.")
    seen.add(cls)
    try:
        if issubclass(cls, pydantic.RootModel):
            raise UnsupportedShapeError(
                f"{cls.__name__} wraps a data set and cannot be a row."
            )
        if issubclass(cls, pydantic.BaseModel):
            fields = []
            for name, info in cls.model_fields.items():
                hint = info.annotation
                if info.metadata:
                    hint = Annotated[(hint, *info.metadata)]
                fields.append((name, shape_of(hint, seen)))
        elif dataclasses.is_dataclass(cls):
            hints = get_type_hints(cls, include_extras=True)
            fields = [
                (f.name, shape_of(hints[f.name], seen))
                for f in dataclasses.fields(cls)
                if f.init
            ]
        elif issubclass(cls, tuple) and hasattr(cls, "_fields"):
            hints = get_type_hints(cls, include_extras=True)
            fields = [(name, shape_of(hints[name], seen)) for name in cls._fields]
        else:
            raise UnsupportedShapeError(f"Cannot derive a row shape from {cls!r}.")
    finally:
        seen.discard(cls)
    return Struct(tuple(fields), cls, cls.__name__)


# --- Data set shapes ---


def dataset_shape_of(hint: Any) -> DynamicSequence:
    """
    Builds the data set shape of a container type hint.

    Examples:
        - List[Row] -> any number of rows, collected in a list
        - Tuple[Row, Row] -> exactly two rows, collected in a tuple
        - Annotated[List[Row], Len(3, 3)] -> exactly three rows
        - a `pydantic.RootModel[List[Row]]` subclass -> rows wrapped in it

    Raises:
        UnsupportedShapeError: If `hint` is not a sequence of rows, or its row
            type has no fixed column layout.
    """
    if isinstance(hint, DynamicSequence):
        return hint

    origin = get_origin(hint)
    if origin is Annotated:
        base, *metadata = get_args(hint)
        shape = dataset_shape_of(base)
        length = _fixed_length(metadata)
        return shape if length is None else dataclasses.replace(shape, length=length)

    if origin in (list, collections.abc.Sequence):
        args = get_args(hint)
        if args:
            return DynamicSequence(shape_of(args[0]), list)

    if origin is tuple:
        args = get_args(hint)
        if len(args) == 2 and args[1] is Ellipsis:
            return DynamicSequence(shape_of(args[0]), tuple)
        if args and all(a == args[0] for a in args):
            return DynamicSequence(shape_of(args[0]), tuple, length=len(args))

    if inspect.isclass(hint) and issubclass(hint, pydantic.RootModel):
        info = hint.model_fields["root"]
        root_hint = info.annotation
        if info.metadata:
            root_hint = Annotated[(root_hint, *info.metadata)]
        inner = dataset_shape_of(root_hint)
        relation = hint.__dict__.get("__arff_relation__") or hint.__name__
        return DynamicSequence(
            inner.element,
            lambda rows: hint(inner.container(rows)),
            inner.length,
            relation,
        )

    raise UnsupportedShapeError(
        f"{hint!r} is not a data set type; expected a list, tuple or RootModel of rows."
    )


# --- Inference from values ---


def infer_shape(value: Any) -> RowShape:
    """
    Builds a row shape from one sample row.

    Typed rows (models, dataclasses, NamedTuples) use their class. Tuples,
    lists, numpy arrays and string-keyed dicts are inferred element by
    element. Inferred leaves are optional, and every number is inferred as a
    generic NUMERIC leaf so later rows may mix integers and floats.

    Raises:
        UnsupportedShapeError: For `None` (no type to infer), empty
            sequences and other values with no column layout.
    """
    if value is None:
        raise UnsupportedShapeError(
            "Cannot infer a column type from a missing value; pass an explicit shape."
        )
    if isinstance(value, (Enum, np.generic)) or type(value) in _BUILTIN_SCALARS:
        return _infer_leaf(value)
    if isinstance(value, pydantic.BaseModel):
        return shape_of(type(value))
    if dataclasses.is_dataclass(value) or (isinstance(value, tuple) and hasattr(value, "_fields")):
        return shape_of(type(value))
    if isinstance(value, np.ndarray):
        return _infer_sequence(value.tolist(), np.array)
    if isinstance(value, (tuple, list)):
        return _infer_sequence(value, type(value))
    if isinstance(value, dict):
        if not value or not all(isinstance(k, str) for k in value):
            raise UnsupportedShapeError("Only non-empty dicts with string keys can be rows.")
        return Struct(tuple((k, infer_shape(v)) for k, v in value.items()), dict)
    raise UnsupportedShapeError(f"Cannot infer a row shape from {type(value).__name__}.")


def _infer_leaf(value: Any) -> Leaf:
    if isinstance(value, (int, float, np.number)) and not isinstance(value, bool):
        return Leaf(LeafKind.Float, optional=True)
    return dataclasses.replace(shape_of(type(value)), optional=True)


def _infer_sequence(items, container) -> FixedSequence:
    if not items:
        raise UnsupportedShapeError("Cannot infer a row shape from an empty sequence.")
    return FixedSequence(tuple(infer_shape(item) for item in items), container)
