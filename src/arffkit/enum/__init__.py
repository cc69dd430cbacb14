from .attribute_kind import AttributeKind as AttributeKind
from .leaf_kind import LeafKind as LeafKind
from .line_kind import LineKind as LineKind
