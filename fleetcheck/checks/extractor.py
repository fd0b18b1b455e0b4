"""
Property extraction for node checks.

Locates a property in a node's extra config and classifies its value.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from fleetcheck.checks.errors import ClassificationError
from fleetcheck.checks.schemas import Classification, PropertyBag

TRUTHY_VALUE = "true"
FALSY_VALUE = "false"


def find_property(bag: PropertyBag, key: str) -> Tuple[bool, Optional[Any]]:
    """
    Find the first entry of ``bag`` whose key equals ``key`` exactly.

    Returns:
        ``(found, value)``; value is None when the key is absent
    """
    for option in bag:
        if option.key == key:
            return True, option.value
    return False, None


def classify_value(value: Any, key: str = "", strict: bool = False) -> Classification:
    """
    Classify a raw property value.

    The value is rendered with ``str()`` and compared case-insensitively to
    ``"true"``. Anything else is DISABLED unless ``strict`` is set, in which
    case only ``"false"`` is accepted and other values raise.

    Raises:
        ClassificationError: In strict mode, for values that are neither
            true nor false
    """
    rendered = str(value).lower()
    if rendered == TRUTHY_VALUE:
        return Classification.ENABLED
    if strict and rendered != FALSY_VALUE:
        raise ClassificationError(
            f"Property {key!r} has non-boolean value {value!r}", key=key, value=value
        )
    return Classification.DISABLED


@dataclass(frozen=True)
class PropertyMatch:
    """Outcome of looking up and classifying one node's property."""

    key: str
    found: bool
    value: Optional[Any]
    classification: Classification


def extract(bag: PropertyBag, key: str, strict: bool = False) -> PropertyMatch:
    """
    Look up property ``key`` in a node's extra config and classify it.

    A missing property is classified DISABLED, the same as an explicit
    false. Nodes that never had the property set are treated as not
    tracking changes.

    Args:
        bag: The node's extra config entries
        key: Property key, matched case-sensitively
        strict: Raise for non-boolean values instead of classifying them
            DISABLED

    Returns:
        PropertyMatch with the lookup outcome and classification

    Raises:
        ClassificationError: In strict mode, for non-boolean values
    """
    found, value = find_property(bag, key)
    if not found:
        return PropertyMatch(
            key=key, found=False, value=None, classification=Classification.DISABLED
        )
    return PropertyMatch(
        key=key,
        found=True,
        value=value,
        classification=classify_value(value, key=key, strict=strict),
    )


def classify(bag: PropertyBag, key: str, strict: bool = False) -> Classification:
    """Classify a node by the value of property ``key`` in its extra config."""
    return extract(bag, key, strict=strict).classification
