# util/types.py
from typing import Mapping, Union


# Flow: Closed set of values an entity attribute can hold after feed parsing.
AttributeValue = Union[str, int, float, bool, list[str]]

Attributes = Mapping[str, AttributeValue]

# Ordered property bag sent on create/update; list values become repeated fields.
Args = Mapping[str, Union[AttributeValue, tuple[str, ...]]]
