"""Wire encoding of lists: an element count followed by each element."""

from __future__ import annotations

import logging
import struct
from typing import Any, Callable, Iterable, List

from osproto.payload import Payload
from osproto.runtime import SERIALIZE_LOGGER_NAME

_logger = logging.getLogger(SERIALIZE_LOGGER_NAME)

_LIST_SIZE = struct.Struct("<I")

ElementSerializer = Callable[[Payload, Any], None]
ElementDeserializer = Callable[[Payload], Any]


def list_serialize(
    payload: Payload, items: Iterable[Any], element_serializer: ElementSerializer
) -> None:
    """Append the number of ``items`` and then each item, in order."""
    items = list(items)
    try:
        count = _LIST_SIZE.pack(len(items))
    except struct.error:
        raise ValueError(f"list too long: {len(items)} elements") from None
    payload.append(count)
    for item in items:
        element_serializer(payload, item)
    _logger.info("t_list:\n* elements_count: %d", len(items))


def list_deserialize(
    payload: Payload, element_deserializer: ElementDeserializer
) -> List[Any]:
    """Take a list from the front of ``payload``, decoding each element in turn."""
    (count,) = _LIST_SIZE.unpack(payload.shift(_LIST_SIZE.size))
    items = [element_deserializer(payload) for _ in range(count)]
    _logger.info("t_list:\n* elements_count: %d", len(items))
    return items