import pytest

from osproto.fields import size_deserialize, size_serialize, text_deserialize, text_serialize
from osproto.listcodec import list_deserialize, list_serialize
from osproto.payload import Payload, PayloadError


def test_round_trip_sizes():
    payload = Payload()
    list_serialize(payload, [3, 1, 4, 1, 5], size_serialize)
    assert list_deserialize(payload, size_deserialize) == [3, 1, 4, 1, 5]
    assert len(payload) == 0


def test_round_trip_texts():
    payload = Payload()
    list_serialize(payload, ["alpha", None, "beta"], text_serialize)
    assert list_deserialize(payload, text_deserialize) == ["alpha", None, "beta"]


def test_empty_list_is_only_a_zero_count():
    payload = Payload()
    list_serialize(payload, [], size_serialize)
    assert bytes(payload) == b"\x00\x00\x00\x00"
    assert list_deserialize(payload, size_deserialize) == []


def test_count_prefix_matches_number_of_elements():
    payload = Payload()
    list_serialize(payload, iter([9, 8]), size_serialize)
    count = size_deserialize(payload)
    assert count == 2


def test_elements_are_serialized_in_order():
    seen = []

    def record(target, item):
        seen.append(item)
        size_serialize(target, item)

    payload = Payload()
    list_serialize(payload, [5, 6, 7], record)
    assert seen == [5, 6, 7]
    assert bytes(payload) == (
        b"\x03\x00\x00\x00"
        b"\x05\x00\x00\x00"
        b"\x06\x00\x00\x00"
        b"\x07\x00\x00\x00"
    )


def test_trailing_bytes_are_left_in_place():
    payload = Payload()
    list_serialize(payload, [1], size_serialize)
    payload.append(b"rest")
    list_deserialize(payload, size_deserialize)
    assert bytes(payload) == b"rest"


def test_truncated_list_raises():
    payload = Payload()
    list_serialize(payload, [1, 2], size_serialize)
    payload.truncate(2)
    with pytest.raises(PayloadError):
        list_deserialize(payload, size_deserialize)


def test_missing_count_raises():
    with pytest.raises(PayloadError):
        list_deserialize(Payload(b"\x01"), size_deserialize)