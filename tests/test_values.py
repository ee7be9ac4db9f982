import math

import pytest

from ebmlkit.coding import EbmlId
from ebmlkit.element import EbmlCallbacks
from ebmlkit.io import BytesIOCallback, MemReadIOCallback, ScopeMode
from ebmlkit.values import EbmlBinary, EbmlDate, EbmlFloat, FloatPrecision


class Payload(EbmlBinary):
    pass


Payload.class_infos = EbmlCallbacks(Payload, EbmlId(0xA1, 1), "Payload")


class Stamp(EbmlDate):
    pass


Stamp.class_infos = EbmlCallbacks(Stamp, EbmlId(0x4461, 2), "Stamp")


class OtherStamp(EbmlDate):
    pass


OtherStamp.class_infos = EbmlCallbacks(OtherStamp, EbmlId(0x4462, 2), "OtherStamp")


class Duration(EbmlFloat):
    pass


Duration.class_infos = EbmlCallbacks(Duration, EbmlId(0x4489, 2), "Duration")


# binary -------------------------------------------------------------------


def test_binary_render_writes_head_and_payload():
    element = Payload()
    element.set_buffer(b"abc")
    out = BytesIOCallback()
    written = element.render(out)
    assert out.getvalue() == b"\xa1\x83abc"
    assert written == 5


def test_binary_read_data_round_trip():
    source = Payload()
    source.set_buffer(b"hello world")
    out = BytesIOCallback()
    source.render_data(out, False)
    target = Payload()
    target.size = source.size
    assert target.read_data(MemReadIOCallback(out.getvalue())) == 11
    assert target.data == b"hello world"
    assert target.value_is_set
    assert target.has_same_data(source)


def test_binary_read_no_data_keeps_nothing():
    element = Payload()
    element.size = 4
    assert element.read_data(MemReadIOCallback(b"1234"), ScopeMode.NO_DATA) == 4
    assert element.data is None
    assert not element.value_is_set


def test_binary_read_empty_sets_value():
    element = Payload()
    assert element.read_data(MemReadIOCallback(b"xyz")) == 0
    assert element.value_is_set


def test_binary_size_mismatch_raises():
    element = Payload()
    element.set_buffer(b"ab")
    element.size = 5
    with pytest.raises(ValueError):
        element.render_data(BytesIOCallback(), False)


def test_binary_validate_size_and_clone():
    element = Payload()
    element.set_buffer(b"data")
    assert element.validate_size()
    copy = element.clone()
    assert copy.has_same_data(element)
    assert copy is not element
    element.size = 0x7FFFFFFF
    assert not element.validate_size()


def test_binary_different_data_not_same():
    a, b = Payload(), Payload()
    a.set_buffer(b"one")
    b.set_buffer(b"two")
    assert not a.has_same_data(b)


# date ---------------------------------------------------------------------


def test_date_epoch_delay_is_zero_internal():
    element = Stamp()
    element.epoch_date = EbmlDate.UNIX_EPOCH_DELAY
    assert element.my_date == 0
    out = BytesIOCallback()
    element.render_data(out, False)
    assert out.getvalue() == bytes(8)


def test_date_epoch_round_trip():
    element = Stamp()
    element.value = 1_600_000_000
    assert element.epoch_date == 1_600_000_000
    out = BytesIOCallback()
    assert element.render_data(out, False) == 8
    back = Stamp()
    back.read_data(MemReadIOCallback(out.getvalue()))
    assert back.value == 1_600_000_000
    assert back.value_is_set


def test_date_before_2001_round_trip():
    element = Stamp()
    element.epoch_date = 100
    assert element.epoch_date == 100


def test_date_update_size_tracks_value():
    element = Stamp()
    assert element.update_size() == 0
    element.epoch_date = 0
    assert element.update_size() == 8


def test_date_validate_size():
    element = Stamp()
    assert element.validate_size()
    element.size = 0
    assert element.validate_size()
    element.size = 5
    assert not element.validate_size()


def test_date_odd_size_is_skipped():
    element = Stamp()
    element.size = 3
    stream = MemReadIOCallback(b"\x01\x02\x03\x04")
    assert element.read_data(stream) == 3
    assert stream.get_file_pointer() == 3
    assert not element.value_is_set


def test_date_ordering():
    early, late = Stamp(), Stamp()
    early.epoch_date = 10
    late.epoch_date = 20
    assert early.is_smaller_than(late)
    assert not late.is_smaller_than(early)
    other = OtherStamp()
    other.epoch_date = 30
    assert not early.is_smaller_than(other)


# float --------------------------------------------------------------------


def test_float_precision_sets_size():
    assert Duration().size == 4
    assert Duration(precision=FloatPrecision.FLOAT_64).size == 8
    element = Duration()
    element.precision = FloatPrecision.FLOAT_64
    assert element.precision is FloatPrecision.FLOAT_64


@pytest.mark.parametrize("value", [0.0, 1.5, -2.25, 1e300])
def test_float64_round_trip(value):
    element = Duration(precision=FloatPrecision.FLOAT_64)
    element.value = value
    out = BytesIOCallback()
    assert element.render_data(out, False) == 8
    back = Duration(precision=FloatPrecision.FLOAT_64)
    back.read_data(MemReadIOCallback(out.getvalue()))
    assert back.value == value


def test_float32_round_trip_loses_precision():
    element = Duration()
    element.value = 0.1
    out = BytesIOCallback()
    element.render_data(out, False)
    back = Duration()
    back.read_data(MemReadIOCallback(out.getvalue()))
    assert back.value == pytest.approx(0.1, rel=1e-6)
    assert back.value != 0.1


def test_float32_overflow_becomes_infinity():
    element = Duration()
    element.value = -1e300
    out = BytesIOCallback()
    element.render_data(out, False)
    back = Duration()
    back.read_data(MemReadIOCallback(out.getvalue()))
    assert back.value == -math.inf


def test_float_default_value():
    element = Duration(2.0)
    assert element.value_is_set
    assert element.is_default_value()
    assert element.update_size() == 0
    assert element.update_size(with_default=True) == 4
    element.value = 3.0
    assert not element.is_default_value()
    assert element.default_value == 2.0


def test_float_default_can_be_set_once():
    element = Duration()
    with pytest.raises(ValueError):
        element.default_value
    element.set_default_value(1.0)
    with pytest.raises(ValueError):
        element.set_default_value(2.0)


def test_float_bad_size():
    element = Duration()
    element.size = 5
    assert not element.validate_size()
    with pytest.raises(ValueError):
        element.render_data(BytesIOCallback(), False)
    stream = MemReadIOCallback(bytes(6))
    assert element.read_data(stream) == 5
    assert stream.get_file_pointer() == 5


def test_float_ordering_and_clone():
    a, b = Duration(), Duration()
    a.value = 1.0
    b.value = 2.0
    assert a.is_smaller_than(b)
    assert not b.is_smaller_than(a)
    c = a.clone()
    c.value = 5.0
    assert a.value == 1.0