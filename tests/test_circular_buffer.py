import pytest

from fractalwave.circular_buffer import CircularBuffer


def test_empty_buffer():
    buf = CircularBuffer(4)
    assert len(buf) == 0
    assert buf.to_list() == []
    assert buf.capacity == 4


def test_push_below_capacity_keeps_order():
    buf = CircularBuffer(5)
    buf.push_samples([1.0, 2.0, 3.0])
    assert buf.to_list() == [1.0, 2.0, 3.0]
    assert len(buf) == 3


def test_overflow_keeps_most_recent():
    buf = CircularBuffer(3)
    buf.push_samples([1.0, 2.0])
    buf.push_samples([3.0, 4.0, 5.0])
    assert buf.to_list() == [3.0, 4.0, 5.0]
    assert len(buf) == buf.capacity


def test_single_push_larger_than_capacity():
    buf = CircularBuffer(2)
    buf.push_samples(range(10))
    assert buf.to_list() == [8.0, 9.0]


def test_clear_resets_contents_but_not_capacity():
    buf = CircularBuffer(3)
    buf.push_samples([1, 2, 3])
    buf.clear()
    assert len(buf) == 0
    assert buf.to_list() == []
    assert buf.capacity == 3
    buf.push_samples([7])
    assert buf.to_list() == [7.0]


def test_samples_are_stored_as_floats():
    buf = CircularBuffer(2)
    buf.push_samples([1, 2])
    values = buf.to_list()
    assert values == [1.0, 2.0]
    assert [type(value) for value in values] == [float, float]


@pytest.mark.parametrize("capacity", [0, -1])
def test_invalid_capacity(capacity):
    with pytest.raises(ValueError):
        CircularBuffer(capacity)