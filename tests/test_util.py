from benchpaint.util import known_parallelism, slice_middle


def test_known_parallelism_is_stable():
    assert known_parallelism() == known_parallelism()
    assert known_parallelism() >= 1


def test_slice_middle():
    assert list(slice_middle([])) == []
    assert list(slice_middle([1])) == [1]
    assert list(slice_middle([1, 2])) == [1, 2]
    assert list(slice_middle([1, 2, 3])) == [2]
    assert list(slice_middle([1, 2, 3, 4])) == [2, 3]
    assert list(slice_middle([1, 2, 3, 4, 5])) == [3]


def test_slice_middle_keeps_sequence_type():
    assert slice_middle((1, 2, 3, 4)) == (2, 3)
    assert slice_middle("abcde") == "c"