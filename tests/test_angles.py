import mmh3
import pytest

from hashingring.angles import (
    INT32_MAX,
    INT32_MIN,
    POSITIVE_HASH_WINDOW,
    AngleMapper,
    angle_of_hash,
    default_hash,
    fold_hash,
)


def test_fold_hash_window():
    assert POSITIVE_HASH_WINDOW == 2 ** 32 - 1
    assert fold_hash(0) == 0
    assert fold_hash(12345) == 12345
    assert fold_hash(INT32_MAX) == INT32_MAX
    assert fold_hash(-1) == INT32_MAX + 1
    assert fold_hash(-INT32_MAX) == 2 * INT32_MAX
    assert fold_hash(INT32_MIN) == POSITIVE_HASH_WINDOW


def test_fold_hash_rejects_out_of_range():
    with pytest.raises(ValueError):
        fold_hash(2 ** 31)
    with pytest.raises(ValueError):
        fold_hash(INT32_MIN - 1)


def test_angle_of_hash_matches_formula():
    for h in (0, 1, 99999, INT32_MAX, -1, -42, -INT32_MAX):
        expected = (fold_hash(h) / POSITIVE_HASH_WINDOW) * 360.0
        assert angle_of_hash(h) == expected


def test_angle_of_hash_is_monotonic_over_fold():
    assert angle_of_hash(0) == 0.0
    assert angle_of_hash(INT32_MAX) < 180.0
    assert angle_of_hash(-1) > 180.0
    assert angle_of_hash(-1) < angle_of_hash(-2) < angle_of_hash(-INT32_MAX) < 360.0


def test_int32_min_wraps_to_zero():
    assert angle_of_hash(INT32_MIN) == 0.0


def test_default_hash_uses_murmur3():
    assert default_hash("abc") == mmh3.hash("abc")
    assert default_hash(b"abc") == mmh3.hash(b"abc")
    assert default_hash(42) == mmh3.hash("42")
    assert default_hash(("a", 1)) == mmh3.hash(repr(("a", 1)))


def test_angle_mapper_is_deterministic_and_bounded():
    mapper = AngleMapper()
    for i in range(2000):
        key = f"key-{i}"
        angle = mapper.angle_of(key)
        assert 0.0 <= angle < 360.0
        assert mapper(key) == angle


def test_angle_mapper_custom_hash():
    mapper = AngleMapper(hash_func=lambda key: key)
    assert mapper.angle_of(0) == 0.0
    assert mapper.angle_of(INT32_MIN) == 0.0
    assert mapper.angle_of(-1) == angle_of_hash(-1)
    with pytest.raises(ValueError):
        mapper.angle_of(2 ** 40)


def test_default_hash_agrees_with_key_equality():
    assert default_hash(1) == default_hash(1.0) == default_hash(True)
    assert default_hash(0) == default_hash(-0.0) == default_hash(False)
    assert default_hash((1, "x")) == default_hash((1.0, "x"))
    assert default_hash(1.5) == mmh3.hash("1.5")
    assert default_hash(None) == mmh3.hash("None")


def test_default_hash_rejects_unencodable_keys():
    for key in (frozenset({1, 2}), object(), (1, frozenset())):
        with pytest.raises(TypeError):
            default_hash(key)
