import dataclasses

import pytest

from asciiarcade.vector import Vector


def test_add_sums_components():
    assert Vector(1, 2) + Vector(3, 4) == Vector(4, 6)


def test_add_zero_is_identity():
    v = Vector(5, -3)
    assert v + Vector(0, 0) == v


def test_add_is_commutative():
    a, b = Vector(2, 7), Vector(-1, 4)
    assert a + b == b + a


def test_add_does_not_mutate_operands():
    a = Vector(1, 1)
    _ = a + Vector(1, 1)
    assert a == Vector(1, 1)


def test_equality_compares_both_coordinates():
    assert Vector(1, 2) == Vector(1, 2)
    assert not Vector(1, 2) == Vector(2, 1)


def test_vector_is_immutable():
    v = Vector(1, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        v.x = 3
    assert v == Vector(1, 2)
    assert v.to_dict() == {"X": 1, "Y": 2}


def test_to_dict_uses_wire_keys():
    assert Vector(1, 2).to_dict() == {"X": 1, "Y": 2}


def test_round_trip_through_dict():
    v = Vector(-1, 7)
    assert Vector.from_dict(v.to_dict()) == v


def test_from_dict_defaults_missing_keys_to_zero():
    assert Vector.from_dict({}) == Vector(0, 0)