import pytest
from py_ecc.optimized_bn128 import G1, G2, add, multiply, neg

from zkverifier.elliptic_curves.pairing import pairing_product_is_one
from zkverifier.elliptic_curves.points import (
    G1_INFINITY,
    G2_INFINITY,
    g1_from_bytes,
    g1_to_bytes,
    g2_from_bytes,
    g2_to_bytes,
    is_valid_g1,
    is_valid_g2,
    negate_g1,
    negate_g1_bytes,
    points_equal,
)
from zkverifier.errors import FormatError, InvalidPointError
from zkverifier.fields.field_codec import convert_endianness
from zkverifier.parameters import q

G1_POINTS = [G1, multiply(G1, 5), multiply(G1, 2**200 + 17), G1_INFINITY]
G2_POINTS = [G2, multiply(G2, 7), G2_INFINITY]
OFF_CURVE_G1 = (1).to_bytes(32, "big") + (1).to_bytes(32, "big")


@pytest.mark.parametrize("point", G1_POINTS)
@pytest.mark.parametrize("byteorder", ["big", "little"])
def test_g1_serialisation(point, byteorder):
    encoded = g1_to_bytes(point, byteorder)

    assert len(encoded) == 64
    assert points_equal(g1_from_bytes(encoded, byteorder), point)


@pytest.mark.parametrize("point", G2_POINTS)
@pytest.mark.parametrize("byteorder", ["big", "little"])
def test_g2_serialisation(point, byteorder):
    encoded = g2_to_bytes(point, byteorder)

    assert len(encoded) == 128
    assert points_equal(g2_from_bytes(encoded, byteorder), point)


def test_g2_endianness_conversion_keeps_component_order():
    little = g2_to_bytes(G2, "little")
    big = g2_to_bytes(G2, "big")

    assert convert_endianness(little) == big
    # x.c0 comes first in both conventions
    assert big[:32] == int(G2[0].coeffs[0]).to_bytes(32, "big")


def test_infinity_is_all_zeros():
    assert g1_to_bytes(G1_INFINITY) == bytes(64)
    assert g2_to_bytes(G2_INFINITY) == bytes(128)


def test_generator_encoding():
    assert g1_to_bytes(G1) == (1).to_bytes(32, "big") + (2).to_bytes(32, "big")


@pytest.mark.parametrize(
    ("decode", "length"),
    [
        (g1_from_bytes, 63),
        (g1_from_bytes, 65),
        (g2_from_bytes, 64),
        (g2_from_bytes, 129),
    ],
)
def test_decoding_rejects_wrong_lengths(decode, length):
    with pytest.raises(FormatError):
        decode(bytes(length))


def test_g1_from_bytes_rejects_off_curve_points():
    with pytest.raises(InvalidPointError):
        g1_from_bytes(OFF_CURVE_G1)


def test_g1_from_bytes_rejects_coordinates_above_the_modulus():
    encoded = g1_to_bytes(G1)
    x = int.from_bytes(encoded[:32], "big") + q

    with pytest.raises(InvalidPointError, match="greater than the field size"):
        g1_from_bytes(x.to_bytes(32, "big") + encoded[32:])


def test_g2_from_bytes_rejects_points_off_the_twist():
    encoded = bytearray(g2_to_bytes(G2))
    encoded[-1] ^= 1

    with pytest.raises(InvalidPointError):
        g2_from_bytes(bytes(encoded))


def test_validity_checks():
    assert all(is_valid_g1(point) for point in G1_POINTS)
    assert all(is_valid_g2(point) for point in G2_POINTS)


@pytest.mark.parametrize("point", G1_POINTS)
def test_negation_is_an_involution(point):
    assert points_equal(negate_g1(negate_g1(point)), point)
    assert points_equal(add(point, negate_g1(point)), G1_INFINITY)


@pytest.mark.parametrize("point", G1_POINTS)
def test_negation_of_serialised_points(point):
    encoded = g1_to_bytes(point)
    negated = negate_g1_bytes(encoded)

    assert negated[:32] == encoded[:32]
    assert negate_g1_bytes(negated) == encoded
    assert points_equal(g1_from_bytes(negated), neg(point))


def test_negation_of_the_generator():
    assert negate_g1_bytes(g1_to_bytes(G1)) == (1).to_bytes(32, "big") + (q - 2).to_bytes(32, "big")


def test_negation_rejects_off_curve_points():
    with pytest.raises(InvalidPointError):
        negate_g1_bytes(OFF_CURVE_G1)


def test_pairing_product():
    assert pairing_product_is_one([(G1, G2), (neg(G1), G2)])
    assert pairing_product_is_one([(multiply(G1, 6), G2), (neg(multiply(G1, 2)), multiply(G2, 3))])
    assert not pairing_product_is_one([(G1, G2), (G1, G2)])
