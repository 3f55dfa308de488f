import copy
import pickle

import numpy as np
import pytest

from fxbinary.core.errors import FpBinaryOverflowError
from fxbinary.core.modes import OverflowEnum, RoundingEnum
from fxbinary.value.complex import FixedPointComplex
from fxbinary.value.fixedpoint import FixedPoint

O = OverflowEnum
R = RoundingEnum


def assert_identical(a: FixedPoint, b: FixedPoint):
    assert a == b
    assert a.format == b.format
    assert a.is_signed == b.is_signed


def test_constructor_argument_errors():
    with pytest.raises(TypeError):
        FixedPointComplex(4)
    with pytest.raises(TypeError):
        FixedPointComplex(real_fp=FixedPoint(4, 4))
    with pytest.raises(TypeError):
        FixedPointComplex(real_fp=FixedPoint(4, 4), imag_fp=1.0)
    with pytest.raises(ValueError):
        FixedPointComplex(real_fp=FixedPoint(4, 4), imag_fp=FixedPoint(4, 4, signed=False))
    with pytest.raises(TypeError):
        FixedPointComplex(4, 4, real_bit_field=3)
    with pytest.raises(TypeError):
        FixedPointComplex(real_bit_field=3, imag_bit_field=4)
    with pytest.raises(TypeError):
        FixedPointComplex(value=1.0, format_inst=(4, 4))
    with pytest.raises(TypeError):
        FixedPointComplex(4, 4, value="1+2j")


def test_constructor_from_value():
    z = FixedPointComplex(4, 4, value=complex(1.5, -0.25))
    assert z.format == (4, 4)
    assert z.real == 1.5
    assert z.imag == -0.25
    assert z.is_signed

    # saturation and round-half-up like FixedPoint
    z = FixedPointComplex(4, 2, value=complex(100.0, 1.125))
    assert z == complex(7.75, 1.25)


def test_constructor_picks_smallest_common_format():
    z = FixedPointComplex(value=complex(1.5, -0.25))
    assert z.format == (2, 2)
    assert z == complex(1.5, -0.25)
    assert FixedPointComplex().format == (1, 0)


def test_constructor_from_parts():
    z = FixedPointComplex(real_fp=FixedPoint(4, 2, value=1.25), imag_fp=FixedPoint(2, 5, value=-0.5))
    assert z.format == (4, 5)
    assert z == complex(1.25, -0.5)

    z = FixedPointComplex(3, 1, real_fp=FixedPoint(4, 2, value=1.25), imag_fp=FixedPoint(2, 5, value=-0.5))
    assert z.format == (3, 1)
    assert z == complex(1.5, -0.5)

    template = FixedPoint(6, 6)
    z = FixedPointComplex(real_fp=FixedPoint(4, 2, value=1.25), imag_fp=FixedPoint(2, 5, value=-0.5),
                          format_inst=template)
    assert z.format == (6, 6)


def test_constructor_from_bit_fields_and_format_inst():
    z = FixedPointComplex(4, 4, real_bit_field=0x18, imag_bit_field=0xF8)
    assert z == complex(1.5, -0.5)

    like = FixedPointComplex(int_bits=5, frac_bits=3)
    z = FixedPointComplex(value=complex(2.5, -1.0), format_inst=like)
    assert z.format == (5, 3)
    z = FixedPointComplex(value=2.5, format_inst=FixedPoint(6, 2))
    assert z.format == (6, 2)
    assert z == 2.5


def test_mult_and_div_formats():
    a = FixedPointComplex(2, 2, value=complex(1.5, 0.5))
    b = FixedPointComplex(2, 2, value=complex(-1.0, 0.75))
    out = a * b
    assert out.format == (5, 4)
    assert out == complex(-1.875, 0.625)

    out = a / FixedPointComplex(2, 2, value=complex(1.0, 1.0))
    assert out.format == (11, 9)
    assert out == complex(1.0, -0.5)

    assert (a + b).format == (3, 2)
    assert a + b == complex(0.5, 1.25)
    assert a - b == complex(2.5, -0.25)


@pytest.mark.parametrize(
    "z1, z2",
    [
        (complex(1.5, 0.5), complex(-1.0, 0.75)),
        (complex(-2.0, -2.0), complex(-2.0, 1.75)),
        (complex(0.25, -1.5), complex(1.75, 0.0)),
        (complex(-0.75, 1.25), complex(0.5, -0.25)),
    ],
)
def test_parts_follow_fixed_point_rules(z1, z2):
    a = FixedPointComplex(2, 2, value=z1)
    b = FixedPointComplex(2, 2, value=z2)
    ar, ai = FixedPoint(2, 2, value=z1.real), FixedPoint(2, 2, value=z1.imag)
    br, bi = FixedPoint(2, 2, value=z2.real), FixedPoint(2, 2, value=z2.imag)

    assert_identical((a + b).real, ar + br)
    assert_identical((a + b).imag, ai + bi)
    assert_identical((a - b).real, ar - br)
    assert_identical((a - b).imag, ai - bi)
    assert_identical((a * b).real, ar * br - ai * bi)
    assert_identical((a * b).imag, ar * bi + ai * br)

    conj_real, conj_imag = ar * br - ai * -bi, ar * -bi + ai * br
    energy = br * br + bi * bi
    assert_identical((a / b).real, conj_real / energy)
    assert_identical((a / b).imag, conj_imag / energy)


def test_mixed_operand_types():
    z = FixedPointComplex(2, 2, value=complex(1.5, 0.5))

    out = z + 0.25
    assert out.format == (3, 2)
    assert out == complex(1.75, 0.5)
    assert 0.25 + z == complex(1.75, 0.5)
    assert z - 0.25 == complex(1.25, 0.5)
    assert 0.25 - z == complex(-1.25, -0.5)
    assert z * 2.0 == complex(3.0, 1.0)

    assert z + complex(1.0, -1.0) == complex(2.5, -0.5)
    assert complex(1.0, -1.0) - z == complex(-0.5, -1.5)
    assert z * complex(0.0, 1.0) == complex(-0.5, 1.5)

    out = FixedPoint(4, 0, value=3) + z
    assert out.format == (5, 2)
    assert out == complex(4.5, 0.5)

    assert z + 6 == complex(7.5, 0.5)
    assert 4 - z == complex(2.5, -0.5)
    assert -5 * z == complex(-7.5, -2.5)
    assert z / 3 == z / FixedPointComplex(value=3)
    assert -7 / z == FixedPointComplex(value=-7) / z

    with pytest.raises(TypeError):
        z + "1"
    with pytest.raises(TypeError):
        z < z


def test_division_by_zero():
    z = FixedPointComplex(4, 4, value=complex(1.0, 1.0))
    with pytest.raises(ZeroDivisionError):
        z / FixedPointComplex(4, 4)


@pytest.mark.parametrize("int_bits, frac_bits", [(32, 32), (64, 64)])
def test_bit_shifts(int_bits, frac_bits):
    fmt = FixedPointComplex(int_bits, frac_bits)
    assert FixedPointComplex(value=complex(1, -7), format_inst=fmt) << 2 == complex(4, -28)
    assert FixedPointComplex(value=complex(1, -71 * 64), format_inst=fmt) >> 1 == complex(0.5, -71 * 32)


def test_bit_shifts_negative_bits():
    fmt = FixedPointComplex(-3, 67)
    z = FixedPointComplex(value=complex(0.0322265625, 0.0322265625), format_inst=fmt)
    assert z << 1 == complex(-0.060546875, -0.060546875)

    fmt = FixedPointComplex(-5, 74)
    z = FixedPointComplex(value=complex(0.0068359375, 0.0068359375), format_inst=fmt)
    assert z << 2 == complex(-0.00390625, -0.00390625)

    fmt = FixedPointComplex(74, -10)
    assert FixedPointComplex(value=complex(1024.0, 1024.0), format_inst=fmt) << 1 == complex(2048.0, 2048.0)
    fmt = FixedPointComplex(74, -6)
    assert FixedPointComplex(value=complex(192.0, 192.0), format_inst=fmt) << 2 == complex(768.0, 768.0)


def test_overflow_modes():
    z = FixedPointComplex(6, 3, value=complex(3.875, -1.25))
    assert z.resize((3, 3), overflow_mode=O.wrap) == complex(3.875, -1.25)
    z = FixedPointComplex(5, 2, value=complex(15.75, -13.25))
    assert z.resize((4, 2), overflow_mode=O.wrap) == complex(-0.25, 2.75)

    z = FixedPointComplex(6, 3, value=complex(3.25, -0.5))
    assert z.resize((3, 3), overflow_mode=O.sat) == complex(3.25, -0.5)
    z = FixedPointComplex(5, 2, value=complex(15.75, -15.75))
    assert z.resize((4, 2), overflow_mode=O.sat) == complex(7.75, -8.0)

    z = FixedPointComplex(6, 3, value=complex(-2.0, 3.875))
    assert z.resize((3, 3), overflow_mode=O.excep) == complex(-2.0, 3.875)
    with pytest.raises(FpBinaryOverflowError):
        FixedPointComplex(5, 2, value=15.75).resize((4, 2), overflow_mode=O.excep)
    with pytest.raises(FpBinaryOverflowError):
        FixedPointComplex(5, 2, value=-13.25j).resize((4, 2), overflow_mode=O.excep)


@pytest.mark.parametrize(
    "value, mode, expected",
    [
        (1.125, R.direct_neg_inf, 1.0),
        (-0.0234375j, R.direct_neg_inf, -0.03125j),
        (1.125j, R.direct_zero, 1.0j),
        (-0.0234375, R.direct_zero, -0.015625),
        (1.125, R.near_pos_inf, 1.25),
        (-0.0234375j, R.near_pos_inf, -0.015625j),
        (1.125j, R.near_even, 1.0j),
        (-0.0234375j, R.near_even, -0.03125j),
        (1.125j, R.near_zero, 1.0j),
        (-0.0234375, R.near_zero, -0.015625),
    ],
)
def test_rounding_modes(value, mode, expected):
    if abs(value) > 1:
        z = FixedPointComplex(2, 4, value=value).resize((2, 2), round_mode=mode)
    else:
        z = FixedPointComplex(-4, 8, value=value).resize((-4, 6), round_mode=mode)
    assert z == expected


def test_resize_leaves_original_alone():
    z = FixedPointComplex(5, 2, value=complex(15.75, -13.25))
    small = z.resize((4, 2))
    assert z.format == (5, 2)
    assert small.format == (4, 2)
    assert z.resize(small).format == (4, 2)


def test_conjugate_neg_abs_pow():
    z = FixedPointComplex(2, 2, value=complex(1.5, 0.5))
    conj = z.conjugate()
    assert conj == complex(1.5, -0.5)
    assert conj.format == (3, 2)
    assert (-z) == complex(-1.5, -0.5)
    assert (-z).format == (3, 2)

    mag = abs(FixedPointComplex(4, 4, value=complex(3.0, 4.0)))
    assert isinstance(mag, FixedPoint)
    assert mag == 5.0
    assert mag.format == (9, 8)

    assert z ** 2 == z * z
    with pytest.raises(TypeError):
        z ** 3


def test_str_and_exact_string():
    assert str(FixedPointComplex(16, 16, value=23.125 + 54.5j)) == str(23.125 + 54.5j)
    assert str(FixedPointComplex(8, 6, value=-23.125 - 54.5j)) == str(-23.125 - 54.5j)
    assert str(FixedPointComplex(8, 6, value=23.125 - 54.5j)) == str(23.125 - 54.5j)
    assert str(FixedPointComplex(8, 6, value=-23.125 + 54.5j)) == str(-23.125 + 54.5j)

    z = FixedPointComplex(17, 12, value=0.078955 - 54685.3334j)
    real = FixedPoint(17, 12, value=0.078955)
    imag = FixedPoint(17, 12, value=-54685.3334)
    assert z.to_exact_string() == "(" + real.to_exact_string() + imag.to_exact_string() + "j)"
    assert FixedPointComplex(4, 4, value=1.5 + 0.25j).to_exact_string() == "(1.5+0.25j)"


def test_equality_hash_and_bool():
    z = FixedPointComplex(4, 4, value=1.5)
    assert z == 1.5
    assert z == FixedPointComplex(8, 8, value=1.5)
    assert hash(z) == hash(1.5) == hash(FixedPointComplex(8, 8, value=1.5))
    assert z != float("nan")
    assert not z == complex(float("inf"), 0.0)
    assert bool(z)
    assert bool(FixedPointComplex(4, 4, value=0.5j))
    assert not bool(FixedPointComplex(4, 4))
    assert complex(FixedPointComplex(4, 4, value=1.5 - 2.25j)) == 1.5 - 2.25j


def test_copy_pickle_and_state():
    cases = [
        FixedPointComplex(8, 8, value=0.01234),
        FixedPointComplex(8, 8, value=-3.01234 + 1.5j),
        FixedPointComplex(62, 2, value=56.789),
        FixedPointComplex(64, 64, real_bit_field=(1 << 69) + 23, imag_bit_field=-5),
    ]
    for z in cases:
        for dup in (copy.copy(z), copy.deepcopy(z), pickle.loads(pickle.dumps(z)),
                    FixedPointComplex.from_state(z.to_state())):
            assert dup is not z
            assert_identical(dup.real, z.real)
            assert_identical(dup.imag, z.imag)
            assert dup << 2 == z << 2


def test_numpy_object_arrays():
    base = [FixedPointComplex(17, 16, value=x) for x in range(-5, 4)]
    operands = [FixedPointComplex(16, 16, value=x * 0.125) for x in range(1, 10)]
    np_base = np.empty(len(base), dtype=object)
    np_base[:] = base
    np_ops = np.empty(len(operands), dtype=object)
    np_ops[:] = operands

    results = [
        (np_base + np_ops, [a + b for a, b in zip(base, operands)]),
        (np_base - np_ops, [a - b for a, b in zip(base, operands)]),
        (np_base * np_ops, [a * b for a, b in zip(base, operands)]),
        (np_base / np_ops, [a / b for a, b in zip(base, operands)]),
        (abs(np_ops), [abs(b) for b in operands]),
    ]
    for got, expected in results:
        for g, e in zip(got, expected):
            assert g == e
            assert g.format == e.format
