import logging

from fxbinary.core.formats import Format
from fxbinary.core.word import WORD_BITS
from fxbinary.value import dispatch
from fxbinary.value.fixedpoint import FixedPoint


def test_backend_chosen_by_width():
    assert FixedPoint(32, 32).is_compact
    assert not FixedPoint(32, 33).is_compact
    assert FixedPoint(WORD_BITS, 0, signed=False).is_compact


def test_number_format():
    assert dispatch.number_format(0) == Format(1, 0)
    assert dispatch.number_format(5) == Format(4, 0)
    assert dispatch.number_format(-8) == Format(5, 0)
    assert dispatch.number_format(0.5) == Format(1, 1)
    assert dispatch.number_format(3.0) == Format(3, 0)
    assert dispatch.number_format(-0.75) == Format(1, 2)
    assert dispatch.number_format(0.1) == Format(1, 55)


def test_coerce_number_rejects_other_types():
    assert dispatch.coerce_number("1") is None
    assert dispatch.coerce_number(None) is None
    assert dispatch.coerce_number(True) is None
    big = dispatch.coerce_number(2 ** 100)
    assert big.fmt == Format(102, 0)


def test_promotion_on_wide_add():
    a = FixedPoint(40, 20, value=-549755813887.5)
    b = FixedPoint(10, 30, value=511.000000001)
    assert a.is_compact and b.is_compact
    out = a + b
    assert out.format == (41, 30)
    assert not out.is_compact

    wide_a = FixedPoint._wrap(dispatch.promote(a._rep))
    wide_b = FixedPoint._wrap(dispatch.promote(b._rep))
    ref = wide_a + wide_b
    assert ref == out
    assert ref.to_exact_string() == out.to_exact_string()


def test_promotion_on_wide_mul_and_negate():
    a = FixedPoint(40, 0, value=2 ** 38 + 3)
    out = a * a
    assert out.format == (80, 0)
    assert int(out) == (2 ** 38 + 3) ** 2
    most_neg = FixedPoint(WORD_BITS, 0, value=-(2 ** 63))
    assert most_neg.is_compact
    pos = -most_neg
    assert not pos.is_compact
    assert int(pos) == 2 ** 63
    assert int(abs(most_neg)) == 2 ** 63


def test_division_precheck_promotes():
    a = FixedPoint(32, 0, signed=False, value=100)
    b = FixedPoint(32, 0, signed=False, value=7)
    q = a / b
    assert q.format == (32, 32)
    assert not q.is_compact
    assert q.to_exact_string() == FixedPoint.from_bits((100 << 32) // 7, 32, 32, False).to_exact_string()
    assert q.resize(q.format).is_compact


def test_unsigned_full_word_meets_signed():
    u = FixedPoint.from_bits(2 ** 64 - 1, 64, 0, signed=False)
    assert u.is_compact
    out = u + 1
    assert out.format == (66, 0)
    assert int(out) == 2 ** 64


def test_mixed_backend_ops():
    small = FixedPoint(4, 4, value=1.5)
    big = FixedPoint(80, 4, value=-2.25)
    assert (small + big) == -0.75
    assert (big * small) == -3.375
    assert small > big


def test_demotion_logs(caplog):
    wide = FixedPoint(40, 40, value=2.5)
    with caplog.at_level(logging.DEBUG, logger="fxbinary.value.dispatch"):
        narrow = wide.resize((4, 4))
    assert narrow.is_compact
    assert any("demoting" in r.message for r in caplog.records)
