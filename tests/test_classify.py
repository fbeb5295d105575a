import math

import gmpy2 as gmp
import pytest

from spfloat.arithmetic.evalctx import PrecisionCtx
from spfloat.core import conversion, digital
from spfloat.core.digital import Digital
from spfloat.core.ops import OP
from spfloat.functions import classify
from spfloat.functions.classify import SpecialValue


CTX = PrecisionCtx(p=53)


@pytest.mark.parametrize('x, cls', [
    (digital.NAN, SpecialValue.NAN),
    (digital.POS_INF, SpecialValue.POSITIVE_INFINITY),
    (digital.NEG_INF, SpecialValue.NEGATIVE_INFINITY),
    (digital.POS_ZERO, SpecialValue.ZERO),
    (digital.NEG_ZERO, SpecialValue.ZERO),
    (digital.ONE, SpecialValue.FINITE),
    (Digital(m=-3, exp=-100), SpecialValue.FINITE),
])
def test_classify(x, cls):
    assert classify.classify(x) is cls


class TestSpecialCase:

    def test_finite_operands_are_computed(self):
        assert classify.special_case(OP.sin, digital.ONE, CTX) is None
        assert classify.special_case(OP.log, Digital(c=3, exp=-1), CTX) is None

    def test_nan_wins(self):
        for op in classify.special_tables:
            assert classify.special_case(op, digital.NAN, CTX).isnan

    def test_domain_violations(self):
        assert classify.special_case(OP.log, digital.NEG_ONE, CTX).isnan
        assert classify.special_case(OP.log1p, Digital(m=-3, exp=-1), CTX).isnan
        assert classify.special_case(OP.log1p, Digital(m=-1, exp=-1), CTX) is None
        assert classify.special_case(OP.acos, Digital(c=3, exp=-1), CTX).isnan
        assert classify.special_case(OP.asin, Digital(m=-3, exp=-1), CTX).isnan
        assert classify.special_case(OP.acos, digital.ONE, CTX) is None
        assert classify.special_case(OP.acosh, Digital(c=1, exp=-1), CTX).isnan
        assert classify.special_case(OP.acosh, digital.NEG_ONE, CTX).isnan
        assert classify.special_case(OP.acosh, digital.ONE, CTX) is None
        assert classify.special_case(OP.atanh, Digital(m=-3, exp=-1), CTX).isnan
        assert classify.special_case(OP.atanh, digital.NEG_ONE, CTX) is None

    def test_signed_zero_passes_through(self):
        result = classify.special_case(OP.sin, digital.NEG_ZERO, CTX)
        assert result.is_identical_to(digital.NEG_ZERO)
        assert result is not digital.NEG_ZERO

    def test_table_values(self):
        assert classify.special_case(OP.log, digital.POS_ZERO, CTX).is_identical_to(digital.NEG_INF)
        assert classify.special_case(OP.log, digital.NEG_INF, CTX).isnan
        assert classify.special_case(OP.exp, digital.NEG_INF, CTX).is_identical_to(digital.POS_ZERO)
        assert classify.special_case(OP.cos, digital.NEG_ZERO, CTX) == digital.ONE
        assert classify.special_case(OP.cosh, digital.NEG_INF, CTX).is_identical_to(digital.POS_INF)

    def test_hyperbolic_table_values(self):
        assert classify.special_case(OP.sech, digital.NEG_INF, CTX).is_identical_to(digital.POS_ZERO)
        assert classify.special_case(OP.sech, digital.NEG_ZERO, CTX) == digital.ONE
        assert classify.special_case(OP.csch, digital.NEG_INF, CTX).is_identical_to(digital.NEG_ZERO)
        assert classify.special_case(OP.csch, digital.NEG_ZERO, CTX).is_identical_to(digital.NEG_INF)
        assert classify.special_case(OP.coth, digital.POS_ZERO, CTX).is_identical_to(digital.POS_INF)
        assert classify.special_case(OP.coth, digital.NEG_INF, CTX) == digital.NEG_ONE
        assert classify.special_case(OP.asinh, digital.NEG_INF, CTX).is_identical_to(digital.NEG_INF)
        assert classify.special_case(OP.asinh, digital.NEG_ZERO, CTX).is_identical_to(digital.NEG_ZERO)
        assert classify.special_case(OP.acosh, digital.POS_INF, CTX).is_identical_to(digital.POS_INF)
        assert classify.special_case(OP.acosh, digital.POS_ZERO, CTX).isnan
        assert classify.special_case(OP.atanh, digital.POS_INF, CTX).isnan
        assert classify.special_case(OP.atanh, digital.NEG_ZERO, CTX).is_identical_to(digital.NEG_ZERO)

    def test_half_pi_is_rounded_to_the_context(self):
        result = classify.special_case(OP.acos, digital.POS_ZERO, CTX)
        assert conversion.digital_to_float(result) == math.pi / 2
        short = classify.special_case(OP.acos, digital.POS_ZERO, PrecisionCtx(p=11))
        assert short.p == 11


class TestCompositions:

    def test_quotient(self):
        assert classify.quotient_class(digital.POS_ZERO, digital.NEG_ZERO).isnan
        assert classify.quotient_class(digital.POS_INF, digital.NEG_INF).isnan
        assert classify.quotient_class(digital.ONE, digital.NEG_ZERO).is_identical_to(digital.NEG_INF)
        assert classify.quotient_class(digital.NEG_ONE, digital.NEG_ZERO).is_identical_to(digital.POS_INF)
        assert classify.quotient_class(digital.NEG_ONE, digital.POS_INF).is_identical_to(digital.NEG_ZERO)
        assert classify.quotient_class(digital.ONE, digital.NEG_ONE) is None
        assert classify.quotient_class(digital.NAN, digital.ONE).isnan

    def test_atan2_zeros(self):
        assert classify.atan2_class(digital.NEG_ZERO, digital.POS_ZERO, CTX).is_identical_to(digital.NEG_ZERO)
        assert classify.atan2_class(digital.POS_ZERO, digital.ONE, CTX).is_identical_to(digital.POS_ZERO)
        assert conversion.digital_to_float(classify.atan2_class(digital.POS_ZERO, digital.NEG_ZERO, CTX)) == math.pi
        assert conversion.digital_to_float(classify.atan2_class(digital.NEG_ZERO, digital.NEG_ONE, CTX)) == -math.pi
        assert conversion.digital_to_float(classify.atan2_class(digital.NEG_ONE, digital.POS_ZERO, CTX)) == -math.pi / 2

    def test_atan2_infinities(self):
        assert conversion.digital_to_float(classify.atan2_class(digital.POS_INF, digital.POS_INF, CTX)) == math.pi / 4
        assert conversion.digital_to_float(classify.atan2_class(digital.NEG_INF, digital.NEG_INF, CTX)) == float(gmp.atan2(-gmp.inf(), -gmp.inf()))
        assert conversion.digital_to_float(classify.atan2_class(digital.POS_INF, digital.NEG_ONE, CTX)) == math.pi / 2
        assert classify.atan2_class(digital.NEG_ONE, digital.POS_INF, CTX).is_identical_to(digital.NEG_ZERO)
        assert conversion.digital_to_float(classify.atan2_class(digital.ONE, digital.NEG_INF, CTX)) == math.pi

    def test_atan2_finite_operands_are_computed(self):
        assert classify.atan2_class(digital.ONE, digital.NEG_ONE, CTX) is None
        assert classify.atan2_class(digital.NAN, digital.POS_ZERO, CTX).isnan
        assert classify.atan2_class(digital.POS_INF, digital.NAN, CTX).isnan
