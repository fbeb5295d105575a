from .logexp import ln, log1p, exp, expm1, e
from .trig import sin, cos
from .invtrig import acos, asin, atan
from .hyperbolic import sinh, cosh, tanh, asinh, acosh, atanh
from .derived import log2, log10, exp2, exp10, tan, sec, csc, cot, sech, csch, coth, atan2
from .factorial import fact, fact_rounded
from .constants import pi, ln2, ln10
