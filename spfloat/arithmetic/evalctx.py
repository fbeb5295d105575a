"""Precision contexts: the working precision, rounding mode and exponent range
that every operation reads exactly once, when it starts.
"""

import contextlib
import contextvars

from ..core.utils import DomainError
from ..core.ops import RM


binary16_synonyms = {'binary16', 'float16', 'float16_t', 'half'}
binary32_synonyms = {'binary32', 'float32', 'float32_t', 'single', 'float'}
binary64_synonyms = {'binary64', 'float64', 'float64_t', 'double'}
binary80_synonyms = {'binary80', 'float80', 'extended', 'longdouble'}
binary128_synonyms = {'binary128', 'float128', 'float128_t', 'quadruple'}

RNE_synonyms = {'rne', 'nearesteven', 'roundnearesteven', 'nearesttiestoeven', 'roundnearesttiestoeven'}
RNA_synonyms = {'rna', 'nearestaway', 'roundnearestaway', 'nearesttiestoaway', 'roundnearesttiestoaway'}
RTP_synonyms = {'rtp', 'topositive', 'roundtopositive', 'towardpositive', 'roundtowardpositive'}
RTN_synonyms = {'rtn', 'tonegative', 'roundtonegative', 'towardnegative', 'roundtowardnegative'}
RTZ_synonyms = {'rtz', 'tozero', 'roundtozero', 'towardzero', 'roundtowardzero'}
RAZ_synonyms = {'raz', 'awayzero', 'roundawayzero'}

# name -> significand bits, including the implicit bit
IEEE_p = {}
IEEE_p.update((k, 11) for k in binary16_synonyms)
IEEE_p.update((k, 24) for k in binary32_synonyms)
IEEE_p.update((k, 53) for k in binary64_synonyms)
IEEE_p.update((k, 64) for k in binary80_synonyms)
IEEE_p.update((k, 113) for k in binary128_synonyms)

IEEE_rm = {}
IEEE_rm.update((k, RM.RNE) for k in RNE_synonyms)
IEEE_rm.update((k, RM.RNA) for k in RNA_synonyms)
IEEE_rm.update((k, RM.RTP) for k in RTP_synonyms)
IEEE_rm.update((k, RM.RTN) for k in RTN_synonyms)
IEEE_rm.update((k, RM.RTZ) for k in RTZ_synonyms)
IEEE_rm.update((k, RM.RAZ) for k in RAZ_synonyms)

# MPFR's default exponent range, +-(2**30 - 1) for significands in [1/2, 1),
# moved down by one for significands in [1, 2)
EMAX_DEFAULT = (1 << 30) - 2
EMIN_DEFAULT = -(1 << 30)


class PrecisionCtx(object):
    """Context for arbitrary-precision binary floating-point evaluation.

    A context is never modified after it is created: use let() to produce
    an updated copy. Since contexts are immutable, they can be shared freely
    between threads.
    """

    _p : int = 53
    _rm : RM = RM.RNE
    _emin : int = EMIN_DEFAULT
    _emax : int = EMAX_DEFAULT

    @property
    def p(self):
        """Precision of results, in bits."""
        return self._p

    @property
    def rm(self):
        """Rounding mode used for final results."""
        return self._rm

    @property
    def emin(self):
        """Smallest IEEE-style exponent of a nonzero result."""
        return self._emin

    @property
    def emax(self):
        """Largest IEEE-style exponent of a finite result."""
        return self._emax

    def __init__(self, p=None, rm=None, emin=None, emax=None):
        if p is not None:
            p = int(p)
            if p < 2:
                raise DomainError('precision must be at least 2 bits, got {}'.format(repr(p)))
            self._p = p
        if rm is not None:
            try:
                self._rm = RM(rm)
            except ValueError:
                raise ValueError('unknown rounding mode {}'.format(repr(rm)))
        if emax is not None:
            self._emax = int(emax)
        if emin is not None:
            self._emin = int(emin)
        if self._emin >= self._emax:
            raise ValueError('empty exponent range: emin={}, emax={}'.format(self._emin, self._emax))

    def _import_fields(self, ctx):
        self._p = ctx._p
        self._rm = ctx._rm
        self._emin = ctx._emin
        self._emax = ctx._emax

    def let(self, p=None, rm=None, emin=None, emax=None):
        """Create a new context, updated with any provided fields."""
        cls = type(self)
        newctx = cls.__new__(cls)
        newctx._import_fields(self)
        newctx.__init__(p=p, rm=rm, emin=emin, emax=emax)
        return newctx

    @classmethod
    def from_props(cls, props):
        """Create a context from FPCore-style properties, such as
        {'precision': 'binary64', 'round': 'toZero'}.
        """
        p = None
        rm = None

        if 'round' in props:
            rounding = props['round']
            try:
                rm = IEEE_rm[str(rounding).lower()]
            except KeyError:
                raise ValueError('unsupported rounding mode {}'.format(repr(rounding)))

        if 'precision' in props:
            prec = props['precision']
            precstr = str(prec).lower()
            if precstr in IEEE_p:
                p = IEEE_p[precstr]
            else:
                # a plain number of bits
                try:
                    p = int(precstr)
                except ValueError:
                    raise ValueError('unsupported precision {}'.format(repr(prec)))

        return cls(p=p, rm=rm)

    def __eq__(self, other):
        if not isinstance(other, PrecisionCtx):
            return NotImplemented
        return (self._p, self._rm, self._emin, self._emax) == (other._p, other._rm, other._emin, other._emax)

    def __hash__(self):
        return hash((self._p, self._rm, self._emin, self._emax))

    def __repr__(self):
        args = ['p=' + repr(self._p), 'rm=' + str(self._rm)]
        if self._emin != EMIN_DEFAULT:
            args.append('emin=' + repr(self._emin))
        if self._emax != EMAX_DEFAULT:
            args.append('emax=' + repr(self._emax))
        return '{}({})'.format(type(self).__name__, ', '.join(args))


DEFAULT_CTX = PrecisionCtx()

_active_ctx = contextvars.ContextVar('spfloat_ctx', default=None)


def default_ctx():
    """The context in effect for the current thread or task."""
    ctx = _active_ctx.get()
    if ctx is None:
        return DEFAULT_CTX
    else:
        return ctx


def resolve_ctx(ctx=None):
    if ctx is None:
        return default_ctx()
    elif isinstance(ctx, PrecisionCtx):
        return ctx
    else:
        raise TypeError('expected a PrecisionCtx, got {}'.format(repr(ctx)))


@contextlib.contextmanager
def use_ctx(ctx):
    """Make ctx the default context within a with block.
    The override is local to the current thread (or asyncio task).
    """
    if not isinstance(ctx, PrecisionCtx):
        raise TypeError('expected a PrecisionCtx, got {}'.format(repr(ctx)))
    token = _active_ctx.set(ctx)
    try:
        yield ctx
    finally:
        _active_ctx.reset(token)
