import logging

from .core import utils, ops, digital, gmpmath, conversion
from .arithmetic import evalctx, mpnum, bigfloat
from . import functions

logging.getLogger(__name__).addHandler(logging.NullHandler())

BigFloat = bigfloat.BigFloat
Digital = digital.Digital
PrecisionCtx = evalctx.PrecisionCtx
RM = ops.RM
default_ctx = evalctx.default_ctx
use_ctx = evalctx.use_ctx

SpfloatError = utils.SpfloatError
DomainError = utils.DomainError
