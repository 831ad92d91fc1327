from .core import utils, ops, digital, bridge, gmpmath
from .arithmetic import evalctx, number, mathlib, jsops, ordered, display, serial

Number = number.Number
OrderedNumber = ordered.OrderedNumber
NumberCtx = evalctx.NumberCtx

Kind = ops.Kind
Apprx = ops.Apprx

NumberError = utils.NumberError
ParseError = utils.ParseError
NotRepresentableError = utils.NotRepresentableError

DisplayOptions = display.DisplayOptions
ParseOptions = display.ParseOptions
RegionalFormat = display.RegionalFormat
Notation = display.Notation
ExpNotation = display.ExpNotation

get_ctx = evalctx.get_ctx
set_ctx = evalctx.set_ctx
using = evalctx.using
set_default_precision = evalctx.set_default_precision
get_default_precision = evalctx.get_default_precision
