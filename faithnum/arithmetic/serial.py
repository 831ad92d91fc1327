"""Serialization of Numbers: a JSON-friendly string form, a structural
(kind, payload, tag) tuple, and a compact binary packing of that tuple.
"""

import json
import struct

from ..core import utils
from ..core import digital
from ..core.ops import Kind, Apprx, apprx_names
from . import evalctx
from . import jsops
from . import number


_apprx_by_name = {name: tag for tag, name in apprx_names.items()}


# text

def to_json_value(n):
    """["<text>"] or ["<text>", "<approximation>"].
    The text is the JS string, except for rationals with no finite decimal
    expansion, which are written p/q so that they read back exactly.
    """
    v = n.value
    if v.kind == Kind.RATIONAL and v.nonterminating:
        text = '{:d}/{:d}'.format(v.p, v.q)
    else:
        text = jsops.to_js_string(n)
    if n.apprx is None:
        return [text]
    return [text, apprx_names[n.apprx]]

def _from_text(text):
    p, sep, q = text.partition('/')
    if sep:
        try:
            return number.Number.from_rational(utils.from_digits(p), utils.from_digits(q))
        except ValueError:
            raise utils.ParseError('invalid rational {}'.format(repr(text)))
    return jsops.parse(text, ctx=evalctx.get_ctx().let(empty_string_as_zero=False))

def from_json_value(x):
    if not isinstance(x, (list, tuple)) or not 1 <= len(x) <= 2 or not isinstance(x[0], str):
        raise ValueError('expected ["value"] or ["value", "approximation"], got {}'.format(repr(x)))
    n = _from_text(x[0])
    if len(x) == 1:
        return n
    try:
        tag = _apprx_by_name[x[1]]
    except KeyError:
        raise ValueError('unknown approximation {}'.format(repr(x[1])))
    return number.Number(n, apprx=tag)

def dumps(n, **kwargs):
    return json.dumps(to_json_value(n), **kwargs)

def loads(s, **kwargs):
    return from_json_value(json.loads(s, **kwargs))


# structure

def encode(n):
    """(kind, payload, apprx) as plain integers, with apprx 0 for exact values.
    The payload is (p, q) for Rational, (m, scale) for the decimals and () otherwise.
    """
    v = n.value
    if v.kind == Kind.RATIONAL:
        payload = (v.p, v.q)
    elif v.kind == Kind.DECIMAL or v.kind == Kind.BIGDECIMAL:
        payload = (v.m, v.scale)
    else:
        payload = ()
    apprx = 0 if n.apprx is None else int(n.apprx)
    return int(v.kind), payload, apprx

def decode(kind, payload, apprx=0):
    """Inverse of encode. Rebuilds the exact kind, without demoting."""
    try:
        kind = Kind(kind)
        tag = None if apprx == 0 else Apprx(apprx)
    except ValueError as e:
        raise ValueError('cannot decode {}'.format(repr((kind, payload, apprx)))) from e

    if kind == Kind.RATIONAL:
        value = digital.Rational(*payload)
    elif kind == Kind.DECIMAL:
        value = digital.Decimal(*payload)
    elif kind == Kind.BIGDECIMAL:
        value = digital.BigDecimal(*payload)
    else:
        if payload:
            raise ValueError('special value {} takes no payload, got {}'
                             .format(kind.name, repr(payload)))
        return number.Number._make(digital.Special(kind))
    return number.Number._make(value, tag)


# bytes

def _int_to_bytes(x):
    size = (x.bit_length() + 8) // 8
    return struct.pack('>I', size) + x.to_bytes(size, 'big', signed=True)

def pack(n):
    """Kind byte, apprx byte, then each payload integer as a 4-byte big-endian
    length followed by that many bytes of big-endian two's complement.
    """
    kind, payload, apprx = encode(n)
    return bytes([kind, apprx]) + b''.join(_int_to_bytes(x) for x in payload)

def unpack(b):
    if len(b) < 2:
        raise ValueError('truncated number: {}'.format(repr(b)))
    kind, apprx = b[0], b[1]
    payload = []
    pos = 2
    while pos < len(b):
        if pos + 4 > len(b):
            raise ValueError('truncated length at byte {}'.format(pos))
        size, = struct.unpack('>I', b[pos:pos+4])
        pos += 4
        if pos + size > len(b):
            raise ValueError('truncated integer at byte {}'.format(pos))
        payload.append(int.from_bytes(b[pos:pos+size], 'big', signed=True))
        pos += size
    return decode(kind, tuple(payload), apprx)
