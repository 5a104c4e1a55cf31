#!/usr/bin/env python
"""
Bars to EAN-13 digits

An EAN-13 symbol between the outer guards is laid out as:
    [bwb] [6 digits, 4 bars each] [wbwbw] [6 digits, 4 bars each] [bwb]
Every digit spans 7 modules. The left half digits use the L or G table,
chosen by the parity schedule, the right half always uses R. The parity
schedule itself encodes the leading (13th) digit.
"""

import logging
import math

from .objects import BLACK, WHITE, Barcode


logger = logging.getLogger(__name__)

ndigits = 13
nmodules = 7  # modules per digit
nbars = 3 + 6 * 4 + 5 + 6 * 4 + 3

guard_colors = [BLACK, WHITE, BLACK]
center_colors = [WHITE, BLACK, WHITE, BLACK, WHITE]

# parity schedule shared by every 978/979 (ISBN) barcode
ISBN_PARITY = 'LGGLGL'

errors = {
    -1: 'missing guard',
    -2: 'invalid separator',
    -3: 'invalid number of bars',
    -4: 'invalid digitization',
    -5: 'invalid input',
    -6: 'unrecognized symbol',
    -7: 'unrecognized parity',
}


class DecodeError(ValueError):
    code = -5
    stage = 'input'

    def __init__(self, msg, **info):
        ValueError.__init__(self, "%s: %s" % (errors[self.code], msg))
        self.info = info


class GuardError(DecodeError):
    code = -1
    stage = 'guard'


class SeparatorError(DecodeError):
    code = -2
    stage = 'separator'


class BarCountError(SeparatorError):
    code = -3


class DigitizationError(DecodeError):
    code = -4
    stage = 'digitization'


class SymbolError(DecodeError):
    code = -6
    stage = 'symbol'


class ParityError(SymbolError):
    code = -7


# 7 module patterns, 0 = white, 1 = black
L = {
    '0001101': 0,
    '0011001': 1,
    '0010011': 2,
    '0111101': 3,
    '0100011': 4,
    '0110001': 5,
    '0101111': 6,
    '0111011': 7,
    '0110111': 8,
    '0001011': 9,
}

G = {
    '0100111': 0,
    '0110011': 1,
    '0011011': 2,
    '0100001': 3,
    '0011101': 4,
    '0111001': 5,
    '0000101': 6,
    '0010001': 7,
    '0001001': 8,
    '0010111': 9,
}

R = {
    '1110010': 0,
    '1100110': 1,
    '1101100': 2,
    '1000010': 3,
    '1011100': 4,
    '1001110': 5,
    '1010000': 6,
    '1000100': 7,
    '1001000': 8,
    '1110100': 9,
}

tables = {'L': L, 'G': G, 'R': R}

rtables = {k: {tables[k][p]: p for p in tables[k]} for k in tables}

# leading digit -> parity schedule of the left half
parities = {
    0: 'LLLLLL',
    1: 'LLGLGG',
    2: 'LLGGLG',
    3: 'LLGGGL',
    4: 'LGLLGG',
    5: 'LGGLLG',
    6: 'LGGGLL',
    7: 'LGLGLG',
    8: 'LGLGGL',
    9: 'LGGLGL',
}

rparities = {parities[k]: k for k in parities}


def _round(v):
    # half away from zero, widths are never negative
    return int(math.floor(v + 0.5))


def check_parity(parity):
    if parity is None:
        return None
    parity = ''.join(parity).upper()
    if parity not in rparities:
        raise ValueError("Invalid parity schedule: %r" % (parity, ))
    return parity


def leading_digit(parity):
    parity = ''.join(parity).upper()
    if parity not in rparities:
        raise ParityError(
            "no leading digit for schedule %r" % (parity, ), parity=parity)
    return rparities[parity]


def lookup_char(pattern, table):
    """Return the digit for a 7 module pattern in table 'L', 'G' or 'R'"""
    if not isinstance(pattern, str):
        pattern = ''.join(str(int(p)) for p in pattern)
    d = tables[table].get(pattern, None)
    if d is None:
        raise SymbolError(
            "invalid %s pattern %r" % (table, pattern),
            table=table, pattern=pattern)
    return d


def lookup_symbol(pattern, position, parity=ISBN_PARITY):
    """Decode the digit at position (0-11, leading digit excluded)

    Positions 0-5 use parity[position], 6-11 use R.
    """
    if position >= 6:
        return lookup_char(pattern, 'R')
    return lookup_char(pattern, parity[position])


def detect_parity(patterns):
    """Match left half patterns against L then G

    Returns the digits and the parity schedule they were found with.
    """
    digits = []
    parity = ''
    for pattern in patterns:
        for table in 'LG':
            if pattern in tables[table]:
                digits.append(tables[table][pattern])
                parity += table
                break
        else:
            raise SymbolError(
                "invalid L/G pattern %r" % (pattern, ),
                table='LG', pattern=pattern)
    return digits, parity


def module_width(bars):
    return sum(b.width for b in bars) / float(len(bars))


def validate(bars, colors, name):
    if len(bars) != len(colors):
        raise SeparatorError(
            "%s: got %s bars, want %s" % (name, len(bars), len(colors)),
            name=name)
    for (i, (bar, color)) in enumerate(zip(bars, colors)):
        if bar.color != color:
            raise SeparatorError(
                "invalid %s bar[%d] color: got=%d, want=%d" % (
                    name, i, bar.color, color),
                name=name, index=i, got=bar.color, want=color)


def digitize_group(bars, mod, half='left', group=0):
    """Convert 4 bars into a 7 module pattern string"""
    tot = _round(sum(b.width for b in bars) / mod)
    if tot != nmodules:
        raise DigitizationError(
            "%s group %d: got=%s, want=%s modules" % (
                half, group, tot, nmodules),
            half=half, group=group, got=tot, want=nmodules)
    return ''.join(str(b.color) * _round(b.width / mod) for b in bars)


def _decode_half(bars, mod, half, parity, offset=0):
    """Digitize and look up the 6 groups of a half, one group at a time

    offset = position of the first group, 0 (left) or 6 (right)
    parity = None detects L/G per group
    """
    patterns = []
    digits = []
    found = ''
    for i in range(6):
        pattern = digitize_group(bars[i * 4:(i + 1) * 4], mod, half, i)
        if parity is None:
            ds, table = detect_parity([pattern, ])
            digits.append(ds[0])
        else:
            p = offset + i
            table = 'R' if p >= 6 else parity[p]
            digits.append(lookup_symbol(pattern, p, parity))
        patterns.append(pattern)
        found += table
    return digits, patterns, found


def digitize(bars, parity=ISBN_PARITY, full=False):
    """Decode the bars spanning the left guard to the right guard"""
    parity = check_parity(parity)
    if len(bars) != nbars:
        raise BarCountError(
            "got %s, want %s" % (len(bars), nbars),
            got=len(bars), want=nbars)
    validate(bars[:4], guard_colors + [WHITE, ], 'left guard')
    left_mod = module_width(bars[:3])
    left_digits, left, parity = _decode_half(
        bars[3:27], left_mod, 'left', parity)

    validate(bars[27:32], center_colors, 'center guard')
    right_mod = module_width(bars[28:31])
    right_digits, right, _ = _decode_half(
        bars[32:56], right_mod, 'right', parity, 6)

    validate(bars[-4:], [WHITE, ] + guard_colors, 'right guard')

    digits = [leading_digit(parity), ] + left_digits + right_digits
    logger.debug(
        "module widths %.3f/%.3f, parity %s -> %s",
        left_mod, right_mod, parity, ''.join(str(d) for d in digits))
    bc = Barcode(digits, bars)
    if full:
        return bc, {
            'module_widths': (left_mod, right_mod),
            'patterns': left + right,
            'parity': parity,
        }
    return bc


def checksum(digits):
    """EAN-13 check digit of the first 12 digits"""
    digits = [int(d) for d in digits]
    if len(digits) < ndigits - 1:
        raise ValueError("checksum requires 12 digits: %s" % (digits, ))
    s = sum(d * (3 if i % 2 else 1) for (i, d) in enumerate(digits[:12]))
    return (10 - s % 10) % 10


def is_valid(bc):
    digits = list(bc)
    if len(digits) != ndigits:
        return False
    if not all(isinstance(d, int) and 0 <= d <= 9 for d in digits):
        return False
    return checksum(digits) == digits[-1]


def gen_modules(v):
    """Encode a 12 or 13 digit value as a 95 module string

    A missing check digit is computed.
    """
    if isinstance(v, int):
        v = str(v).zfill(ndigits)
    v = ''.join(str(d) for d in v)
    if not v.isdigit():
        raise ValueError("Invalid value: %r" % (v, ))
    if len(v) == ndigits - 1:
        v += str(checksum(v))
    if len(v) != ndigits:
        raise ValueError("value must have 12 or 13 digits: %r" % (v, ))
    parity = parities[int(v[0])]
    s = '101'
    for (i, c) in enumerate(v[1:7]):
        s += rtables[parity[i]][int(c)]
    s += '01010'
    for c in v[7:]:
        s += rtables['R'][int(c)]
    s += '101'
    return s


def test():
    ms = gen_modules('9780134190440')
    assert len(ms) == 95
    assert gen_modules('978013419044') == ms
    assert checksum('978013419044') == 0
