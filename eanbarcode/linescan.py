#!/usr/bin/env python
"""
Image row to linescan, linescan to bars and guards
"""

import logging

import numpy
import scipy.ndimage

from . import parser
from .objects import BLACK, Bar, Guard, Linescan


logger = logging.getLogger(__name__)

# ITU-R 601 luma
luma = numpy.array([0.299, 0.587, 0.114])


def to_gray(im):
    im = numpy.asarray(im)
    if im.ndim == 3 and im.shape[2] == 1:
        im = im[:, :, 0]
    if im.ndim == 3 and im.shape[2] in (3, 4):
        im = im[:, :, :3].astype('f8').dot(luma)
    if im.ndim != 2:
        raise ValueError("Invalid image shape: %s" % (im.shape, ))
    return numpy.round(im.astype('f8'))


def binarize(vs, threshold=128, ral=None):
    """1 (black) where vs <= threshold, 0 (white) elsewhere

    ral = running average length, replaces threshold with a local mean
    """
    vs = numpy.asarray(vs, dtype='f8')
    if ral is None:
        if threshold is None:
            raise ValueError("threshold or ral required")
        t = threshold
    else:
        t = scipy.ndimage.convolve1d(
            vs, numpy.ones(ral, dtype='f8') / ral, mode='reflect')
    return (vs <= t).astype('u1')


def extract_linescan(im, y=None, threshold=128, ral=None):
    gray = to_gray(im)
    if y is None:
        y = gray.shape[0] // 2
    if y < 0 or y >= gray.shape[0]:
        raise ValueError("Invalid y: %s" % y)
    vs = gray[y]
    if ral is not None:
        threshold = None
    return Linescan(y, vs, binarize(vs, threshold, ral), threshold)


def to_bars(bvs, offset=0):
    bvs = numpy.asarray(bvs).astype('int')
    if bvs.size == 0:
        return []
    einds = numpy.flatnonzero(numpy.diff(bvs)) + 1
    starts = [0, ] + einds.tolist()
    ends = einds.tolist() + [bvs.size, ]
    return [
        Bar(int(bvs[s]), s + offset, e + offset)
        for (s, e) in zip(starts, ends)]


def _find(bvs, color, start=0):
    hits = numpy.flatnonzero(bvs[start:] == color)
    if hits.size == 0:
        return -1
    return int(hits[0]) + start


def _rfind(bvs, color, end):
    hits = numpy.flatnonzero(bvs[:end] == color)
    if hits.size == 0:
        return -1
    return int(hits[-1])


def find_left_guard(bvs):
    bvs = numpy.asarray(bvs)
    bars = []
    i = 0
    for color in parser.guard_colors:
        s = _find(bvs, color, i)
        if s < 0:
            raise parser.GuardError(
                "left guard: no %s run after %s" % (
                    ('white', 'black')[color], i),
                side='left', bars=bars)
        e = _find(bvs, 1 - color, s)
        if e < 0:
            e = bvs.size
        bars.append(Bar(color, s, e))
        i = e
    return Guard(bars)


def find_right_guard(bvs):
    bvs = numpy.asarray(bvs)
    bars = []
    i = bvs.size
    for color in parser.guard_colors[::-1]:
        e = _rfind(bvs, color, i)
        if e < 0:
            raise parser.GuardError(
                "right guard: no %s run before %s" % (
                    ('white', 'black')[color], i),
                side='right', bars=bars)
        s = _rfind(bvs, 1 - color, e) + 1
        bars.insert(0, Bar(color, s, e + 1))
        i = s
    return Guard(bars)


def find_guards(bvs):
    left = find_left_guard(bvs)
    right = find_right_guard(bvs)
    if right.start < left.end:
        raise parser.GuardError(
            "guards overlap: left ends at %s, right starts at %s" % (
                left.end, right.start),
            side='both', left=left, right=right)
    return left, right


def modules_to_linescan(modules, module_width=3, quiet_zone=10):
    """Expand a module string into a binary linescan (1 = black)"""
    bvs = numpy.array([int(m) for m in modules], dtype='u1')
    bvs = numpy.repeat(bvs, module_width)
    pad = numpy.zeros(quiet_zone * module_width, dtype='u1')
    return numpy.concatenate((pad, bvs, pad))


def render_image(v, module_width=3, quiet_zone=10, height=20):
    """Synthetic 8 bit grayscale image of the EAN-13 barcode for v"""
    bvs = modules_to_linescan(
        parser.gen_modules(v), module_width, quiet_zone)
    row = numpy.where(bvs == BLACK, 0, 255).astype('u1')
    return numpy.tile(row, (height, 1))


def to_barcode(ls, parity=parser.ISBN_PARITY, full=False):
    """Locate guards on a linescan and decode the bars between them"""
    info = {'y': ls.y, 'linescan': ls}
    try:
        left, right = find_guards(ls.bvs)
        info['guards'] = (left, right)
        bars = to_bars(ls.bvs[left.start:right.end], offset=left.start)
        info['bars'] = bars
        logger.debug(
            "y=%s guards [%s, %s) %s bars", ls.y, left.start, right.end,
            len(bars))
        bc, pinfo = parser.digitize(bars, parity=parity, full=True)
    except parser.DecodeError as e:
        for k in info:
            e.info.setdefault(k, info[k])
        raise
    info.update(pinfo)
    if full:
        return bc, info
    return bc
