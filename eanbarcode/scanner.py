#!/usr/bin/env python
"""
Load images, read a barcode along one row
"""

import copy
import json
import logging

import numpy
from PIL import Image

from . import linescan
from . import parser


logger = logging.getLogger(__name__)

default_kwargs = {
    'y': None,  # None = vertical midpoint
    'threshold': 128,
    'ral': None,
    'parity': parser.ISBN_PARITY,
}

default_meta = {
    'swap_axes': False,
}

meta_keys = ('crop', 'swap_axes')


def load_image(fn):
    im = Image.open(fn)
    # palette and gray+alpha samples are not intensities
    if im.mode in ('P', 'PA', 'LA', 'CMYK', 'YCbCr', 'HSV'):
        im = im.convert('RGB')
    im = numpy.array(im)
    if im.dtype in ('f4', 'f8'):
        im = (im * 255).astype('u1')
    if im.dtype == bool:
        im = im.astype('u1') * 255
    return im


def crop_image(im, meta):
    if meta.get('crop', None) is not None:
        c = meta['crop']
        im = im[c[0]:c[1], c[2]:c[3]]
    if meta.get('swap_axes', False):
        im = numpy.swapaxes(im, 0, 1)
    return im


def load_meta(fn=None):
    """Read a json meta file, returns (meta, kwargs)"""
    meta = copy.deepcopy(default_meta)
    kwargs = copy.deepcopy(default_kwargs)
    if fn is None:
        return meta, kwargs
    with open(fn, 'r') as mf:
        d = json.load(mf)
    for k in d:
        if k in meta_keys:
            meta[k] = d[k]
        elif k in kwargs:
            kwargs[k] = d[k]
        else:
            raise ValueError("Invalid meta key %r in %s" % (k, fn))
    if kwargs['threshold'] is None and kwargs['ral'] is None:
        raise ValueError("threshold or ral required in %s" % fn)
    return meta, kwargs


def read_barcode(
        im, y=None, threshold=128, ral=None, parity=parser.ISBN_PARITY,
        full=False):
    """Decode the EAN-13 barcode crossing row y of im

    im = 2d gray or 3d rgb(a) array
    y = row to scan, defaults to the vertical midpoint
    parity = left half parity schedule, None to detect it per digit

    Raises parser.DecodeError, with diagnostics in its info dict.
    """
    parity = parser.check_parity(parity)
    ls = linescan.extract_linescan(im, y=y, threshold=threshold, ral=ral)
    r = linescan.to_barcode(ls, parity=parity, full=full)
    bc = r[0] if full else r
    logger.debug("y=%s barcode %s", ls.y, bc.value)
    if not parser.is_valid(bc):
        logger.warning("barcode %s has an invalid check digit", bc.value)
    return r


def scan_file(fn, meta=None, **kwargs):
    if meta is None:
        meta = default_meta
    kw = copy.deepcopy(default_kwargs)
    kw.update(kwargs)
    im = crop_image(load_image(fn), meta)
    return read_barcode(im, **kw)
