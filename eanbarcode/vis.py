#!/usr/bin/env python

import numpy
import pylab

from .objects import BLACK


red = numpy.array([255, 0, 0], dtype='u1')
green = numpy.array([0, 255, 0], dtype='u1')
blue = numpy.array([0, 0, 255], dtype='u1')


def _to_rgb(im):
    im = numpy.asarray(im)
    if im.dtype != 'u1':
        im = numpy.clip(im, 0, 255).astype('u1')
    if im.ndim == 2:
        return numpy.dstack((im, im, im))
    return im[:, :, :3].copy()


def _band(im, y, half=10):
    return slice(max(0, y - half), min(im.shape[0], y + half))


def debug_image(im, info):
    """Copy of im with the linescan and guards drawn over it

    The linescan is drawn blue on black pixels and red on white ones,
    the bars of each guard are stacked in green above it.
    """
    dim = _to_rgb(im)
    y = info['y']
    bvs = info['linescan'].bvs
    dim[_band(dim, y), :, :] = numpy.where(
        (bvs == BLACK)[:, numpy.newaxis], blue, red)
    for g in info.get('guards', ()):
        for (i, b) in enumerate(g):
            yb = y - 20 * (i + 1)
            if yb < 0:
                continue
            dim[_band(dim, yb), b.start:b.end, :] = green
    return dim


def plot_bars(bars, black_color='b', white_color='r', alpha=0.3):
    colors = {1: black_color, 0: white_color}
    for b in bars:
        pylab.axvspan(b.start, b.end, color=colors[b.color], alpha=alpha)


def plot_linescan(im, info):
    ls = info['linescan']
    pylab.subplot(211)
    pylab.imshow(debug_image(im, info))
    pylab.subplot(212)
    pylab.plot(ls.vs, color='k')
    if ls.threshold is not None:
        pylab.axhline(ls.threshold, color='g')
    plot_bars(info.get('bars', []))
    if 'bars' in info and len(info['bars']):
        pylab.xlim(info['bars'][0].start, info['bars'][-1].end)


def save_debug(im, info, fn='out.png'):
    pylab.imsave(fn, debug_image(im, info))
    return fn
