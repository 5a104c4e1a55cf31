#!/usr/bin/env python

import sys

import pylab

import eanbarcode
import eanbarcode.linescan
import eanbarcode.scanner
import eanbarcode.vis


if __name__ == '__main__':
    if len(sys.argv) > 1:
        im = eanbarcode.scanner.load_image(sys.argv[1])
    else:
        im = eanbarcode.linescan.render_image('9780134190440', height=100)
    try:
        bc, info = eanbarcode.read_barcode(im, full=True)
    except eanbarcode.DecodeError as e:
        print("Failed: %s" % e)
        bc = None
        info = e.info
    print("Barcode is: %s" % (bc, ))
    if 'linescan' in info:
        eanbarcode.vis.plot_linescan(im, info)
        pylab.show()
