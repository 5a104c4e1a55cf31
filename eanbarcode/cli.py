#!/usr/bin/env python
"""
ean-read [--dbg] [--meta meta.json] [-y ROW] FILE...

Prints the EAN-13 barcode of every image, stops at the first failure
after writing a debug overlay.
"""

import argparse
import logging
import sys

from . import parser
from . import scanner
from . import vis


logger = logging.getLogger('ean-read')


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog='ean-read', description="Read EAN-13/ISBN barcodes from images")
    p.add_argument('files', nargs='+', help="png/jpeg images")
    p.add_argument(
        '--dbg', action='store_true', help="write the debug overlay")
    p.add_argument(
        '-o', '--out', default='out.png', help="debug overlay file")
    p.add_argument('--meta', default=None, help="json meta file")
    p.add_argument('-y', type=int, default=None, help="row to scan")
    p.add_argument('--threshold', type=int, default=None)
    p.add_argument(
        '--ral', type=int, default=None, help="running average length")
    p.add_argument(
        '--parity', default=None,
        help="left half parity schedule (default LGGLGL), 'auto' to detect")
    p.add_argument('-v', '--verbose', action='store_true')
    return p.parse_args(argv)


def scan(fn, meta, kwargs, dbg=False, out='out.png'):
    im = scanner.crop_image(scanner.load_image(fn), meta)
    try:
        bc, info = scanner.read_barcode(im, full=True, **kwargs)
    except parser.DecodeError as e:
        if 'linescan' in e.info:
            vis.save_debug(im, e.info, out)
        raise
    if dbg:
        vis.save_debug(im, info, out)
    return bc


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='ean-read: %(message)s')
    try:
        meta, kwargs = scanner.load_meta(args.meta)
    except (OSError, ValueError) as e:
        logger.error("could not load meta %s: %s", args.meta, e)
        return 2
    if args.y is not None:
        kwargs['y'] = args.y
    if args.threshold is not None:
        kwargs['threshold'] = args.threshold
    if args.ral is not None:
        kwargs['ral'] = args.ral
    if args.parity is not None:
        kwargs['parity'] = None if args.parity == 'auto' else args.parity
    try:
        kwargs['parity'] = parser.check_parity(kwargs['parity'])
    except ValueError as e:
        logger.error("%s", e)
        return 2
    for fn in args.files:
        try:
            bc = scan(fn, meta, kwargs, args.dbg, args.out)
        except OSError as e:
            logger.error("could not open image %s: %s", fn, e)
            return 1
        except parser.DecodeError as e:
            logger.error("could not decode barcode in %s: %s", fn, e)
            return 1
        except ValueError as e:
            logger.error("could not scan %s: %s", fn, e)
            return 1
        logger.info("%s: barcode: %s", fn, bc.value)
        if not parser.is_valid(bc):
            logger.info("%s: invalid check digit", fn)
    return 0


if __name__ == '__main__':
    sys.exit(main())
