"""
End to end tests: image in, barcode out.
"""

import json
import logging

import numpy
import pytest
from PIL import Image

from eanbarcode import linescan, parser, scanner, vis

from .conftest import GOPL, GOPL_DIGITS


def _row_bars(im):
    return linescan.to_bars(
        linescan.extract_linescan(im).bvs)


class TestReadBarcode:
    def test_gopl(self, gopl_image):
        bc = scanner.read_barcode(gopl_image)
        assert bc == GOPL_DIGITS
        assert list(bc) == [9, 7, 8, 0, 1, 3, 4, 1, 9, 0, 4, 4, 0]
        assert len(bc) == 13

    @pytest.mark.parametrize('module_width', [1, 2, 5, 8])
    def test_module_widths(self, module_width):
        im = linescan.render_image(GOPL, module_width=module_width)
        assert scanner.read_barcode(im).value == GOPL

    def test_rgb(self, gopl_image):
        im = numpy.dstack((gopl_image, gopl_image, gopl_image))
        assert scanner.read_barcode(im) == GOPL_DIGITS

    def test_explicit_row(self, gopl_image):
        assert scanner.read_barcode(gopl_image, y=0) == GOPL_DIGITS

    def test_full(self, gopl_image):
        bc, info = scanner.read_barcode(gopl_image, full=True)
        assert info['y'] == 10
        left, right = info['guards']
        assert (left.start, left.end) == (30, 39)
        assert (right.start, right.end) == (30 + 92 * 3, 30 + 95 * 3)
        assert len(info['bars']) == parser.nbars
        assert info['module_widths'] == (3., 3.)
        assert info['linescan'].bvs.size == gopl_image.shape[1]
        assert (bc.start, bc.end) == (left.start, right.end)

    def test_detect_parity(self):
        im = linescan.render_image('5901234123457')
        bc = scanner.read_barcode(im, parity=None)
        assert bc.value == '5901234123457'

    def test_invalid_parity(self, gopl_image):
        with pytest.raises(ValueError):
            scanner.read_barcode(gopl_image, parity='GGGGGG')

    def test_invalid_check_digit_warns(self, caplog):
        # digits only, the check digit is not enforced
        im = linescan.render_image('9780134190441')
        with caplog.at_level(logging.WARNING):
            assert scanner.read_barcode(im).value == '9780134190441'
        assert 'check digit' in caplog.text

    def test_edge_noise(self):
        im = linescan.render_image(GOPL, module_width=4)
        b = _row_bars(im)[11]
        im[:, b.end] = im[0, b.start]
        assert _row_bars(im)[11].width == b.width + 1
        assert scanner.read_barcode(im).value == GOPL


class TestReadBarcodeFailures:
    @pytest.mark.parametrize('value', [0, 255])
    def test_blank(self, value):
        im = numpy.full((20, 300), value, dtype='u1')
        with pytest.raises(parser.GuardError) as e:
            scanner.read_barcode(im)
        assert e.value.stage == 'guard'
        assert e.value.info['y'] == 10
        assert 'guards' not in e.value.info

    def test_widened_bar(self, gopl_image):
        b = _row_bars(gopl_image)[6]
        im = numpy.concatenate((
            gopl_image[:, :b.start],
            numpy.repeat(gopl_image[:, b.start:b.start + 1], 3, axis=1),
            gopl_image[:, b.start:]), axis=1)
        with pytest.raises(parser.DigitizationError) as e:
            scanner.read_barcode(im)
        info = e.value.info
        assert (info['half'], info['group']) == ('left', 0)
        assert info['got'] == 8
        assert len(info['bars']) == parser.nbars

    def test_truncated(self, gopl_image):
        with pytest.raises(parser.DecodeError) as e:
            scanner.read_barcode(gopl_image[:, :200])
        assert 'linescan' in e.value.info


class TestFiles:
    def test_scan_file(self, tmp_path, gopl_image):
        fn = str(tmp_path / 'gopl.png')
        Image.fromarray(gopl_image).convert('RGB').save(fn)
        im = scanner.load_image(fn)
        assert im.shape == gopl_image.shape + (3, )
        assert scanner.scan_file(fn) == GOPL_DIGITS

    def test_palette_image(self, tmp_path, gopl_image):
        fn = str(tmp_path / 'gopl.png')
        pim = Image.fromarray((gopl_image == 0).astype('u1'))
        pim.putpalette([255, 255, 255, 0, 0, 0])
        pim.save(fn)
        assert Image.open(fn).mode == 'P'
        assert numpy.array(Image.open(fn)).max() == 1
        assert scanner.load_image(fn).shape == gopl_image.shape + (3, )
        assert scanner.scan_file(fn) == GOPL_DIGITS

    def test_gray_alpha_image(self, tmp_path, gopl_image):
        fn = str(tmp_path / 'gopl.png')
        Image.fromarray(gopl_image).convert('LA').save(fn)
        assert Image.open(fn).mode == 'LA'
        assert scanner.scan_file(fn) == GOPL_DIGITS

    def test_meta(self, tmp_path, gopl_image):
        mfn = str(tmp_path / 'meta.json')
        with open(mfn, 'w') as mf:
            json.dump({'y': 3, 'crop': [0, 10, 0, 345], 'parity': None}, mf)
        meta, kwargs = scanner.load_meta(mfn)
        assert meta['crop'] == [0, 10, 0, 345]
        assert kwargs['y'] == 3
        assert kwargs['parity'] is None
        assert kwargs['threshold'] == 128
        im = scanner.crop_image(gopl_image, meta)
        assert im.shape == (10, 345)
        assert scanner.read_barcode(im, **kwargs) == GOPL_DIGITS

    def test_meta_defaults(self):
        meta, kwargs = scanner.load_meta()
        assert kwargs == scanner.default_kwargs
        assert kwargs is not scanner.default_kwargs

    def test_meta_invalid_key(self, tmp_path):
        mfn = str(tmp_path / 'meta.json')
        with open(mfn, 'w') as mf:
            json.dump({'denom': 20}, mf)
        with pytest.raises(ValueError):
            scanner.load_meta(mfn)

    def test_meta_null_threshold(self, tmp_path):
        mfn = str(tmp_path / 'meta.json')
        with open(mfn, 'w') as mf:
            json.dump({'threshold': None}, mf)
        with pytest.raises(ValueError):
            scanner.load_meta(mfn)
        with open(mfn, 'w') as mf:
            json.dump({'threshold': None, 'ral': 15}, mf)
        meta, kwargs = scanner.load_meta(mfn)
        assert kwargs['ral'] == 15

    def test_swap_axes(self, gopl_image):
        im = scanner.crop_image(gopl_image.T, {'swap_axes': True})
        assert scanner.read_barcode(im) == GOPL_DIGITS


class TestVis:
    def test_debug_image(self):
        im = linescan.render_image(GOPL, height=80)
        bc, info = scanner.read_barcode(im, y=70, full=True)
        dim = vis.debug_image(im, info)
        assert dim.shape == im.shape + (3, )
        left = info['guards'][0]
        # scanline band
        assert dim[70, left.start].tolist() == [0, 0, 255]
        assert dim[70, 0].tolist() == [255, 0, 0]
        # guard bars stacked above the band
        assert dim[50, left[0].start].tolist() == [0, 255, 0]
        assert dim[30, left[1].start].tolist() == [0, 255, 0]
        assert dim[50, 0].tolist() == [255, 255, 255]

    def test_save_debug(self, tmp_path, gopl_image):
        bc, info = scanner.read_barcode(gopl_image, full=True)
        fn = vis.save_debug(gopl_image, info, str(tmp_path / 'out.png'))
        assert Image.open(fn).size == (gopl_image.shape[1], 20)
