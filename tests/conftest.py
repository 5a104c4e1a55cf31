import numpy
import pytest

from eanbarcode import linescan


GOPL = '9780134190440'
GOPL_DIGITS = [9, 7, 8, 0, 1, 3, 4, 1, 9, 0, 4, 4, 0]


@pytest.fixture
def gopl_image():
    return linescan.render_image(GOPL, module_width=3, quiet_zone=10)


@pytest.fixture
def blank_image():
    return numpy.full((20, 300), 255, dtype='u1')
