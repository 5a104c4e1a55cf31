#!/usr/bin/env python
"""
Bar: contiguous run of one color on a linescan
Guard: black, white, black bars bounding the payload
Linescan: one thresholded image row
Barcode:
    13 digits
    as string
    bars
    start/end
"""

BLACK = 1
WHITE = 0

color_strings = ['white', 'black']


class Bar(object):
    def __init__(self, color, start, end):
        self.color = color  # 1 = black, 0 = white
        self.start = start
        self.end = end

    @property
    def width(self):
        return self.end - self.start

    def __eq__(self, other):
        if not isinstance(other, Bar):
            return NotImplemented
        return (
            (self.color, self.start, self.end) ==
            (other.color, other.start, other.end))

    def __repr__(self):
        return "Bar(%s, %s[%s, %s])" % (
            color_strings[self.color], self.width, self.start, self.end)


class Guard(object):
    def __init__(self, bars):
        if len(bars) != 3:
            raise ValueError("Guard requires 3 bars: %s" % (bars, ))
        self.bars = tuple(bars)

    def __repr__(self):
        return "Guard(%s, %s)" % (self.start, self.end)

    def __iter__(self):
        return iter(self.bars)

    def __getitem__(self, i):
        return self.bars[i]

    @property
    def start(self):
        return self.bars[0].start

    @property
    def end(self):
        return self.bars[-1].end

    @property
    def width(self):
        return self.end - self.start

    @property
    def colors(self):
        return [b.color for b in self.bars]

    @property
    def module_width(self):
        return self.width / 3.


class Linescan(object):
    def __init__(self, y, vs, bvs, threshold):
        self.y = y
        self.vs = vs  # grayscale row
        self.bvs = bvs  # 1 = black, 0 = white
        self.threshold = threshold

    def __len__(self):
        return len(self.bvs)

    def __repr__(self):
        return "Linescan(y=%s, %s px)" % (self.y, len(self.bvs))


class Barcode(object):
    def __init__(self, digits, bars=None):
        self.digits = tuple(int(d) for d in digits)
        if bars is None:
            bars = []
        self.bars = list(bars)

    def __repr__(self):
        return "Barcode(%s)" % self.value

    def __len__(self):
        return len(self.digits)

    def __iter__(self):
        return iter(self.digits)

    def __getitem__(self, i):
        return self.digits[i]

    def __eq__(self, other):
        if isinstance(other, Barcode):
            return self.digits == other.digits
        try:
            return self.digits == tuple(other)
        except TypeError:
            return NotImplemented

    def __hash__(self):
        return hash(self.digits)

    @property
    def value(self):
        return ''.join(str(d) for d in self.digits)

    @property
    def start(self):
        return self.bars[0].start

    @property
    def end(self):
        return self.bars[-1].end
