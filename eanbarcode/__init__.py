#!/usr/bin/env python

from .parser import (
    DecodeError, GuardError, SeparatorError, DigitizationError, SymbolError,
    ISBN_PARITY, is_valid)
from .scanner import read_barcode
from . import linescan
from . import scanner

__all__ = [
    'read_barcode', 'is_valid', 'linescan', 'scanner', 'ISBN_PARITY',
    'DecodeError', 'GuardError', 'SeparatorError', 'DigitizationError',
    'SymbolError']
