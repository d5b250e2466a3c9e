"""
Conversion of KSH charts into KSON documents.
"""
from .classes import (
    ConversionError,
    DecodeError,
    InvalidValueError,
    KSONDocument,
    ParseError,
    TimingError,
)
from .converter import convert_chart, ksh2kson
from .parser import KSHParser

__version__ = "0.1.0"
