"""
Lazy, tolerant HTML scanner. The scanner walks a buffer of (possibly
malformed) HTML and produces comments, opening and closing tags and other
markup with their exact offsets, without building a tree. It also sniffs the
document encoding and doctype from the first 1024 characters.

Example usage:

import htmlscanner
scanner = htmlscanner.HTMLScanner(open("my_document.html", "rb").read())
title = scanner.find(htmlscanner.OPENING_TAG, "title")
"""

from .scanner import HTMLScanner
from .constants import elementTypes, COMMENT, OPENING_TAG, CLOSING_TAG, OTHER, INVALID
from .constants import EmptyStateStackError, UnsupportedEncodingError
from .constants import FallbackEncodingWarning
from .encoding import EncodingInfo, parseCharsetFromContentType

__all__ = ["HTMLScanner", "elementTypes", "COMMENT", "OPENING_TAG",
           "CLOSING_TAG", "OTHER", "INVALID", "EmptyStateStackError",
           "UnsupportedEncodingError", "FallbackEncodingWarning",
           "EncodingInfo", "parseCharsetFromContentType"]

__version__ = "1.0.0"
