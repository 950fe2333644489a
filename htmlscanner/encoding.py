from collections import namedtuple

import webencodings

from ._tokenizer import characterClasses, asciiLower
from .constants import supportedEncodings

EncodingInfo = namedtuple("EncodingInfo", ["encoding", "tag", "isFallback"])


class ContentAttrParser(object):
    """Extract the charset from the value of a Content-Type header

    Every occurrence of the (case-insensitive) "charset" keyword is tried in
    turn until one is followed by "=" and a non-empty value.
    """

    def __init__(self, data):
        self.data = data
        self.chars = characterClasses[bytes if isinstance(data, bytes) else str]
        self.lowered = asciiLower(data)
        if isinstance(data, bytes):
            self.keyword = b"charset"
            self.semicolon = b";"
        else:
            self.keyword = "charset"
            self.semicolon = ";"

    def skip(self, position):
        data = self.data
        while position < len(data) and data[position:position + 1] in self.chars.space:
            position += 1
        return position

    def parse(self):
        data = self.data
        position = 0
        while True:
            position = self.lowered.find(self.keyword, position)
            if position == -1:
                return None
            position += len(self.keyword)

            p = self.skip(position)
            if data[p:p + 1] != self.chars.equals:
                continue
            p = self.skip(p + 1)

            quote = data[p:p + 1]
            if quote in self.chars.quotes:
                end = data.find(quote, p + 1)
                if end > p + 1:
                    return data[p + 1:end]
                continue

            end = p
            while (end < len(data) and data[end:end + 1] not in self.chars.space and
                   data[end:end + 1] != self.semicolon):
                end += 1
            if end > p:
                return data[p:end]


def parseCharsetFromContentType(contentType):
    """Return the charset named by a Content-Type value, or None"""
    return ContentAttrParser(contentType).parse()


def normalizeEncodingName(encoding):
    """Return the lowercased encoding name if it is supported, else None"""
    if isinstance(encoding, bytes):
        try:
            encoding = encoding.decode("ascii")
        except UnicodeDecodeError:
            return None
    if not isinstance(encoding, str):
        return None
    encoding = asciiLower(encoding)
    if encoding not in supportedEncodings:
        return None
    return encoding


def lookupEncoding(encoding):
    """Return the webencodings.Encoding implementing a supported encoding
    name, or None if the name is not supported"""
    encoding = normalizeEncodingName(encoding)
    if encoding is None:
        return None
    return webencodings.lookup(supportedEncodings[encoding])
