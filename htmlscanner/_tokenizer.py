from .constants import COMMENT, OPENING_TAG, CLOSING_TAG, OTHER, INVALID
from .constants import spaceCharacters, nameCharacters, asciiUpper2Lower
from .constants import attributeNameTerminators, unquotedValueTerminators


class CharacterClasses(object):
    """Character sets and delimiters in the type of the scanned buffer

    Everything is looked at through one-item slices (``html[p:p + 1]``), which
    gives a string for ``str`` buffers and a byte string for ``bytes`` buffers,
    so the sets have to be built for both.
    """

    def __init__(self, bufferType):
        if bufferType is bytes:
            convert = lambda item: item.encode("latin-1")
        else:
            convert = lambda item: item
        self.space = frozenset([convert(c) for c in spaceCharacters])
        self.name = frozenset([convert(c) for c in nameCharacters])
        self.attributeNameTerminators = frozenset(
            [convert(c) for c in attributeNameTerminators])
        self.unquotedValueTerminators = frozenset(
            [convert(c) for c in unquotedValueTerminators])
        self.quotes = frozenset([convert('"'), convert("'")])
        self.control = convert(" ")
        self.high = convert("\x80")
        self.lt = convert("<")
        self.gt = convert(">")
        self.slash = convert("/")
        self.equals = convert("=")
        self.commentStart = convert("<!--")
        self.commentEnd = convert("-->")
        self.otherSymbols = frozenset([convert("!"), convert("?"), convert("/")])


characterClasses = {
    str: CharacterClasses(str),
    bytes: CharacterClasses(bytes),
}


def asciiLower(value):
    """Lowercase the ASCII letters of a str or bytes value, nothing else"""
    if isinstance(value, bytes):
        return value.lower()
    return value.translate(asciiUpper2Lower)


def normalizeIdentifier(name):
    """Lowercase a tag or attribute name unless it has non-ASCII characters"""
    if name.isascii():
        return name.lower()
    return name


class ElementMatcher(object):
    """ This class takes care of finding elements in a buffer.

    match() is a pure function of the buffer and the offset it is given, all
    iteration state is kept by the caller. Elements are dicts:

    * {"type": COMMENT, "start": ..., "end": ...}
    * {"type": OPENING_TAG, "start": ..., "end": ..., "name": ..., "attrs": {...}}
    * {"type": CLOSING_TAG, "start": ..., "end": ..., "name": ...}
    * {"type": OTHER, "start": ..., "end": ..., "symbol": ...}
    * {"type": INVALID, "start": ..., "end": ...}

    "end" is exclusive.
    """

    def __init__(self, html):
        self.html = html
        self.length = len(html)
        self.chars = characterClasses[bytes if isinstance(html, bytes) else str]
        self._lowerHtml = None

    def isNameChar(self, c):
        return c in self.chars.name or c >= self.chars.high

    def isAttributeNameChar(self, c):
        return c > self.chars.control and c not in self.chars.attributeNameTerminators

    def skipSpace(self, offset):
        html = self.html
        space = self.chars.space
        while offset < self.length and html[offset:offset + 1] in space:
            offset += 1
        return offset

    def skipName(self, offset):
        html = self.html
        while offset < self.length and self.isNameChar(html[offset:offset + 1]):
            offset += 1
        return offset

    def locate(self, offset):
        """Return the position of the leftmost "<" that starts an element,
        or -1 if there is none"""
        html = self.html
        start = html.find(self.chars.lt, offset)
        while start != -1:
            c = html[start + 1:start + 2]
            if c in self.chars.otherSymbols or self.isNameChar(c):
                return start
            start = html.find(self.chars.lt, start + 1)
        return -1

    def match(self, offset):
        if offset >= self.length:
            return None

        start = self.locate(offset)
        if start == -1:
            return None

        html = self.html
        chars = self.chars

        if html.startswith(chars.commentStart, start):
            # An unterminated comment is a dead end, not an Invalid element
            end = html.find(chars.commentEnd, start + 3)
            if end == -1:
                return None
            return {"type": COMMENT, "start": start, "end": end + 3}

        nameStart = start + 1
        isClosingTag = False
        if (html[nameStart:nameStart + 1] == chars.slash and
                self.isNameChar(html[nameStart + 1:nameStart + 2])):
            nameStart += 1
            isClosingTag = True

        if self.isNameChar(html[nameStart:nameStart + 1]):
            return self.matchTag(start, nameStart, isClosingTag)

        return self.matchOther(start)

    def matchTag(self, start, nameStart, isClosingTag):
        html = self.html
        nameEnd = self.skipName(nameStart)
        attrs, offset = self.matchAttributes(nameEnd)

        # Tolerant close: "\s*/?>", or nothing for an unterminated tag
        end = offset
        p = self.skipSpace(offset)
        if html[p:p + 1] == self.chars.slash:
            p += 1
        if html[p:p + 1] == self.chars.gt:
            end = p + 1

        element = {
            "type": CLOSING_TAG if isClosingTag else OPENING_TAG,
            "start": start,
            "end": end,
            "name": normalizeIdentifier(html[nameStart:nameEnd]),
        }
        if not isClosingTag:
            element["attrs"] = attrs
        return element

    def matchOther(self, start):
        end = self.html.find(self.chars.gt, start + 2)
        if end == -1:
            return {"type": INVALID, "start": start, "end": start + 2}
        return {
            "type": OTHER,
            "start": start,
            "end": end + 1,
            "symbol": self.html[start + 1:start + 2],
        }

    def matchAttributes(self, offset):
        """Scan name/value pairs starting at offset

        Returns an (attributes, offset) tuple, offset being the position
        right after the last attribute consumed.
        """
        html = self.html
        length = self.length
        chars = self.chars
        attrs = {}

        while offset < length:
            nameStart = self.skipSpace(offset)
            nameEnd = nameStart
            while nameEnd < length and self.isAttributeNameChar(html[nameEnd:nameEnd + 1]):
                nameEnd += 1
            if nameEnd == nameStart:
                break

            name = html[nameStart:nameEnd]
            value = True
            offset = nameEnd

            p = self.skipSpace(offset)
            if html[p:p + 1] == chars.equals:
                offset = self.skipSpace(p + 1)
                c = html[offset:offset + 1]
                if c in chars.quotes:
                    # Unterminated quotes leave the value unset
                    valueEnd = html.find(c, offset + 1)
                    if valueEnd != -1:
                        value = html[offset + 1:valueEnd]
                        offset = valueEnd + 1
                elif offset < length:
                    valueEnd = offset
                    while (valueEnd < length and
                           html[valueEnd:valueEnd + 1] not in chars.unquotedValueTerminators):
                        valueEnd += 1
                    if valueEnd > offset:
                        value = html[offset:valueEnd]
                        offset = valueEnd

            attrs[normalizeIdentifier(name)] = value

        return attrs, offset

    def findRawTextEnd(self, name, offset):
        """Return the position of the case-insensitive "</name>" at or after
        offset, or the buffer length if there is none"""
        if self._lowerHtml is None:
            self._lowerHtml = asciiLower(self.html)
        chars = self.chars
        end = self._lowerHtml.find(chars.lt + chars.slash + name + chars.gt, offset)
        if end == -1:
            return self.length
        return end
