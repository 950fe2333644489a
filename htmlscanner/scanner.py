import warnings
from contextlib import contextmanager

from ._tokenizer import ElementMatcher, asciiLower
from .constants import OPENING_TAG, OTHER, elementTypes, tagTokenTypes
from .constants import rawtextElements, defaultFallbackEncoding
from .constants import EmptyStateStackError, UnsupportedEncodingError
from .constants import FallbackEncodingWarning
from .encoding import EncodingInfo, lookupEncoding, normalizeEncodingName
from .encoding import parseCharsetFromContentType
from . import utils


def copyElement(element):
    """Return a copy of element that shares no mutable state with it"""
    if element is None:
        return None
    element = dict(element)
    if "attrs" in element:
        element["attrs"] = dict(element["attrs"])
    return element


class HTMLScanner(object):
    """Lazy scanner over a buffer of (possibly malformed) HTML

    The scanner is an iterator over the elements of the document: comments,
    opening and closing tags, "other" markup (doctypes, processing
    instructions, bogus closing tags) and invalid fragments. No tree is built.

    Iteration state:

    * valid - False once nothing more can be matched
    * offset - where the next element will be searched from
    * index - sequential index of the current element (None before the first)
    * current - the current element (None before the first and at the end)

    current(), key() and valid() compute the first element on demand, so
    creating a scanner does not scan anything.

    Tag and attribute names consisting only of ASCII characters are
    lowercased. Instances are not safe to share between threads.
    """

    def __init__(self, html, fallbackEncoding=None):
        if not isinstance(html, (str, bytes)):
            raise TypeError("Expected str or bytes, got %s" % type(html).__name__)

        self.html = html
        self.length = len(html)
        self.matcher = ElementMatcher(html)

        # Number of characters scanned when looking for the meta encoding
        # declaration and the doctype
        self.numBytesMeta = 1024

        self.fallbackEncoding = defaultFallbackEncoding
        if fallbackEncoding is not None:
            self.setFallbackEncoding(fallbackEncoding)

        self.stateStack = []
        self.encodingInfo = None
        self.doctypeElement = None
        self.rewind()

    def __len__(self):
        return self.length

    def __repr__(self):
        return "<%s length=%d offset=%d>" % (type(self).__name__, self.length, self.offset)

    def __iter__(self):
        self.rewind()
        while self.valid():
            yield self._current
            self.next()

    def _coerce(self, value):
        """Convert a str name for comparison with a bytes buffer

        Non-ASCII names are encoded with the document encoding.
        """
        if not isinstance(self.html, bytes) or not isinstance(value, str):
            return value
        if value.isascii():
            return value.encode("ascii")
        try:
            return self.getEncodingObject().codec_info.encode(value)[0]
        except UnicodeEncodeError:
            raise ValueError("%r cannot be represented in the document encoding %s" %
                             (value, self.getEncoding()))

    def getHtml(self, element=None):
        """Return the given element's source, or the whole document"""
        if element is None:
            return self.html
        return self.html[element["start"]:element["end"]]

    def getSlice(self, start, end):
        """Extract a part of the document

        Returns an empty string for negative or out-of-bounds ranges. The
        order of start and end does not matter.
        """
        if start == end or start < 0 or end < 0:
            return self.html[0:0]
        if start > end:
            start, end = end, start
        return self.html[start:end]

    def getSliceBetween(self, a, b):
        """Extract the part of the document between two elements"""
        if a["start"] > b["start"]:
            a, b = b, a
        return self.getSlice(a["end"], b["start"])

    def getLength(self):
        return self.length

    def getOffset(self):
        return self.offset

    # Iteration

    def rewind(self):
        self._valid = True
        self.offset = 0
        self.index = None
        self._current = None

    def valid(self):
        if self._current is None and self._valid:
            self.next()
        return self._valid

    def current(self):
        if self._current is None and self._valid:
            self.next()
        return self._current

    def key(self):
        if self._current is None and self._valid:
            self.next()
        return self.index

    def next(self):
        if not self._valid:
            return

        current = self._current
        if (current is not None and current["type"] == OPENING_TAG and
                current["name"] in self._rawtextNames):
            self.offset = self.matcher.findRawTextEnd(current["name"], self.offset)

        self._current = self.matcher.match(self.offset)

        if self._current is not None:
            self.offset = self._current["end"]
            self.index = 0 if self.index is None else self.index + 1
        else:
            self.offset = self.length
            self._valid = False

    def find(self, elementType, tagName=None, stopOffset=None):
        """Find the next element of the given type, starting from the
        current offset

        The iteration position is advanced to the element found (or to where
        the search stopped). tagName should be lowercase. stopOffset is a
        soft limit: no new element is searched for once the offset has
        reached it, but the last element matched may extend past it.
        """
        if elementType not in self._elementTypes:
            raise ValueError("Unknown element type %r" % (elementType,))
        if tagName is not None and elementType not in tagTokenTypes:
            raise ValueError("Can only specify tag name when searching for "
                             "OPENING_TAG or CLOSING_TAG")
        tagName = self._coerce(tagName)

        while self._valid and (stopOffset is None or self.offset < stopOffset):
            self.next()

            if (self._valid and self._current["type"] == elementType and
                    (tagName is None or self._current["name"] == tagName)):
                return self._current

        return None

    # State stack

    def pushState(self):
        """Store the current iteration state

        Use revertState() or popState() when done.
        """
        self.stateStack.append((self._valid, self.offset, self.index, self._current))

    def popState(self):
        """Throw away the last stored state without reverting to it"""
        if not self.stateStack:
            raise EmptyStateStackError("The state stack is empty")
        self.stateStack.pop()

    def revertState(self):
        """Revert to the last stored state"""
        if not self.stateStack:
            raise EmptyStateStackError("The state stack is empty")
        self._valid, self.offset, self.index, self._current = self.stateStack.pop()

    def countStates(self):
        return len(self.stateStack)

    def clearStates(self):
        self.stateStack = []

    @contextmanager
    def preservedState(self):
        """Context manager that reverts the iteration state on exit"""
        self.pushState()
        try:
            yield self
        finally:
            self.revertState()

    # Encoding

    def setFallbackEncoding(self, encoding):
        """Set the encoding used when the document does not declare a
        supported one

        Has no effect once the encoding has been determined.
        """
        name = normalizeEncodingName(encoding)
        if name is None:
            raise UnsupportedEncodingError('Unsupported fallback encoding "%s"' % (encoding,))
        self.fallbackEncoding = name

    def getEncoding(self):
        return self.getEncodingInfo().encoding

    def getEncodingTag(self):
        """Return the meta element that declares the encoding, if any"""
        return self.getEncodingInfo().tag

    def usesFallbackEncoding(self):
        return self.getEncodingInfo().isFallback

    def getEncodingObject(self):
        """Return the webencodings.Encoding implementing the document encoding"""
        return lookupEncoding(self.getEncoding())

    def getEncodingInfo(self):
        if self.encodingInfo is None:
            self.encodingInfo = self.detectEncoding()
        return self.encodingInfo._replace(tag=copyElement(self.encodingInfo.tag))

    def detectEncoding(self):
        # http://www.w3.org/TR/html5/syntax.html#determining-the-character-encoding
        tag = None
        pragma = False
        charset = self._coerce("charset")
        httpEquiv = self._coerce("http-equiv")
        content = self._coerce("content")

        with self.preservedState():
            self.rewind()
            while True:
                meta = self.find(OPENING_TAG, "meta", self.numBytesMeta)
                if meta is None:
                    break
                attrs = meta["attrs"]
                if charset in attrs:
                    tag = meta
                    break
                if (httpEquiv in attrs and content in attrs and
                        self._isContentType(attrs[httpEquiv])):
                    tag = meta
                    pragma = True
                    break

        declared = None
        if tag is not None:
            if pragma:
                value = tag["attrs"][content]
                if value is not True:
                    declared = parseCharsetFromContentType(value)
            else:
                declared = tag["attrs"][charset]

        encoding = normalizeEncodingName(declared)
        if encoding is not None:
            return EncodingInfo(encoding, tag, False)

        if declared is not None:
            warnings.warn("Unsupported encoding %r declared, using %r instead" %
                          (declared, self.fallbackEncoding), FallbackEncodingWarning)
        return EncodingInfo(self.fallbackEncoding, tag, True)

    def _isContentType(self, value):
        if value is True:
            return False
        return asciiLower(value) == self._coerce("content-type")

    # Doctype

    def getDoctypeElement(self):
        """Return the doctype element, if any

        This is an element of type OTHER with an extra "content" key holding
        the text between "<!" and ">".
        """
        if self.doctypeElement is None:
            self.doctypeElement = self.detectDoctype() or False
        return copyElement(self.doctypeElement or None)

    def detectDoctype(self):
        keyword = self._coerce("doctype")
        bang = self._coerce("!")

        with self.preservedState():
            self.rewind()
            while True:
                element = self.find(OTHER, None, self.numBytesMeta)
                if element is None:
                    return None
                if element["symbol"] != bang:
                    continue
                content = self.html[element["start"] + 2:element["end"] - 1]
                if asciiLower(content[:len(keyword)]) == keyword:
                    doctype = dict(element)
                    doctype["content"] = content
                    return doctype

    # Escaping

    def escape(self, data, quote=True, doubleEncode=True):
        """Escape a string for inclusion in the document

        Byte strings are taken to be in the document encoding.
        """
        if isinstance(data, bytes):
            codec = self.getEncodingObject().codec_info
            text = codec.decode(data, "replace")[0]
            text = utils.escape(text, quote, doubleEncode)
            return codec.encode(text, "xmlcharrefreplace")[0]
        return utils.escape(data, quote, doubleEncode)

    _elementTypes = frozenset(elementTypes.values())
    _rawtextNames = frozenset(list(rawtextElements) +
                              [name.encode("ascii") for name in rawtextElements])

    parseCharsetFromContentType = staticmethod(parseCharsetFromContentType)
