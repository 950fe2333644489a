import string

elementTypes = {
    "Comment": 0,
    "OpeningTag": 1,
    "ClosingTag": 2,
    "Other": 3,
    "Invalid": 4
}

COMMENT = elementTypes["Comment"]
OPENING_TAG = elementTypes["OpeningTag"]
CLOSING_TAG = elementTypes["ClosingTag"]
OTHER = elementTypes["Other"]
INVALID = elementTypes["Invalid"]

tagTokenTypes = frozenset([OPENING_TAG, CLOSING_TAG])

# Same set as the \s class of the matching rules, so vertical tab included
spaceCharacters = frozenset([
    "\t",
    "\n",
    "\u000B",
    "\u000C",
    "\r",
    " "
])

asciiLetters = frozenset(string.ascii_letters)
digits = frozenset(string.digits)

asciiUpper2Lower = dict([(ord(c), ord(c.lower()))
                         for c in string.ascii_uppercase])

# Characters that may follow "<" or "</" in a tag name (plus anything >= 0x80)
nameCharacters = asciiLetters | digits | frozenset("_-:")

# Characters that terminate an attribute name (plus anything <= 0x20)
attributeNameTerminators = frozenset("\"'>/=")

# Characters that terminate an unquoted attribute value
unquotedValueTerminators = spaceCharacters | frozenset("\"'=<>`")

rawtextElements = frozenset([
    "style",
    "script",
    "noscript",
    "iframe",
    "noframes"
])

# Encoding names accepted as a declared or fallback encoding, mapped to the
# WHATWG label that implements them
supportedEncodings = {
    "iso-8859-1": "iso-8859-1",
    "iso8859-1": "iso-8859-1",
    "iso-8859-5": "iso-8859-5",
    "iso-8859-15": "iso-8859-15",
    "iso8859-15": "iso-8859-15",
    "utf-8": "utf-8",
    "cp866": "ibm866",
    "ibm866": "ibm866",
    "866": "ibm866",
    "cp1251": "windows-1251",
    "windows-1251": "windows-1251",
    "win-1251": "windows-1251",
    "1251": "windows-1251",
    "cp1252": "windows-1252",
    "windows-1252": "windows-1252",
    "1252": "windows-1252",
    "koi8-r": "koi8-r",
    "koi8-ru": "koi8-u",
    "koi8r": "koi8-r",
    "big5": "big5",
    "950": "big5",
    "gb2312": "gbk",
    "936": "gbk",
    "big5-hkscs": "big5",
    "shift_jis": "shift_jis",
    "sjis": "shift_jis",
    "sjis-win": "shift_jis",
    "cp932": "shift_jis",
    "932": "shift_jis",
    "euc-jp": "euc-jp",
    "eucjp": "euc-jp",
    "eucjp-win": "euc-jp",
    "macroman": "macintosh",
}

defaultFallbackEncoding = "utf-8"


class EmptyStateStackError(IndexError):
    pass


class UnsupportedEncodingError(LookupError):
    pass


class FallbackEncodingWarning(UserWarning):
    """Issued when a declared encoding is not supported and the fallback is used"""
    pass
