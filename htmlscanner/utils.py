import re
from html.entities import html5 as html5Entities
from xml.sax.saxutils import escape as xmlEscape

_quoteEntities = {
    '"': "&quot;",
    "'": "&#039;",
}

_referenceRe = re.compile(r"&(?:#[0-9]+|#[xX][0-9a-fA-F]+|([A-Za-z][A-Za-z0-9]*));")


def isCharacterReference(match):
    name = match.group(1)
    return name is None or name + ";" in html5Entities


def escape(data, quote=True, doubleEncode=True):
    """Escape &, < and > (and both quote characters if quote is true)

    With doubleEncode disabled, well-formed character references already
    present in data are left alone.
    """
    entities = _quoteEntities if quote else {}
    if doubleEncode:
        return xmlEscape(data, entities)

    rv = []
    last = 0
    for match in _referenceRe.finditer(data):
        if not isCharacterReference(match):
            continue
        rv.append(xmlEscape(data[last:match.start()], entities))
        rv.append(match.group(0))
        last = match.end()
    rv.append(xmlEscape(data[last:], entities))
    return "".join(rv)
