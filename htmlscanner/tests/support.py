from htmlscanner.constants import COMMENT, OPENING_TAG, CLOSING_TAG, OTHER, INVALID

elementKeys = {
    COMMENT: {"type", "start", "end"},
    INVALID: {"type", "start", "end"},
    OPENING_TAG: {"type", "start", "end", "name", "attrs"},
    CLOSING_TAG: {"type", "start", "end", "name"},
    OTHER: {"type", "start", "end", "symbol"},
}


def assertElement(element, expected=None):
    """Check that element is well formed and contains the expected items

    Keys other than the ones belonging to the element type are only allowed
    if they are expected.
    """
    expected = expected or {}
    assert isinstance(element, dict), "Expected an element, got %r" % (element,)
    assert element.get("type") in elementKeys, "Unknown element type %r" % (element.get("type"),)

    keys = elementKeys[element["type"]]
    assert keys <= set(element)
    unknown = set(element) - keys - set(expected)
    assert not unknown, "Unknown keys in element: %s" % ", ".join(sorted(unknown))

    for key, value in expected.items():
        assert key in element, "Missing key %r" % key
        assert element[key] == value, "%r: expected %r, got %r" % (key, value, element[key])
