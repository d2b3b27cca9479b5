from scatter.symbol import Symbol


def test_debug():
    symbols = [
        Symbol.COLON,
        Symbol.CURLY_OPEN,
        Symbol.CURLY_CLOSE,
        Symbol.PAREN_OPEN,
        Symbol.PAREN_CLOSE,
        Symbol.SQUARE_OPEN,
        Symbol.SQUARE_CLOSE,
        Symbol.HASH,
        Symbol.AT,
        Symbol.LINE_END,
    ]
    rendered = [str(symbol) for symbol in symbols]
    assert "".join(rendered) == ":{}()[]#@␤"
    assert [Symbol(character) for character in rendered] == symbols


def test_lookup_by_character():
    assert Symbol("#") is Symbol.HASH
    assert Symbol(":") is Symbol.COLON