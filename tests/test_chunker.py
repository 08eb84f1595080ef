from mockstream.engine.chunker import chunk_bounded, chunk_tokens

TEXT = (
    "# Heading\n\nSome **markdown** text that is long enough to be split "
    "across several chunks, with a list:\n\n- one\n- two\n- three\n"
)


def test_single_long_token_is_not_split():
    token = "x" * 80
    assert chunk_bounded(token, 60) == [token]


def test_chunks_respect_max_length():
    chunks = chunk_bounded(TEXT, 20)
    assert chunks
    for chunk in chunks:
        assert len(chunk) <= 20
        assert chunk.strip()


def test_bounded_chunks_preserve_text():
    assert "".join(chunk_bounded(TEXT, 20)) == TEXT


def test_overflowing_whitespace_starts_next_chunk():
    assert chunk_bounded("Hello world foo bar", 11) == ["Hello world", " foo bar"]


def test_blank_chunks_are_dropped():
    assert chunk_bounded("a" + " " * 70 + "b", 10) == ["a", "b"]
    assert chunk_bounded("   \n  ", 60) == []


def test_token_mode_is_lossless():
    text = "Hi  there\nyou"
    assert chunk_tokens(text) == ["Hi", "  ", "there", "\n", "you"]
    assert "".join(chunk_tokens(TEXT)) == TEXT


def test_empty_input():
    assert chunk_bounded("") == []
    assert chunk_tokens("") == []
