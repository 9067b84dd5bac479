"""Test module for metwords package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import metwords

    # Assert
    assert metwords is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    import metwords

    assert metwords.__version__ == "0.1.0"
    assert metwords.__author__ == "Metwords Team"


def test_package_all_exports() -> None:
    """Test that __all__ names resolve to package attributes."""
    import metwords

    for name in metwords.__all__:
        assert hasattr(metwords, name), name


def test_level_one_functions() -> None:
    """Test the top-level functions work together."""
    from metwords import build_document, collect_word_spans, tokenize

    assert [span.word for span in tokenize("Hello there")] == ["hello", "there"]
    doc = build_document("<p>Hello there</p>")
    assert [record.name for record in collect_word_spans(doc)] == ["hello", "there"]
