from codeshot.exceptions import (
    ClipboardError,
    DependencyError,
    EncodingError,
    ModelError,
    PackageError,
    SaveError,
    SettingsError,
    TargetNotADirectoryError,
    UnsupportedRepresentationError,
)


def test_root_exception_hierarchy() -> None:
    for error_type in (
        SettingsError,
        DependencyError,
        ModelError,
        EncodingError,
        SaveError,
        UnsupportedRepresentationError,
        ClipboardError,
    ):
        assert issubclass(error_type, PackageError)
    assert issubclass(TargetNotADirectoryError, SaveError)


def test_error_messages_name_their_subject() -> None:
    assert str(EncodingError(image_format="PNG", message="zero area")) == "Cannot encode PNG image: zero area"
    assert str(SaveError(path="/x/y.png", reason="Disk full")) == "Cannot save image: /x/y.png: Disk full"
    assert str(TargetNotADirectoryError(path="/x")) == "Cannot save image: Not a directory: /x"
    assert "text" in str(UnsupportedRepresentationError(representation="text", image_format="PNG"))
    assert str(DependencyError(missing_package=["pillow"], message="render")).endswith("pillow")
