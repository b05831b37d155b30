"""Errors raised by the translation workflow."""


class MetadataTranslatorError(Exception):
    pass


class NoResxMatchesError(MetadataTranslatorError):
    """A resx import found no key shared by the translated and reference files."""

    def __init__(self, file_path: str, reference_path: str):
        self.file_path = str(file_path)
        self.reference_path = str(reference_path)
        super().__init__(
            f"No matching translations found in '{self.file_path}' "
            f"for reference file '{self.reference_path}'."
        )


class UnsupportedLanguageError(MetadataTranslatorError, ValueError):
    def __init__(self, language_tag: str):
        self.language_tag = language_tag
        super().__init__(f"Language '{language_tag}' is not in the supported languages list.")
