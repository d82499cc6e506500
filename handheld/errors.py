from __future__ import annotations


class ParseError(Exception):
    def __init__(self, message: str, *, line: int | None = None, text: str | None = None) -> None:
        self.line = line
        self.text = text
        prefix = ""
        if line is not None:
            prefix = f"line {line}: "
        suffix = ""
        if text is not None and text.strip():
            suffix = f" in {text.strip()!r}"
        super().__init__(prefix + str(message) + suffix)
