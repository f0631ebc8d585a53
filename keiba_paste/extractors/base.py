"""Base extractor module for pasted netkeiba text."""

from dataclasses import dataclass

from keiba_paste.models import ExtractionResult, ParserConfig


def split_lines(text: str) -> tuple[str, ...]:
    """Split text on universal newlines."""
    return tuple(text.splitlines())


@dataclass
class LineCursor:
    """Explicit cursor over an indexed sequence of lines.

    Lookahead and skipping move an integer index over an immutable tuple of
    lines, so each scan step can be tested in isolation.

    Attributes:
        lines: The lines of the pasted block.
        index: 0-based position of the current line.

    Example:
        >>> cursor = LineCursor(("1 1", "", "name"))
        >>> cursor.take()
        '1 1'
        >>> cursor.skip_blank()
        >>> cursor.current
        'name'
    """

    lines: tuple[str, ...]
    index: int = 0

    @classmethod
    def from_text(cls, text: str) -> "LineCursor":
        return cls(split_lines(text))

    @property
    def at_end(self) -> bool:
        return self.index >= len(self.lines)

    @property
    def current(self) -> str | None:
        return self.peek(0)

    @property
    def line_number(self) -> int:
        """1-based line number of the current line."""
        return self.index + 1

    def peek(self, offset: int = 1) -> str | None:
        """Return the line ``offset`` lines ahead without moving."""
        position = self.index + offset
        if 0 <= position < len(self.lines):
            return self.lines[position]
        return None

    def advance(self, count: int = 1) -> None:
        self.index = min(self.index + count, len(self.lines))

    def take(self) -> str | None:
        """Return the current line and move past it."""
        line = self.current
        self.advance()
        return line

    def skip_blank(self) -> None:
        while not self.at_end and not self.lines[self.index].strip():
            self.index += 1


class BaseExtractor:
    """Base class for extractors.

    Holds the immutable ParserConfig and validates call contracts. Subclasses
    implement ``extract`` as a pure function of the text and the config.

    Attributes:
        config: The parser configuration used for every call.

    Example:
        >>> class TitleExtractor(BaseExtractor):
        ...     def extract(self, text: str) -> ExtractionResult[str]:
        ...         self.check_text(text)
        ...         return ExtractionResult(text.strip())
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        """Initialize BaseExtractor.

        Args:
            config: Parser configuration. Defaults to ``ParserConfig()``.

        Raises:
            TypeError: If config is not a ParserConfig.
        """
        if config is None:
            config = ParserConfig()
        if not isinstance(config, ParserConfig):
            raise TypeError(f"config must be ParserConfig, got {type(config).__name__}")
        self.config = config

    @staticmethod
    def check_text(text: str) -> None:
        """Reject non-string input.

        Raises:
            TypeError: If text is not a str.
        """
        if not isinstance(text, str):
            raise TypeError(f"text must be str, got {type(text).__name__}")

    def extract(self, text: str) -> ExtractionResult:
        """Extract structured data from a pasted block.

        This method must be implemented by subclasses.

        Raises:
            NotImplementedError: If not implemented by subclass.
        """
        raise NotImplementedError
