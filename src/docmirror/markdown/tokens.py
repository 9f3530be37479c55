"""Sentinel-to-token post-processing for converter output.

Field sentinels become inline tokens: code spans for Markdown and
``{{ ... }}`` blocks for HTML. Tokens that touch or are separated only by
whitespace are then merged, so ``{{A}} {{B}}`` reads ``{{A B}}``.
"""

from dataclasses import dataclass
from enum import Enum

from docmirror.config.constants import MIRROR_FORMATS, SENTINEL_CLOSE, SENTINEL_OPEN
from docmirror.config.settings import normalize_format


@dataclass(frozen=True)
class TokenSyntax:
    """Inline token delimiters for one mirror format."""

    open: str
    close: str
    allow_empty: bool

    def wrap(self, content: str) -> str:
        return f"{self.open}{content}{self.close}"


def token_syntax(fmt: str) -> TokenSyntax:
    """Return the token syntax for a mirror format."""
    entry = MIRROR_FORMATS[normalize_format(fmt)]
    # A Markdown code span needs at least one character between the backticks
    return TokenSyntax(open=entry["open"], close=entry["close"], allow_empty=entry["open"] != "`")


@dataclass
class Segment:
    """A slice of the output: plain text or a marked span."""

    kind: str  # "text" or "token"
    raw: str
    content: str = ""

    @property
    def is_token(self) -> bool:
        return self.kind == "token"


class _State(Enum):
    IN_TEXT = "in_text"
    IN_TOKEN = "in_token"


def tokenize(text: str, syntax: TokenSyntax) -> list[Segment]:
    """Split ``text`` into alternating text and marked-span segments.

    Spans are matched leftmost and never overlap; a span ends at the first
    close delimiter after its open delimiter. An open delimiter without a
    matching close is plain text.
    """
    segments: list[Segment] = []
    state = _State.IN_TEXT
    text_start = 0
    pos = 0
    token_start = 0

    def emit_text(end: int) -> None:
        if end > text_start:
            segments.append(Segment("text", text[text_start:end]))

    while pos < len(text):
        if state is _State.IN_TEXT:
            found = text.find(syntax.open, pos)
            if found < 0:
                break
            token_start = found
            pos = found + len(syntax.open)
            state = _State.IN_TOKEN
        else:
            content_start = token_start + len(syntax.open)
            found = text.find(syntax.close, pos)
            if found < 0:
                break
            if found == content_start and not syntax.allow_empty:
                # Not a span; rescan from the close delimiter as a new opener
                pos = found
                state = _State.IN_TEXT
                continue
            emit_text(token_start)
            end = found + len(syntax.close)
            segments.append(Segment("token", text[token_start:end], text[content_start:found]))
            text_start = pos = end
            state = _State.IN_TEXT

    emit_text(len(text))
    return segments


def _is_blank(segment: Segment) -> bool:
    return segment.kind == "text" and not segment.raw.strip()


def merge_segments(segments: list[Segment], syntax: TokenSyntax) -> str:
    """Merge runs of marked spans that touch or are separated only by whitespace.

    Merged contents are trimmed and joined with a single space. Text outside
    spans passes through unchanged; a span whose combined content is empty is
    emitted as it was.
    """
    out: list[str] = []
    i = 0
    while i < len(segments):
        current = segments[i]
        if not current.is_token:
            out.append(current.raw)
            i += 1
            continue

        combined = current.content.strip()
        raw = [current.raw]
        j = i + 1
        while j < len(segments):
            k = j + 1 if _is_blank(segments[j]) else j
            # Directly touching spans merge as if separated by empty whitespace
            if k >= len(segments) or not segments[k].is_token:
                break
            combined = f"{combined} {segments[k].content.strip()}".strip()
            raw.extend(segment.raw for segment in segments[j : k + 1])
            j = k + 1

        out.append(syntax.wrap(combined) if combined else "".join(raw))
        i = j

    return "".join(out)


def merge_adjacent_tokens(text: str, fmt: str) -> str:
    """Collapse adjacent inline tokens of ``fmt`` into single tokens.

    Examples:
        >>> merge_adjacent_tokens("`A` `B`\\n  `C`", "gfm")
        '`A B C`'
        >>> merge_adjacent_tokens("{{A}} x {{B}}", "html")
        '{{A}} x {{B}}'
    """
    syntax = token_syntax(fmt)
    return merge_segments(tokenize(text, syntax), syntax)


def replace_sentinels(text: str, fmt: str) -> str:
    """Swap sentinel markers for the token delimiters of ``fmt``."""
    syntax = token_syntax(fmt)
    return text.replace(SENTINEL_OPEN, syntax.open).replace(SENTINEL_CLOSE, syntax.close)


def postprocess(raw: str, fmt: str) -> str:
    """Turn converter output into final mirror text with no sentinels left."""
    return merge_adjacent_tokens(replace_sentinels(raw, fmt), fmt)
