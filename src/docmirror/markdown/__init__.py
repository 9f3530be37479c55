"""Post-processing of converter output."""

from docmirror.markdown.tokens import (
    Segment,
    TokenSyntax,
    merge_adjacent_tokens,
    postprocess,
    replace_sentinels,
    token_syntax,
    tokenize,
)

__all__ = [
    "Segment",
    "TokenSyntax",
    "merge_adjacent_tokens",
    "postprocess",
    "replace_sentinels",
    "token_syntax",
    "tokenize",
]
