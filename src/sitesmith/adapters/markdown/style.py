"""Dark Pygments style used for highlighted code blocks."""

from __future__ import annotations

from pygments.style import Style
from pygments.token import (
    Comment,
    Error,
    Generic,
    Keyword,
    Literal,
    Name,
    Operator,
    String,
    Text,
    Token,
)


_LITERAL = "#cd814b"
_ACCENT = "#79c0ff"
_MUTED = "#8b949e"


class SiteStyle(Style):
    """GitHub-dark inspired palette."""

    name = "sitesmith"
    background_color = "#0d1117"
    highlight_color = "#6e7681"
    line_number_color = "#6e7681"

    styles = {
        Token: "#e6edf3",
        Error: "#f85149",
        Text.Whitespace: "#6e7681",
        Keyword: "#409ec8",
        Keyword.Constant: _ACCENT,
        Keyword.Pseudo: _ACCENT,
        Name: "#e6edf3",
        Name.Class: "#f0883e",
        Name.Constant: _ACCENT,
        Name.Decorator: "#d2a8ff",
        Name.Entity: "#ffa657",
        Name.Exception: "#f0883e",
        Name.Function: "#d0db8e",
        Name.Label: _ACCENT,
        Name.Namespace: "#ff7b72",
        Name.Property: _ACCENT,
        Name.Tag: "#7ee787",
        Name.Variable: _ACCENT,
        Literal: _LITERAL,
        Literal.Date: _LITERAL,
        String.Affix: _LITERAL,
        String.Delimiter: _LITERAL,
        String.Escape: _LITERAL,
        String.Heredoc: _LITERAL,
        String.Regex: _LITERAL,
        Operator: "#ff7b72",
        Comment: _MUTED,
        Comment.Special: _MUTED,
        Comment.Preproc: _MUTED,
        Generic: "#e6edf3",
        Generic.Deleted: "#ffa198 bg:#490202",
        Generic.Emph: "italic",
        Generic.Error: "#ffa198",
        Generic.Heading: _ACCENT,
        Generic.Inserted: "#56d364 bg:#0f5323",
        Generic.Output: _MUTED,
        Generic.Prompt: _MUTED,
        Generic.Strong: "bold",
        Generic.Subheading: _ACCENT,
        Generic.Traceback: "#ff7b72",
        Generic.Underline: "underline",
    }


__all__ = ["SiteStyle"]
