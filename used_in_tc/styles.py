"""Console styling for search output."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

from .models import FileResult, SearchResult

# 8-bit ANSI palette indices
THEME = Theme(
    {
        "important": "bold color(3)",
        "filename": "bold color(6)",
        "match": "bold color(5)",
        "info": "bold color(12)",
        "warning": "bold color(11)",
        "error": "bold color(9)",
    }
)

console = Console(theme=THEME, highlight=False, soft_wrap=True)


def render_search_result(result: SearchResult) -> Text:
    text = Text()
    text.append(f"{result.line}: ", style="match")
    text.append(result.line_text[:result.col])
    text.append(result.line_text[result.col:result.col_end], style="match")
    text.append(result.line_text[result.col_end:])
    return text


def render_file_result(result: FileResult) -> Text:
    text = Text(result.file_path, style="filename")
    text.append("\n")
    for match in result.matches:
        text.append("\t")
        text.append_text(render_search_result(match))
        text.append("\n")
    return text


def print_file_result(result: FileResult) -> None:
    console.print(render_file_result(result))
