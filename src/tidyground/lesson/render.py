"""Render lessons as documents.

Each step of a lesson is rendered as:

* a heading with the title of the step,
* the narration,
* the code of the transformation,
* a preview of the resulting table.

The preview reports the size of the result
(``A table: 34 x 3``) and shows only its first rows.
"""

import abc
import html

import pyarrow as pa

from ..config import RenderSettings
from ..themes import get_theme
from ..utils import tabulate
from .document import Lesson, StepResult


class Renderer(abc.ABC):
    """Base class for document renderers."""

    def __init__(self, settings: RenderSettings | None = None) -> None:
        """
        :param settings: How tables have to be rendered, defaults when omitted.
        """
        self.settings = settings or RenderSettings()

    def render(self, lesson: Lesson, results: list[StepResult]) -> str:
        """Render the whole lesson as a document."""
        parts = [self.render_header(lesson)]
        for idx, result in enumerate(results, start=1):
            parts.append(self.render_step(idx, result))
        parts.append(self.render_footer(lesson))
        return "\n".join(part for part in parts if part)

    @abc.abstractmethod
    def render_header(self, lesson: Lesson) -> str: ...

    @abc.abstractmethod
    def render_step(self, index: int, result: StepResult) -> str: ...

    def render_footer(self, lesson: Lesson) -> str:
        return ""

    def dimensions(self, table: pa.Table) -> str:
        return f"A table: {table.num_rows} x {table.num_columns}"

    def hidden_rows(self, table: pa.Table) -> int:
        return max(table.num_rows - self.settings.preview_rows, 0)


class MarkdownRenderer(Renderer):
    """Render lessons as Markdown documents."""

    def render_header(self, lesson: Lesson) -> str:
        header = f"# {lesson.title}\n"
        if lesson.introduction:
            header += f"\n{lesson.introduction.strip()}\n"
        return header

    def render_step(self, index: int, result: StepResult) -> str:
        step = result.step
        lines = [f"## {index}. {step.title}", ""]
        if step.narration:
            lines += [step.narration.strip(), ""]
        lines += ["```python", step.code, "```", ""]
        lines += [self.render_table(result.table), ""]
        return "\n".join(lines)

    def render_table(self, table: pa.Table) -> str:
        preview = tabulate.tabulate(
            table.slice(0, self.settings.preview_rows),
            max_rows=self.settings.preview_rows,
            float_digits=self.settings.float_digits,
            markdown=True,
        )
        text = f"{self.dimensions(table)}\n\n{preview}"
        hidden = self.hidden_rows(table)
        if hidden:
            # Separated by an empty line, otherwise it would be a table row.
            text += f"\n\n*... and {hidden} more rows*"
        return text


class HTMLRenderer(Renderer):
    """Render lessons as standalone HTML documents styled by a theme."""

    def render_header(self, lesson: Lesson) -> str:
        theme = get_theme(self.settings.theme)
        title = html.escape(lesson.title)
        header = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="utf-8">',
            f"<title>{title}</title>",
            f"<style>\n{theme.css()}</style>",
            "</head>",
            f'<body class="theme-{theme.name}">',
            f"<h1>{title}</h1>",
        ]
        if lesson.introduction:
            header.append(f"<p>{html.escape(lesson.introduction.strip())}</p>")
        return "\n".join(header)

    def render_step(self, index: int, result: StepResult) -> str:
        step = result.step
        parts = [f"<h2>{index}. {html.escape(step.title)}</h2>"]
        if step.narration:
            parts.append(f"<p>{html.escape(step.narration.strip())}</p>")
        parts.append(
            f'<pre><code class="language-python">{html.escape(step.code)}</code></pre>'
        )
        parts.append(self.render_table(result.table))
        return "\n".join(parts)

    def render_table(self, table: pa.Table) -> str:
        parts = [f'<p class="dimensions">{self.dimensions(table)}</p>']
        parts.append('<table class="preview">')
        parts.append(
            "<thead><tr>"
            + "".join(f"<th>{html.escape(name)}</th>" for name in table.column_names)
            + "</tr></thead>"
        )
        parts.append("<tbody>")
        for row in table.slice(0, self.settings.preview_rows).to_pylist():
            cells = []
            for name in table.column_names:
                value = tabulate.format_value(row[name], self.settings.float_digits)
                if row[name] is None:
                    cells.append(f'<td class="na">{value}</td>')
                else:
                    cells.append(f"<td>{html.escape(value)}</td>")
            parts.append("<tr>" + "".join(cells) + "</tr>")
        parts.append("</tbody>")
        parts.append("</table>")
        hidden = self.hidden_rows(table)
        if hidden:
            parts.append(f'<p class="more">... and {hidden} more rows</p>')
        return "\n".join(parts)

    def render_footer(self, lesson: Lesson) -> str:
        return "</body>\n</html>"


RENDERERS: dict[str, type[Renderer]] = {
    "markdown": MarkdownRenderer,
    "html": HTMLRenderer,
}


def get_renderer(settings: RenderSettings) -> Renderer:
    """The renderer for the output format of the settings."""
    return RENDERERS[settings.output_format](settings)
