import pyarrow as pa
import pytest

from tidyground.config import RenderSettings
from tidyground.dataframe import Dataframe
from tidyground.lesson import (
    HTMLRenderer,
    Lesson,
    MarkdownRenderer,
    get_renderer,
)
from tidyground.themes import THEMES, get_theme


@pytest.fixture
def lesson():
    lesson = Lesson("Survey <data>", "surveys.csv", introduction="Animals & plots.")

    @lesson.step("Selecting columns", "Keep two columns.")
    def selecting(surveys):
        return surveys.select("species_id", "weight")

    return lesson


@pytest.fixture
def results(lesson):
    data = Dataframe(
        pa.table(
            {
                "species_id": ["DM", "DO", "PE"],
                "weight": [42.5, None, 21.0],
            }
        )
    )
    return lesson.run(data)


def test_markdown(lesson, results):
    document = MarkdownRenderer().render(lesson, results)
    assert document.splitlines() == [
        "# Survey <data>",
        "",
        "Animals & plots.",
        "",
        "## 1. Selecting columns",
        "",
        "Keep two columns.",
        "",
        "```python",
        'return surveys.select("species_id", "weight")',
        "```",
        "",
        "A table: 3 x 2",
        "",
        "| species_id | weight |",
        "| ---------- | ------ |",
        "| DM         | 42.50  |",
        "| DO         | NA     |",
        "| PE         | 21.00  |",
    ]


def test_markdown_more_rows(lesson, results):
    settings = RenderSettings(preview_rows=1, float_digits=1)
    document = MarkdownRenderer(settings).render(lesson, results)
    lines = document.splitlines()
    assert "| DM         | 42.5   |" in lines
    assert "| DO         | NA     |" not in lines
    assert lines[-3:] == ["| DM         | 42.5   |", "", "*... and 2 more rows*"]


def test_html(lesson, results):
    document = HTMLRenderer().render(lesson, results)
    assert document.startswith("<!DOCTYPE html>")
    assert document.endswith("</html>")
    assert "<title>Survey &lt;data&gt;</title>" in document
    assert "<p>Animals &amp; plots.</p>" in document
    assert "<h2>1. Selecting columns</h2>" in document
    assert (
        "return surveys.select(&quot;species_id&quot;, &quot;weight&quot;)" in document
    )
    assert '<p class="dimensions">A table: 3 x 2</p>' in document
    assert "<th>species_id</th><th>weight</th>" in document
    assert "<tr><td>DO</td><td class=\"na\">NA</td></tr>" in document
    assert 'class="more"' not in document


def test_html_more_rows(lesson, results):
    document = HTMLRenderer(RenderSettings(preview_rows=2)).render(lesson, results)
    assert document.count("<tr><td>") == 2
    assert '<p class="more">... and 1 more rows</p>' in document


@pytest.mark.parametrize("theme", sorted(THEMES))
def test_html_theme(lesson, results, theme):
    settings = RenderSettings(output_format="html", theme=theme)
    document = get_renderer(settings).render(lesson, results)
    assert f'<body class="theme-{theme}">' in document
    assert get_theme(theme).css() in document


def test_themes_do_not_change_markdown(lesson, results):
    default = MarkdownRenderer(RenderSettings()).render(lesson, results)
    darkly = MarkdownRenderer(RenderSettings(theme="darkly")).render(lesson, results)
    assert default == darkly


def test_get_renderer():
    assert isinstance(get_renderer(RenderSettings()), MarkdownRenderer)
    assert isinstance(
        get_renderer(RenderSettings(output_format="html")), HTMLRenderer
    )


def test_unknown_theme():
    with pytest.raises(ValueError, match="Unknown theme"):
        get_theme("solarized")
