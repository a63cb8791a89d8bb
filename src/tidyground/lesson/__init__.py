"""Lessons narrating data wrangling.

A lesson loads a CSV dataset once, applies a sequence
of independent transformations to it, and renders
the code and the resulting tables into a document:

>>> from tidyground.lesson import wrangling_lesson, MarkdownRenderer
>>> lesson = wrangling_lesson()
>>> document = MarkdownRenderer().render(lesson, lesson.run())

The document can be produced as Markdown or as HTML,
the look of HTML documents can be changed through themes
(see :mod:`tidyground.themes`).

The ``tidyground-lesson`` command renders the bundled lesson,
see :mod:`tidyground.commands`.
"""

from .document import Lesson, LessonStepError, Step, StepResult
from .render import HTMLRenderer, MarkdownRenderer, Renderer, get_renderer
from .wrangling import surveys_dataset, wrangling_lesson

__all__ = (
    "Lesson",
    "LessonStepError",
    "Step",
    "StepResult",
    "Renderer",
    "MarkdownRenderer",
    "HTMLRenderer",
    "get_renderer",
    "surveys_dataset",
    "wrangling_lesson",
)
