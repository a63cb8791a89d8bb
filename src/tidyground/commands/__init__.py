"""Shell commands exposing tidyground functionalities.

This module contains the shell commands that can be used to interact with tidyground.

Lesson
======

``tidyground-lesson`` renders the data wrangling lesson::

    tidyground-lesson --format html --theme flatly -o lesson.html

By default the lesson is rendered as Markdown on the bundled survey dataset,
any CSV file with the same columns can be provided instead::

    tidyground-lesson --data my_surveys.csv --rows 5

Environment variables ``TIDYGROUND_FORMAT``, ``TIDYGROUND_THEME``,
``TIDYGROUND_ROWS`` and ``TIDYGROUND_DIGITS`` provide defaults
for the corresponding options, see :mod:`tidyground.config`.
"""
