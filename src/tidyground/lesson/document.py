"""Lessons made of steps.

A lesson is a sequence of independent steps,
each one narrating a transformation of the same dataset::

    lesson = Lesson("Wrangling surveys", "surveys.csv")

    @lesson.step("Selecting columns", "Keep only the columns we care about.")
    def selecting(surveys):
        return surveys.select("plot_id", "species_id", "weight")

    results = lesson.run()

The dataset is loaded only once, every step receives
the same in-memory data and returns a new dataframe,
so steps never affect each other.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

import pyarrow as pa

from ..dataframe import Dataframe
from ..utils.inspect import get_body_source

log = logging.getLogger(__name__)

Transformation = Callable[[Dataframe], Dataframe]


class LessonStepError(Exception):
    """A step of a lesson failed to compute its result."""

    def __init__(self, step_title: str, error: Exception) -> None:
        super().__init__(f"Step {step_title!r} failed: {error}")
        self.step_title = step_title
        self.error = error


@dataclass
class Step:
    """A single transformation of the lesson dataset."""

    title: str
    narration: str
    transform: Transformation

    @property
    def code(self) -> str:
        """The code of the transformation, as shown to the readers."""
        return get_body_source(self.transform)


@dataclass
class StepResult:
    """The outcome of running a :class:`Step`."""

    step: Step
    table: pa.Table
    duration: float = 0.0


@dataclass
class Lesson:
    """A narrated sequence of transformations of a CSV dataset."""

    title: str
    dataset: str
    introduction: str = ""
    steps: list[Step] = field(default_factory=list)

    def add_step(self, title: str, narration: str, transform: Transformation) -> Step:
        """Append a step to the lesson.

        :raises TypeError: when the transformation is not callable.
        """
        if not callable(transform):
            raise TypeError(
                f"Expected a callable transformation, got {type(transform).__name__}"
            )
        step = Step(title, narration, transform)
        self.steps.append(step)
        return step

    def step(self, title: str, narration: str = "") -> Callable[[Transformation], Transformation]:
        """Decorator registering a function as a step of the lesson.

        The decorated function is returned unchanged.
        """

        def _register(transform: Transformation) -> Transformation:
            self.add_step(title, narration, transform)
            return transform

        return _register

    def load(self) -> Dataframe:
        """Read the dataset in memory."""
        data = Dataframe.open_csv(self.dataset).collect()
        rows, cols = data.shape
        log.info("Loaded %s: %d rows, %d columns", self.dataset, rows, cols)
        return data

    def run(self, data: Dataframe | None = None) -> list[StepResult]:
        """Compute the result of every step.

        :param data: The already loaded dataset, when omitted
                     the dataset is read from the CSV file.
        :raises LessonStepError: when any of the steps fails.
        """
        if data is None:
            data = self.load()

        results = []
        for step in self.steps:
            started = time.perf_counter()
            try:
                result = step.transform(data)
                if not isinstance(result, Dataframe):
                    raise TypeError(
                        f"Expected the step to return a Dataframe, got {type(result).__name__}"
                    )
                table = result.to_arrow()
            except Exception as e:
                raise LessonStepError(step.title, e) from e
            duration = time.perf_counter() - started
            log.info(
                "Step %r: %d rows, %d columns in %.3fs",
                step.title,
                table.num_rows,
                table.num_columns,
                duration,
            )
            results.append(StepResult(step, table, duration))
        return results
