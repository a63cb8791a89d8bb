"""The data wrangling lesson.

Walks through the verbs of the dataframe grammar
using a small dataset of animals captured in the field plots
of a long term ecological survey.

Each row of the dataset is an animal, with the date of the capture,
the plot where it was captured, its species, sex and measurements.
Some animals could not be weighted or sexed, so the dataset
contains missing values.
"""

from importlib import resources

import pyarrow.compute as pc

from ..dataframe import (
    FunctionCallExpression,
    col,
    ends_with,
    exclude,
    mean,
    min_,
    n,
    starts_with,
)
from .document import Lesson

INTRODUCTION = """
Wrangling data means getting it in the shape required by an analysis:
picking the columns and rows that matter, deriving new values,
summarizing groups of observations and reshaping tables.
Every step of this lesson starts from the same survey data
and shows one of those operations.
"""


def surveys_dataset() -> str:
    """Path of the bundled survey dataset."""
    return str(resources.files(__package__).joinpath("data", "surveys.csv"))


def wrangling_lesson(dataset: str | None = None) -> Lesson:
    """Build the data wrangling lesson.

    :param dataset: Path of a CSV file with the same columns
                    of the bundled survey dataset, defaults to it.
    """
    lesson = Lesson(
        "Wrangling survey data",
        dataset or surveys_dataset(),
        introduction=INTRODUCTION,
    )

    @lesson.step(
        "Selecting columns",
        "Use select() to keep only some of the columns, in the order they are listed.",
    )
    def selecting_columns(surveys):
        return surveys.select("plot_id", "species_id", "weight")

    @lesson.step(
        "Selecting columns by pattern",
        "Instead of listing columns one by one, helpers can pick them by their name.",
    )
    def selecting_by_pattern(surveys):
        return surveys.select("species_id", starts_with("hind"), ends_with("weight"))

    @lesson.step(
        "Excluding columns",
        "exclude() keeps every column except the ones provided.",
    )
    def excluding_columns(surveys):
        return surveys.select(exclude("record_id", "month", "day", "taxa", "plot_type"))

    @lesson.step(
        "Filtering rows",
        "Use filter() to keep only the rows that satisfy a condition.",
    )
    def filtering_rows(surveys):
        return surveys.filter(FunctionCallExpression(pc.equal, col("year"), 1995))

    @lesson.step(
        "Combining conditions",
        "When multiple conditions are provided, rows must satisfy all of them. "
        "Rows where the weight is missing can't be compared, so they are dropped.",
    )
    def combining_conditions(surveys):
        return surveys.filter(
            FunctionCallExpression(pc.greater_equal, col("year"), 1996),
            FunctionCallExpression(pc.less, col("weight"), 30),
        ).select("year", "species_id", "weight")

    @lesson.step(
        "Creating new columns",
        "mutate() computes new columns from the existing ones.",
    )
    def creating_columns(surveys):
        return surveys.mutate(
            weight_kg=FunctionCallExpression(pc.divide, col("weight"), 1000.0)
        ).select("species_id", "weight", "weight_kg")

    @lesson.step(
        "Sorting rows",
        "arrange() sorts rows, a leading minus sorts in descending order. "
        "Missing values always end up last.",
    )
    def sorting_rows(surveys):
        return surveys.select("species_id", "sex", "weight").arrange("-weight")

    @lesson.step(
        "Renaming columns",
        "rename() gives columns a new name, written as new_name=\"old_name\".",
    )
    def renaming_columns(surveys):
        return surveys.select("species_id", "hindfoot_length").rename(
            hindfoot="hindfoot_length"
        )

    @lesson.step(
        "Summarizing groups",
        "group_by() followed by summarize() reduces each group to a single row. "
        "A single missing weight makes the mean of the whole group missing.",
    )
    def summarizing_groups(surveys):
        return surveys.group_by("sex").summarize(mean_weight=mean("weight"))

    @lesson.step(
        "Ignoring missing values",
        "Missing values can be removed before summarizing, "
        "or skipped by the summary functions with na_rm=True.",
    )
    def ignoring_missing_values(surveys):
        return (
            surveys.filter(FunctionCallExpression(pc.is_valid, col("sex")))
            .group_by("sex", "species_id")
            .summarize(
                mean_weight=mean("weight", na_rm=True),
                min_weight=min_("weight", na_rm=True),
                n=n(),
            )
        )

    @lesson.step(
        "Counting observations",
        "count() is a shortcut to count the rows of each group.",
    )
    def counting_observations(surveys):
        return surveys.count("genus", sort=True)

    @lesson.step(
        "Distinct values",
        "distinct() provides each combination of values only once.",
    )
    def distinct_values(surveys):
        return surveys.distinct("plot_id", "plot_type")

    @lesson.step(
        "Reshaping to a wide table",
        "pivot_wider() turns the values of a column into new columns, "
        "here one column for each genus with its mean weight in each plot.",
    )
    def reshaping_wider(surveys):
        return (
            surveys.filter(FunctionCallExpression(pc.is_valid, col("weight")))
            .group_by("plot_id", "genus")
            .summarize(mean_weight=mean("weight"))
            .pivot_wider(names_from="genus", values_from="mean_weight")
        )

    @lesson.step(
        "Reshaping to a long table",
        "pivot_longer() does the opposite, turning columns back into rows.",
    )
    def reshaping_longer(surveys):
        wide = (
            surveys.filter(FunctionCallExpression(pc.is_valid, col("weight")))
            .group_by("plot_id", "genus")
            .summarize(mean_weight=mean("weight"))
            .pivot_wider(names_from="genus", values_from="mean_weight")
        )
        return wide.pivot_longer(
            exclude("plot_id"), names_to="genus", values_to="mean_weight"
        )

    return lesson
