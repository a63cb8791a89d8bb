"""Summary functions for ``summarize``.

Each function returns the compute engine aggregation
that computes the summary, so that summaries
can be written as::

    df.group_by("sex").summarize(mean_weight=mean("weight", na_rm=True), n=n())

Unless ``na_rm=True`` is provided, missing values propagate:
the summary of a group with a missing value is missing too.
"""

from ..compute.aggregate import (
    Aggregation,
    CountAggregation,
    CountDistinctAggregation,
    MaxAggregation,
    MeanAggregation,
    MinAggregation,
    StdDevAggregation,
    SumAggregation,
)


def n() -> Aggregation:
    """Number of rows in each group."""
    return CountAggregation()


def n_distinct(column: str, na_rm: bool = False) -> Aggregation:
    """Number of different values of ``column`` in each group."""
    return CountDistinctAggregation(column, skip_nulls=na_rm)


def mean(column: str, na_rm: bool = False) -> Aggregation:
    """Arithmetic mean of ``column``."""
    return MeanAggregation(column, skip_nulls=na_rm)


def sd(column: str, na_rm: bool = False) -> Aggregation:
    """Sample standard deviation of ``column``."""
    return StdDevAggregation(column, skip_nulls=na_rm)


def sum_(column: str, na_rm: bool = False) -> Aggregation:
    return SumAggregation(column, skip_nulls=na_rm)


def min_(column: str, na_rm: bool = False) -> Aggregation:
    return MinAggregation(column, skip_nulls=na_rm)


def max_(column: str, na_rm: bool = False) -> Aggregation:
    return MaxAggregation(column, skip_nulls=na_rm)
