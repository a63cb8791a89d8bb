"""Dataframe library built on top of tidyground.

A dataframe library is a tool designed to handle and manipulate structured data,
typically in the form of tables (i.e., rows and columns).
It allows users to load data from various sources (like CSV files),
explore it, apply transformations, and analyze it.

Dataframe grammars describe the most common transformations
as a small set of verbs that can be chained one after the other:

* ``select`` picks columns (projection)
* ``filter`` picks rows (predicate filtering)
* ``mutate`` computes new columns
* ``arrange`` sorts rows
* ``group_by`` + ``summarize`` reduce groups of rows to summaries
* ``pivot_longer`` and ``pivot_wider`` reshape the data

Every verb is implemented as a node of the tidyground compute engine,
see :mod:`tidyground.compute` for the details of how they work.
"""

from ..compute import FunctionCallExpression, col, lit
from .dataframe import Dataframe, GroupedDataframe
from .selectors import (
    ColumnNotFoundError,
    contains,
    ends_with,
    everything,
    exclude,
    matches,
    starts_with,
)
from .summaries import max_, mean, min_, n, n_distinct, sd, sum_

__all__ = (
    "Dataframe",
    "GroupedDataframe",
    "ColumnNotFoundError",
    "FunctionCallExpression",
    "col",
    "lit",
    "contains",
    "ends_with",
    "everything",
    "exclude",
    "matches",
    "starts_with",
    "max_",
    "mean",
    "min_",
    "n",
    "n_distinct",
    "sd",
    "sum_",
)
