"""Pipeline nodes that compute aggregations.

Frequently when analysing data is necessary
to compute statistics like the min, max, average, etc...
of the data stored in datasets.

The aggregate node is in charge of computing
those aggregations and projecting them as new
columns in a pipeline.

Typically the aggregate node will group the data
by a set of columns and then compute the aggregations

For example, given the following data::

    sex, species_id, weight
    F, DM, 40
    M, DM, 48
    F, DO, 52
    M, DO, 46
    F, DM, 38

We could group by sex and compute the mean of the weight
to get::

    sex, mean_weight
    F, 43.33
    M, 47.00

Missing values propagate: unless the aggregation is asked
to skip them, a single missing value in a group makes
the result for that group missing too.
"""

import abc
import math
from typing import Any, Iterator

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, python_values

__all__ = (
    "AggregateNode",
    "Aggregation",
    "SumAggregation",
    "MinAggregation",
    "MaxAggregation",
    "MeanAggregation",
    "StdDevAggregation",
    "CountAggregation",
    "CountDistinctAggregation",
)


class AggregateNode(QueryPlanNode):
    """Group data and compute aggregations.

    Groups are emitted sorted by their keys, with
    missing key values grouped together at the end.

    >>> import pyarrow as pa
    >>> from tidyground.compute import SumAggregation, PyArrowTableDataSource
    >>> data = pa.record_batch({
    ...    'city': pa.array(['New York', 'New York', 'Los Angeles', 'Los Angeles', 'New York']),
    ...    'shop': pa.array(['Shop A', 'Shop B', 'Shop C', 'Shop D', 'Shop E']),
    ...    'n_employees': pa.array([10, 15, 8, 12, 20])
    ... })
    >>> aggregate = AggregateNode(["city"], {"total_employees": SumAggregation("n_employees")}, PyArrowTableDataSource(data))
    >>> next(aggregate.batches())
    pyarrow.RecordBatch
    city: string
    total_employees: int64
    ----
    city: ["Los Angeles","New York"]
    total_employees: [20,45]
    """

    def __init__(
        self,
        keys: list[str],
        aggregations: dict[str, "Aggregation"],
        child: QueryPlanNode,
    ) -> None:
        """
        :param keys: The columns to group by, ``[]`` aggregates the whole data.
        :param aggregations: The aggregations to compute in the form of {"new_col_name": Aggregation}.
        :param child: The child node that will provide the data to aggregate.
        """
        if not keys and not aggregations:
            raise ValueError("At least one key or one aggregation is required")

        self.keys = keys
        self.aggregations = aggregations
        self.child = child

    def __str__(self) -> str:
        return f"AggregateNode(keys={self.keys}, aggregations={self.aggregations}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Group the data of the child node and aggregate each group.

        Aggregations are computed separately for each batch.
        This makes so that we need to keep in memory only one batch
        at the time, and the partial aggregation results, which are far smaller.
        Once all batches were consumed, the partial results are reduced.
        """
        schema = None
        #   chunks_data = {key_tuple: {aggr_name: [partial1, partial2, ...]}}
        chunks_data: dict[tuple, dict[str, list[Any]]] = {}
        for batch in self.child.batches():
            if schema is None:
                schema = batch.schema
            for key, group in self.split_groups(batch):
                partials = chunks_data.setdefault(key, {})
                for name, aggregation in self.aggregations.items():
                    partials.setdefault(name, []).append(
                        aggregation.compute_chunk(group)
                    )

        if schema is None:
            # The child emitted nothing, there is nothing we can describe.
            return

        yield self.reduce_aggregations(chunks_data, schema)

    def split_groups(
        self, batch: pa.RecordBatch
    ) -> Iterator[tuple[tuple, pa.RecordBatch]]:
        """Split a batch in the groups that constitute it.

        Yields ``(key, rows)`` tuples where ``key`` is a tuple
        with the python values of the grouping keys.

        The batch is first sorted by the grouping keys,
        this makes sure that all the values for the same grouping key
        will be sequential. For example::

            F, DM, 38
            F, DM, 40
            F, DO, 52
            M, DM, 48

        so until the key changes we know we are in the same group.
        """
        if not self.keys:
            if batch.num_rows:
                yield (), batch
            return

        # Missing values are sorted last, after NaN.
        sorted_batch = batch.sort_by([(k, "ascending") for k in self.keys])
        key_rows = list(zip(*(python_values(sorted_batch.column(k)) for k in self.keys)))
        chunk_start = 0
        for row_index in range(1, len(key_rows) + 1):
            if row_index == len(key_rows) or key_rows[row_index] != key_rows[chunk_start]:
                # the key has changed, this means we finished a chunk of
                # rows with the same key.
                yield key_rows[chunk_start], sorted_batch.slice(
                    chunk_start, row_index - chunk_start
                )
                chunk_start = row_index

    def reduce_aggregations(
        self, chunks_data: dict[tuple, dict[str, list[Any]]], schema: pa.Schema
    ) -> pa.RecordBatch:
        """Reduce the partial aggregation results to the final aggregation results.

        For example if we had 3 chunks and the chunks_data is::

            {("F",): {"total_weight": [10, 20, 30]}}

        The result will be::

            {"sex": ["F"], "total_weight": [60]}
        """
        # Groups from different batches arrive in no specific order,
        # sort them once more so that the output is sorted by key.
        ordered_keys = sorted(chunks_data, key=_group_sort_key)

        # Computing the aggregations on no data tells us
        # the type of the results even when there are no groups.
        empty_batch = pa.RecordBatch.from_pylist([], schema=schema)

        arrays = []
        for idx, key in enumerate(self.keys):
            arrays.append(
                pa.array([k[idx] for k in ordered_keys], type=schema.field(key).type)
            )
        for aggrname, aggregation in self.aggregations.items():
            result_type = aggregation.reduce([aggregation.compute_chunk(empty_batch)]).type
            values = [
                aggregation.reduce(chunks_data[k][aggrname]).as_py() for k in ordered_keys
            ]
            arrays.append(pa.array(values, type=result_type))

        names = list(self.keys) + list(self.aggregations.keys())
        return pa.RecordBatch.from_arrays(arrays, names=names)


def _group_sort_key(key: tuple) -> tuple:
    """Sort groups by their values, then NaN, then missing values."""
    return tuple(
        (v is None, v is math.nan, 0 if v is None or v is math.nan else v) for v in key
    )


def _concat_scalars(chunks: list[pa.Scalar]) -> pa.Array:
    """Build an array out of the partial results of the chunks."""
    return pa.array([c.as_py() for c in chunks], type=chunks[0].type)


class Aggregation(abc.ABC):
    """Base class for aggregations.

    Every aggregation is expected to implement
    a method to compute any needed intermediate results
    on a single chunk of data and then provide a reduce method
    to combine the intermediate results into a final result.
    """

    def __init__(self, column: str, skip_nulls: bool = False) -> None:
        """
        :param column: The column to aggregate.
        :param skip_nulls: Ignore missing values instead of propagating them.
        """
        self.column = column
        self.skip_nulls = skip_nulls

    def __str__(self) -> str:
        if self.skip_nulls:
            return f"{self.__class__.__name__}({self.column}, skip_nulls=True)"
        return f"{self.__class__.__name__}({self.column})"

    __repr__ = __str__

    @abc.abstractmethod
    def compute_chunk(self, batch: pa.RecordBatch) -> Any: ...

    @abc.abstractmethod
    def reduce(self, chunks: list[Any]) -> pa.Scalar: ...


class SimpleAggregation(Aggregation):
    """Provide a base implementation for simple aggregations like min,max,sum.

    Simple aggregations are those where the function applied to compute
    intermediate results for a single chunk of data is the same as the function
    applied to combine the intermediate results into the final.

    For example ``sum([1, 2, 3])`` is the same as ``sum([sum([1, 2]), 3])``.
    """

    @abc.abstractmethod
    def _aggregate(self, data: pa.Array) -> pa.Scalar: ...

    def compute_chunk(self, batch: pa.RecordBatch) -> pa.Scalar:
        return self._aggregate(batch.column(self.column))

    def reduce(self, chunks: list[pa.Scalar]) -> pa.Scalar:
        return self._aggregate(_concat_scalars(chunks))


class SumAggregation(SimpleAggregation):
    """Compute the sum of an aggregated column.

    The sum of no values is ``0``.
    """

    def _aggregate(self, data: pa.Array) -> pa.Scalar:
        return pc.sum(data, skip_nulls=self.skip_nulls, min_count=0)


class MinAggregation(SimpleAggregation):
    """Compute the min of an aggregated column."""

    def _aggregate(self, data: pa.Array) -> pa.Scalar:
        return pc.min(data, skip_nulls=self.skip_nulls)


class MaxAggregation(SimpleAggregation):
    """Compute the max of an aggregated column."""

    def _aggregate(self, data: pa.Array) -> pa.Scalar:
        return pc.max(data, skip_nulls=self.skip_nulls)


class CountAggregation(Aggregation):
    """Compute the count of an aggregated column.

    This is based on computing the counts for each intermediate batch
    and then sum them to compute the final result.

    When a column is provided only its non missing values are counted,
    otherwise the number of rows is counted.
    """

    def __init__(self, column: str | None = None) -> None:
        super().__init__(column)

    def __str__(self) -> str:
        if self.column is None:
            return f"{self.__class__.__name__}()"
        return super().__str__()

    __repr__ = __str__

    def compute_chunk(self, batch: pa.RecordBatch) -> pa.Scalar:
        """Compute the count of the column in a single batch."""
        if self.column is None:
            return pa.scalar(batch.num_rows, type=pa.int64())
        return pc.count(batch.column(self.column), mode="only_valid")

    def reduce(self, chunks: list[pa.Scalar]) -> pa.Scalar:
        """Sum the counts of all intermediate results to the final count."""
        return pc.sum(_concat_scalars(chunks), min_count=0)


class CountDistinctAggregation(Aggregation):
    """Compute how many different values an aggregated column contains.

    Missing values count as a distinct value unless skipped.
    """

    def compute_chunk(self, batch: pa.RecordBatch) -> set:
        """Collect the unique values of the column in a single batch."""
        return set(python_values(pc.unique(batch.column(self.column))))

    def reduce(self, chunks: list[set]) -> pa.Scalar:
        """Count the distinct values among all intermediate results."""
        distinct = set().union(*chunks)
        if self.skip_nulls:
            distinct.discard(None)
        return pa.scalar(len(distinct), type=pa.int64())


class MeanAggregation(Aggregation):
    """Compute the mean of an aggregated column.

    This is based by computing count and sum of the column
    for each intermediate batch and then dividing
    the sum of all intermediate results by the count
    of all intermediate results.

    The mean is always a floating point value.
    """

    def compute_chunk(self, batch: pa.RecordBatch) -> tuple[int, float, int]:
        """Compute the count, sum and missing values of the column in a single batch."""
        column = pc.cast(batch.column(self.column), pa.float64())
        return (
            pc.count(column).as_py(),
            pc.sum(column, min_count=0).as_py(),
            column.null_count,
        )

    def reduce(self, chunks: list[tuple[int, float, int]]) -> pa.Scalar:
        """Compute the mean of the column from the intermediate sums and counts."""
        count = sum(chunk[0] for chunk in chunks)
        total = sum(chunk[1] for chunk in chunks)
        nulls = sum(chunk[2] for chunk in chunks)
        if count == 0 or (nulls and not self.skip_nulls):
            return pa.scalar(None, type=pa.float64())
        return pa.scalar(total / count, type=pa.float64())


class StdDevAggregation(Aggregation):
    """Compute the sample standard deviation of an aggregated column.

    Each intermediate batch provides the count, the sum and the
    sum of squares of its values, which are enough to compute
    the variance of the whole group.

    Groups with less than two values have no standard deviation.
    """

    def compute_chunk(self, batch: pa.RecordBatch) -> tuple[int, float, float, int]:
        """Compute count, sum, sum of squares and missing values in a single batch."""
        column = pc.cast(batch.column(self.column), pa.float64())
        return (
            pc.count(column).as_py(),
            pc.sum(column, min_count=0).as_py(),
            pc.sum(pc.multiply(column, column), min_count=0).as_py(),
            column.null_count,
        )

    def reduce(self, chunks: list[tuple[int, float, float, int]]) -> pa.Scalar:
        """Combine the partial sums into the standard deviation."""
        count = sum(chunk[0] for chunk in chunks)
        total = sum(chunk[1] for chunk in chunks)
        squares = sum(chunk[2] for chunk in chunks)
        nulls = sum(chunk[3] for chunk in chunks)
        if count < 2 or (nulls and not self.skip_nulls):
            return pa.scalar(None, type=pa.float64())
        variance = max(squares - total * total / count, 0.0) / (count - 1)
        return pa.scalar(math.sqrt(variance), type=pa.float64())
