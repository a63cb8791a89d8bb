"""Base classes and interfaces for Compute Engine

This module defines the base components that are
necessary to represent a transformation pipeline and execute it.
"""

import abc
import math
from typing import Any, Iterator

import pyarrow as pa


class QueryPlanNode(abc.ABC):
    """A node of a transformation pipeline.

    The pipeline is represented as a tree
    of nodes. Each node is a step in the execution
    and all previous steps are children of the
    last one.

    For example a simple pipeline might involve
    loading data and filtering it::

        CSVDataSource -> FilterNode(predicate)

    That would be a pipeline where the last step
    is filtering, and the CSVDataSource is a child
    of the filter node.

    Each Node accepts :class:`pyarrow.RecordBatch`
    data as its input and emits a new
    :class:`pyarrow.RecordBatch` as its output.

    The base `QueryPlanNode` class does nothing
    and purely acts as the interface that all nodes
    must implement. Actual work will be done
    in the subclasses.

    For example a simple node that takes data
    and just forwards it as is after printing
    its content can be implemented as::

        class DebugDataNode(QueryPlanNode):
            def __init__(self, child):
                self.child = child

            def batches(self):
                for b in self.child.batches():
                    print(b)
                    yield b

            def __str__(self):
                return f"DebugDataNode()"
    """

    RecordBatchesGenerator = Iterator[pa.RecordBatch]

    @abc.abstractmethod
    def batches(self) -> RecordBatchesGenerator:
        """Emits the batches for the next node.

        Each node is expected to be able to
        generate data that has to be provided to the next
        node in the pipeline.

        Usually this happens by consuming data from its
        child nodes, transforming it somehow, and yielding
        it back to the next consumer.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the node."""
        ...


class Expression(abc.ABC):
    """Expression to apply to a RecordBatch.

    Expressions are some form of operation that
    has to be applied to the data of a :class:`pyarrow.RecordBatch`
    to create new data.

    Typical example of expressions are: ``weight / 1000``
    which is expected to divide column ``weight`` of the RecordBatch
    by a constant and return the result.

    As the engine is Column Major, applying an expression
    usually results in a new column, thus in a
    :class:`pyarrow.Array` that contains the data
    for that column. Literals are the exception as they
    resolve to a :class:`pyarrow.Scalar` that compute
    functions broadcast against the other arguments.
    """

    @abc.abstractmethod
    def apply(self, batch: pa.RecordBatch) -> pa.Array | pa.Scalar:
        """Apply the expression to a RecordBatch.

        Expression classes must implement this method
        to dictate what will happen when an expression
        is applied.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the expression."""
        ...

    def __repr__(self) -> str:
        return str(self)


class ColumnRef(Expression):
    """References a column in a record batch.

    When another expression or the engine need
    to operate on a specific column, we will
    need a way to reference that column and its data.

    This expression is aware of the column and when
    applied to a record batch returns the data for
    that column.
    """

    def __init__(self, name: str) -> None:
        """
        :param name: The name of the column being referenced.
        """
        self.name = name

    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        """Get the data for the column."""
        return batch.column(self.name)

    def __str__(self) -> str:
        return f"ColumnRef({self.name})"


class Literal(Expression):
    """A constant value.

    Applying a literal ignores the batch content
    and returns the value as a :class:`pyarrow.Scalar`.
    """

    def __init__(self, value: Any) -> None:
        """
        :param value: The python value of the literal.
        """
        self.value = value

    def apply(self, batch: pa.RecordBatch) -> pa.Scalar:
        """Get the value as an arrow scalar."""
        return pa.scalar(self.value)

    def __str__(self) -> str:
        return f"Literal({self.value!r})"


col = ColumnRef
lit = Literal


def python_values(values: pa.Array | pa.ChunkedArray) -> list[Any]:
    """The values of an array as python objects usable as keys.

    Arrow considers all NaN values equal, while python compares
    every NaN as different from any other. Each NaN is replaced
    by :data:`math.nan` itself, so that all of them are the same object
    and fall in the same group or set entry.

    >>> python_values(pa.array([float("nan"), 1.0, float("nan")]))
    [nan, 1.0, nan]
    """
    return [
        math.nan if isinstance(v, float) and math.isnan(v) else v
        for v in values.to_pylist()
    ]
