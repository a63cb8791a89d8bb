"""The tidyground Compute Engine

The compute engine defines the in-memory
format for transformation pipelines and the nodes
supported.

The compute engine is tightly bound to Apache Arrow,
thus the engine will expect to always deal with
:class:`pyarrow.RecordBatch` and emit a new RecordBatch
as the result of the node execution.

This allows to easily build pipelines like::

    (RecordBatch)-->Node1--(RecordBatch)-->Node2--(RecordBatch)-->...

The nodes themselves are in charge of their execution,
this keeps the behavior near to the node and thus makes easy to
know how a Node is actually executed without having to look around too much.

Building a pipeline requires to combine the nodes that we want
to be executed starting with a ``DataSource`` node as the
leaf node of the pipeline:

>>> import pyarrow as pa
>>> data = pa.table({
...    "animals": pa.array(["Flamingo", "Horse", "Brittle stars", "Centipede"]),
...    "n_legs": pa.array([2, 4, 5, 100])
... })
>>>
>>> import pyarrow.compute as pc
>>> from tidyground.compute import col, PyArrowTableDataSource
>>> from tidyground.compute import FilterNode, FunctionCallExpression
>>> # keep the animals with 5 or more legs
>>> pipeline = FilterNode(
...     FunctionCallExpression(pc.greater_equal, col("n_legs"), 5),
...     child=PyArrowTableDataSource(
...         data
...     )
... )
>>> for data in pipeline.batches():
...     print(data)
pyarrow.RecordBatch
animals: string
n_legs: int64
----
animals: ["Brittle stars","Centipede"]
n_legs: [5,100]

Most users will not build pipelines by hand,
but through the verbs of :class:`tidyground.dataframe.Dataframe`.
"""

from .aggregate import (
    AggregateNode,
    CountAggregation,
    CountDistinctAggregation,
    MaxAggregation,
    MeanAggregation,
    MinAggregation,
    StdDevAggregation,
    SumAggregation,
)
from .base import ColumnRef, Literal, col, lit
from .datasources import CSVDataSource, PyArrowTableDataSource
from .expressions import FunctionCallExpression
from .filtering import FilterNode
from .pagination import PaginateNode
from .reshape import PivotLongerNode, PivotWiderNode
from .selection import ProjectNode, RenameNode
from .sorting import SortNode

__all__ = (
    "CSVDataSource",
    "PyArrowTableDataSource",
    "FilterNode",
    "FunctionCallExpression",
    "col",
    "lit",
    "ColumnRef",
    "Literal",
    "PaginateNode",
    "SortNode",
    "ProjectNode",
    "RenameNode",
    "PivotLongerNode",
    "PivotWiderNode",
    "AggregateNode",
    "CountAggregation",
    "CountDistinctAggregation",
    "MaxAggregation",
    "MeanAggregation",
    "MinAggregation",
    "StdDevAggregation",
    "SumAggregation",
)
