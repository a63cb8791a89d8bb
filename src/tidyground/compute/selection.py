"""Pipeline nodes that implement projection of columns.

A common request when wrangling data is to select specific columns,
give them better names and derive new columns from expressions.
An example is the ``SELECT`` clause in SQL queries
or the ``select``, ``rename`` and ``mutate`` verbs of dataframe grammars.

This module implements the basic projection capabilities.
"""

from typing import Iterator

import pyarrow as pa

from .base import QueryPlanNode
from .expressions import Expression


class ProjectNode(QueryPlanNode):
    """Project data by selecting specific columns and computing expressions.

    The projection expects a list of column names to select and a dictionary
    of column names and expressions to project new columns.

    >>> import pyarrow as pa
    >>> import pyarrow.compute as pc
    >>> from tidyground.compute import col, FunctionCallExpression, PyArrowTableDataSource
    >>> data = pa.record_batch({"a": [1, 2, 3], "b": [4, 5, 6]})
    >>> next(ProjectNode(["a"], {"ab_sum": FunctionCallExpression(pc.add, col("a"), col("b"))},
    ...                  PyArrowTableDataSource(data)).batches())
    pyarrow.RecordBatch
    a: int64
    ab_sum: int64
    ----
    a: [1,2,3]
    ab_sum: [5,7,9]
    """

    def __init__(
        self,
        select: list[str] | None,
        project: dict[str, Expression] | None,
        child: QueryPlanNode,
    ) -> None:
        """
        :param select: The list of column names to select.
                       ``None`` means select all columns.
                       ``[]`` means select only the projected columns.
        :param project: The dict {name: Expression} to project new columns.
        :param child: The node emitting the data to be projected.
        """
        self.select = select
        self.project = project or {}
        self.child = child

        if self.select is None:
            # No selection was provided, we will select all columns
            self.restrict_columns = None
        else:
            # This is the list of columns we want to keep,
            # in case select=[] it will only provide the project columns.
            self.restrict_columns = self.select + [
                name for name in self.project if name not in self.select
            ]

    def __str__(self) -> str:
        return f"ProjectNode(select={self.select}, project={self.project}, child={self.child})"

    def batches(self) -> Iterator[pa.RecordBatch]:
        """Apply the projection to the child node.

        For each recordbatch yielded by the child node,
        sequentially apply the expressions to project new columns
        and then select the requested columns.

        Projecting a name that already exists replaces
        the existing column in place, so that ``mutate``
        can overwrite a column without moving it.
        """
        for batch in self.child.batches():
            for name, expr in self.project.items():
                values = expr.apply(batch)
                if isinstance(values, pa.Scalar):
                    # Literals have to be broadcast to the length of the batch.
                    values = pa.repeat(values, batch.num_rows)
                if name in batch.column_names:
                    batch = batch.set_column(
                        batch.schema.get_field_index(name), name, values
                    )
                else:
                    batch = batch.append_column(name, values)

            if self.restrict_columns is not None:
                batch = batch.select(self.restrict_columns)

            yield batch


class RenameNode(QueryPlanNode):
    """Rename columns without altering their data or position.

    >>> import pyarrow as pa
    >>> from tidyground.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"a": [1, 2, 3], "b": [4, 5, 6]})
    >>> next(RenameNode({"a": "first"}, PyArrowTableDataSource(data)).batches()).column_names
    ['first', 'b']
    """

    def __init__(self, mapping: dict[str, str], child: QueryPlanNode) -> None:
        """
        :param mapping: The dict {old_name: new_name} of columns to rename.
        :param child: The node emitting the data to be renamed.
        """
        self.mapping = mapping
        self.child = child

    def __str__(self) -> str:
        return f"RenameNode(mapping={self.mapping}, child={self.child})"

    def batches(self) -> Iterator[pa.RecordBatch]:
        """Rename the columns of each batch emitted by the child node."""
        for batch in self.child.batches():
            missing = [name for name in self.mapping if name not in batch.column_names]
            if missing:
                raise KeyError(f"Cannot rename missing columns: {missing}")
            yield batch.rename_columns(
                [self.mapping.get(name, name) for name in batch.column_names]
            )
