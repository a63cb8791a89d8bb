"""The Dataframe object itself."""
import logging
from typing import Any, Self

import pyarrow as pa

from ..compute import (
  AggregateNode,
  CountAggregation,
  CSVDataSource,
  FilterNode,
  PaginateNode,
  PivotLongerNode,
  PivotWiderNode,
  ProjectNode,
  PyArrowTableDataSource,
  RenameNode,
  SortNode,
  lit,
)
from ..compute.aggregate import Aggregation
from ..compute.base import QueryPlanNode
from ..compute.expressions import Expression
from ..utils import tabulate
from .selectors import ColumnNotFoundError, ColumnSelector, resolve_selection

log = logging.getLogger(__name__)


class Dataframe:
  """Data structure that handles data in rows and columns.

  The Dataframe object allows to represent in-memory data
  and perform transformations over it through a set of verbs
  (``select``, ``filter``, ``mutate``, ``arrange``, ``summarize``...).

  Each verb returns a new Dataframe and never modifies
  the one it was invoked on, so verbs can be chained::

    Dataframe.open_csv("surveys.csv") \\
      .filter(FunctionCallExpression(pc.equal, col("year"), 1995)) \\
      .select("species_id", "sex", "weight") \\
      .collect()

  The tidyground dataframe object is lazy, which means that
  any transformation or analysis will be applied only when the
  ``.collect()`` method will be invoked and no data is kept
  in memory until that moment (unless it already was).
  """
  def __init__(self, node_or_table: QueryPlanNode | pa.Table | pa.RecordBatch) -> None:
    """
    :param node_or_table: A compute engine node expected to emit
                          the data for the dataframe or a `pyarrow.Table`.
    """
    if isinstance(node_or_table, (pa.Table, pa.RecordBatch)):
      node_or_table = PyArrowTableDataSource(node_or_table)

    if not isinstance(node_or_table, QueryPlanNode):
      raise ValueError("Invalid input, expected a QueryPlanNode or a PyArrow Table")

    self.node = node_or_table

  @classmethod
  def open_csv(cls, filename: str) -> Self:
    """Open a CSV file and create a Dataframe out of its data.

    :param filename: The path to a local CSV file.
    """
    return cls(CSVDataSource(filename))

  def __repr__(self) -> str:
    return f"Dataframe({self.node})"

  def __str__(self) -> str:
    return self.preview()

  @property
  def schema(self) -> pa.Schema:
    """The columns of the dataframe and their types.

    Only the first batch of data is computed
    to know the resulting schema.
    """
    try:
      return next(PaginateNode(0, 0, self.node).batches()).schema
    except StopIteration:
      return pa.schema([])

  @property
  def columns(self) -> list[str]:
    """The names of the columns in the dataframe."""
    return self.schema.names

  @property
  def shape(self) -> tuple[int, int]:
    """Number of rows and columns of the dataframe."""
    table = self.to_arrow()
    return table.num_rows, table.num_columns

  def select(self, *selectors: ColumnSelector | str) -> Self:
    """Keep only the selected columns.

    :param selectors: Column names or selectors like :func:`starts_with`.
    """
    columns = resolve_selection(selectors, self.columns)
    return self.__class__(ProjectNode(columns, None, self.node))

  def filter(self, *predicates: Expression) -> Self:
    """Apply a filter to the data and return a new Dataframe.

    The returned dataframe will only contain the data that
    matches the filter predicate. When multiple predicates
    are provided, rows must match all of them.

    :param predicates: The expressions representing the predicates.
                       for example `weight > 50`.
    """
    if not predicates:
      raise ValueError("At least one predicate is required")

    node = self.node
    for predicate in predicates:
      node = FilterNode(predicate, node)
    return self.__class__(node)

  def mutate(self, **expressions: Expression | Any) -> Self:
    """Add new columns or replace existing ones.

    Values that are not expressions are treated as literals
    and repeated for every row.

    :param expressions: The new columns in the form ``name=expression``.
    """
    project = {
      name: expr if isinstance(expr, Expression) else lit(expr)
      for name, expr in expressions.items()
    }
    return self.__class__(ProjectNode(None, project, self.node))

  def rename(self, **renames: str) -> Self:
    """Rename columns, in the form ``new_name="old_name"``."""
    return self.__class__(
      RenameNode({old: new for new, old in renames.items()}, self.node)
    )

  def arrange(self, *keys: str) -> Self:
    """Sort rows by the provided columns.

    Prefix a column name with ``-`` to sort it in descending order.
    Missing values are always sorted last.
    """
    if not keys:
      raise ValueError("At least one column to sort by is required")

    columns = [k[1:] if k.startswith("-") else k for k in keys]
    descending = [k.startswith("-") for k in keys]
    self._check_columns(columns)
    return self.__class__(SortNode(columns, descending, self.node))

  def head(self, n: int = 6) -> Self:
    """Keep only the first ``n`` rows."""
    return self.__class__(PaginateNode(0, n, self.node))

  def distinct(self, *columns: str) -> Self:
    """Keep one row for each distinct combination of values.

    :param columns: The columns to consider, all of them when omitted.
    """
    columns = list(columns) or self.columns
    self._check_columns(columns)
    return self.__class__(AggregateNode(columns, {}, self.node))

  def group_by(self, *columns: str) -> "GroupedDataframe":
    """Group rows by one or more columns.

    The grouping affects how the next :meth:`GroupedDataframe.summarize`
    or :meth:`GroupedDataframe.count` are computed.
    """
    if not columns:
      raise ValueError("At least one column to group by is required")
    self._check_columns(columns)
    return GroupedDataframe(self, list(columns))

  def summarize(self, **aggregations: Aggregation) -> Self:
    """Reduce the whole dataframe to a single row of summaries."""
    return self.__class__(AggregateNode([], aggregations, self.node))

  def count(self, *columns: str, name: str = "n", sort: bool = False) -> Self:
    """Count the rows for each distinct combination of ``columns``.

    :param name: The name of the column with the counts.
    :param sort: Provide the most frequent combinations first.
    """
    if columns:
      return self.group_by(*columns).count(name=name, sort=sort)
    return self.summarize(**{name: CountAggregation()})

  def pivot_longer(
    self,
    columns: list[ColumnSelector | str] | ColumnSelector | str,
    names_to: str = "name",
    values_to: str = "value",
    values_drop_na: bool = False,
  ) -> Self:
    """Turn columns into rows, making the data longer.

    :param columns: The columns to pivot, as names or selectors.
    :param names_to: The column where the names of pivoted columns will be stored.
    :param values_to: The column where the values of pivoted columns will be stored.
    :param values_drop_na: Drop the rows where the value is missing.
    """
    if not isinstance(columns, list):
      columns = [columns]
    selected = resolve_selection(columns, self.columns)
    return self.__class__(
      PivotLongerNode(
        selected,
        self.node,
        names_to=names_to,
        values_to=values_to,
        values_drop_na=values_drop_na,
      )
    )

  def pivot_wider(
    self,
    names_from: str,
    values_from: str,
    id_cols: list[str] | None = None,
    values_fill: Any = None,
  ) -> Self:
    """Turn rows into columns, making the data wider.

    :param names_from: The column whose values become the new column names.
    :param values_from: The column whose values fill the new columns.
    :param id_cols: The columns identifying each row, all the others when omitted.
    :param values_fill: The value to use for missing combinations.
    """
    self._check_columns([names_from, values_from] + list(id_cols or []))
    return self.__class__(
      PivotWiderNode(
        names_from, values_from, self.node, id_columns=id_cols, values_fill=values_fill
      )
    )

  def collect(self) -> Self:
    """Collect all data of the dataframe in memory.

    Returns a new Dataframe that has all data from the
    previous dataframe eagerly loaded in memory.
    """
    return self.__class__(self.to_arrow())

  def to_arrow(self) -> pa.Table:
    """Collect all the data and return a pyarrow.Table"""
    batches = list(self.node.batches())
    if not batches:
      return pa.table({})
    return pa.Table.from_batches(batches)

  def preview(self, rows: int = 10, float_digits: int = 2) -> str:
    """Format the first ``rows`` rows of the dataframe as a text table."""
    table = self.to_arrow()
    return f"A table: {table.num_rows} x {table.num_columns}\n" + tabulate.tabulate(
      table, max_rows=rows, float_digits=float_digits
    )

  def _check_columns(self, columns: list[str] | tuple[str, ...]) -> None:
    available = self.columns
    for column in columns:
      if column not in available:
        raise ColumnNotFoundError(
          f"Column {column!r} doesn't exist, available columns: {available}"
        )


class GroupedDataframe:
  """A Dataframe whose rows were partitioned in groups.

  Grouped dataframes only support verbs that
  take the groups into account, use :meth:`ungroup`
  to get back the original dataframe.
  """
  def __init__(self, dataframe: Dataframe, keys: list[str]) -> None:
    """
    :param dataframe: The dataframe being grouped.
    :param keys: The columns defining the groups.
    """
    self.dataframe = dataframe
    self.keys = keys

  def __repr__(self) -> str:
    return f"GroupedDataframe(keys={self.keys}, {self.dataframe!r})"

  def summarize(self, **aggregations: Aggregation) -> Dataframe:
    """Reduce each group to a single row of summaries.

    The result has one row per group, with the grouping
    columns first and then one column per summary.
    """
    log.debug("Summarizing groups %s with %s", self.keys, aggregations)
    return self.dataframe.__class__(
      AggregateNode(self.keys, aggregations, self.dataframe.node)
    )

  def count(self, name: str = "n", sort: bool = False) -> Dataframe:
    """Count the rows in each group.

    :param name: The name of the column with the counts.
    :param sort: Provide the largest groups first.
    """
    counted = self.summarize(**{name: CountAggregation()})
    if sort:
      counted = counted.arrange(f"-{name}")
    return counted

  def ungroup(self) -> Dataframe:
    """Get back the dataframe without groups."""
    return self.dataframe
