"""Pipeline nodes that reshape data between long and wide layouts.

The same observations can be laid out in two ways.
In the *long* layout each row is a single observation::

    plot_id, genus, mean_weight
    1, Dipodomys, 41.2
    1, Onychomys, 23.0
    2, Dipodomys, 44.5

In the *wide* layout each category becomes a column::

    plot_id, Dipodomys, Onychomys
    1, 41.2, 23.0
    2, 44.5, null

Pivoting wider moves from the first to the second,
pivoting longer goes back from the second to the first.
"""

from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, python_values


def common_type(types: list[pa.DataType]) -> pa.DataType:
    """Find a type able to hold values of all the provided types.

    Identical types are preserved, numbers are
    promoted to floating point and anything else
    is represented as text.
    """
    if all(t == types[0] for t in types):
        return types[0]
    if all(
        pa.types.is_integer(t) or pa.types.is_floating(t) or pa.types.is_null(t)
        for t in types
    ):
        return pa.float64()
    return pa.string()


class PivotLongerNode(QueryPlanNode):
    """Turn columns into rows.

    Each input row is emitted once for every pivoted column,
    with the name of the column in ``names_to`` and its value
    in ``values_to``. All the other columns are preserved
    as identifiers of the observation.

    >>> import pyarrow as pa
    >>> from tidyground.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"plot": [1, 2], "DM": [4, 5], "DO": [6, 7]})
    >>> longer = PivotLongerNode(["DM", "DO"], PyArrowTableDataSource(data), names_to="species")
    >>> next(longer.batches()).to_pydict()
    {'plot': [1, 1, 2, 2], 'species': ['DM', 'DO', 'DM', 'DO'], 'value': [4, 6, 5, 7]}
    """

    def __init__(
        self,
        columns: list[str],
        child: QueryPlanNode,
        names_to: str = "name",
        values_to: str = "value",
        values_drop_na: bool = False,
    ) -> None:
        """
        :param columns: The columns to turn into rows.
        :param child: The node emitting the data to reshape.
        :param names_to: Name of the new column holding the pivoted column names.
        :param values_to: Name of the new column holding the pivoted values.
        :param values_drop_na: Discard the rows where the value is missing.
        """
        if not columns:
            raise ValueError("At least one column to pivot is required")
        if names_to == values_to:
            raise ValueError("names_to and values_to must be different")

        self.columns = columns
        self.names_to = names_to
        self.values_to = values_to
        self.values_drop_na = values_drop_na
        self.child = child

    def __str__(self) -> str:
        return (
            f"PivotLongerNode(columns={self.columns}, names_to={self.names_to}, "
            f"values_to={self.values_to}, {self.child})"
        )

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Reshape each batch emitted by the child node.

        Pivoting longer never needs to look at more than
        one row at the time, so each batch can be reshaped
        on its own.
        """
        for batch in self.child.batches():
            missing = [c for c in self.columns if c not in batch.column_names]
            if missing:
                raise KeyError(f"Cannot pivot missing columns: {missing}")
            id_columns = [c for c in batch.column_names if c not in self.columns]
            if self.names_to in id_columns or self.values_to in id_columns:
                raise ValueError(
                    f"Columns {self.names_to} and {self.values_to} already exist"
                )

            num_rows = batch.num_rows
            num_columns = len(self.columns)
            values_type = common_type(
                [batch.schema.field(c).type for c in self.columns]
            )

            # All the pivoted values are stacked one column after the other,
            # then we pick them row by row: row0col0, row0col1, row1col0...
            stacked_values = pa.concat_arrays(
                [pc.cast(batch.column(c), values_type) for c in self.columns]
            )
            values_indices = pa.array(
                [j * num_rows + i for i in range(num_rows) for j in range(num_columns)],
                type=pa.int64(),
            )
            # Each identifier is repeated once for every pivoted column.
            rows_indices = pa.array(
                [i for i in range(num_rows) for _ in range(num_columns)],
                type=pa.int64(),
            )

            arrays = [pc.take(batch.column(c), rows_indices) for c in id_columns]
            arrays.append(pa.array(self.columns * num_rows, type=pa.string()))
            arrays.append(pc.take(stacked_values, values_indices))
            result = pa.RecordBatch.from_arrays(
                arrays, names=id_columns + [self.names_to, self.values_to]
            )

            if self.values_drop_na:
                result = result.filter(pc.is_valid(result.column(self.values_to)))
            yield result


class PivotWiderNode(QueryPlanNode):
    """Turn rows into columns.

    Every distinct value of ``names_from`` becomes a new column
    holding the ``values_from`` values of the rows that had that name.
    Rows are identified by the ``id_columns``, which by default
    are all the columns that are not being pivoted.

    Combinations that do not exist in the data are
    filled with ``values_fill``.

    >>> import pyarrow as pa
    >>> from tidyground.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"plot": [1, 1, 2], "species": ["DM", "DO", "DM"], "n": [4, 6, 5]})
    >>> wider = PivotWiderNode("species", "n", PyArrowTableDataSource(data), values_fill=0)
    >>> next(wider.batches()).to_pydict()
    {'plot': [1, 2], 'DM': [4, 5], 'DO': [6, 0]}
    """

    def __init__(
        self,
        names_from: str,
        values_from: str,
        child: QueryPlanNode,
        id_columns: list[str] | None = None,
        values_fill: Any = None,
    ) -> None:
        """
        :param names_from: The column providing the names of the new columns.
        :param values_from: The column providing the values of the new columns.
        :param child: The node emitting the data to reshape.
        :param id_columns: The columns identifying each output row,
                           ``None`` means all the other columns.
        :param values_fill: The value used for missing combinations.
        """
        if names_from == values_from:
            raise ValueError("names_from and values_from must be different")

        self.names_from = names_from
        self.values_from = values_from
        self.id_columns = id_columns
        self.values_fill = values_fill
        self.child = child

    def __str__(self) -> str:
        return (
            f"PivotWiderNode(names_from={self.names_from}, values_from={self.values_from}, "
            f"id_columns={self.id_columns}, {self.child})"
        )

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Reshape the data emitted by the child node.

        Differently from pivoting longer, the rows that
        contribute to an output row might be in any batch,
        so all the data has to be loaded in memory before
        it can be reshaped.
        """
        batches = list(self.child.batches())
        if not batches:
            return

        table = pa.Table.from_batches(batches)
        for name in (self.names_from, self.values_from):
            if name not in table.column_names:
                raise KeyError(f"Cannot pivot missing column: {name}")

        if self.id_columns is None:
            id_columns = [
                c
                for c in table.column_names
                if c not in (self.names_from, self.values_from)
            ]
        else:
            id_columns = list(self.id_columns)

        if id_columns:
            id_rows = list(zip(*(python_values(table.column(c)) for c in id_columns)))
        else:
            id_rows = [()] * table.num_rows
        names = table.column(self.names_from).to_pylist()
        values = table.column(self.values_from).to_pylist()

        # Output rows and columns are created in order of first appearance.
        #   rows_positions = {id_row: output_row_index}
        #   new_columns = {column_name: {output_row_index: value}}
        rows_positions: dict[tuple, int] = {}
        new_columns: dict[str, dict[int, Any]] = {}
        for id_row, name, value in zip(id_rows, names, values):
            position = rows_positions.setdefault(id_row, len(rows_positions))
            cells = new_columns.setdefault(_column_name(name), {})
            if position in cells:
                raise ValueError(
                    f"Values are not uniquely identified: {dict(zip(id_columns, id_row))} "
                    f"has more than one value for {name!r}"
                )
            cells[position] = value

        clashing = [name for name in new_columns if name in id_columns]
        if clashing:
            raise ValueError(f"New columns clash with existing ones: {clashing}")

        ids = list(rows_positions)
        arrays = [
            pa.array([r[idx] for r in ids], type=table.schema.field(c).type)
            for idx, c in enumerate(id_columns)
        ]
        values_type = table.schema.field(self.values_from).type
        for cells in new_columns.values():
            arrays.append(
                pa.array(
                    [cells.get(position, self.values_fill) for position in range(len(ids))],
                    type=values_type,
                )
            )
        yield pa.RecordBatch.from_arrays(arrays, names=id_columns + list(new_columns))


def _column_name(value: Any) -> str:
    """Name of the column generated for a pivoted value."""
    if value is None:
        return "NA"
    return str(value)
