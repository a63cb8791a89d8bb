import pyarrow as pa
import pyarrow.compute as pc

from tidyground.compute import (
    FilterNode,
    FunctionCallExpression,
    PyArrowTableDataSource,
    col,
    lit,
)

TEST_DATA = pa.table(
    {
        "species_id": ["DM", "DO", "PE", "DM", "OT"],
        "year": [1995, 1995, 1996, 1997, 1996],
        "weight": [42, None, 21, 47, 25],
    }
)


def test_filter_by_equality():
    filter_node = FilterNode(
        FunctionCallExpression(pc.equal, col("species_id"), "DM"),
        PyArrowTableDataSource(TEST_DATA),
    )
    result = pa.Table.from_batches(filter_node.batches())
    assert result.to_pydict() == {
        "species_id": ["DM", "DM"],
        "year": [1995, 1997],
        "weight": [42, 47],
    }


def test_filter_drops_missing_predicate_results():
    filter_node = FilterNode(
        FunctionCallExpression(pc.less, col("weight"), lit(45)),
        PyArrowTableDataSource(TEST_DATA),
    )
    result = pa.Table.from_batches(filter_node.batches())
    assert result.column("species_id").to_pylist() == ["DM", "PE", "OT"]


def test_filter_combined_conditions():
    predicate = FunctionCallExpression(
        pc.and_kleene,
        FunctionCallExpression(pc.greater_equal, col("year"), 1996),
        FunctionCallExpression(pc.greater, col("weight"), 22),
    )
    filter_node = FilterNode(predicate, PyArrowTableDataSource(TEST_DATA))
    result = pa.Table.from_batches(filter_node.batches())
    assert result.column("species_id").to_pylist() == ["DM", "OT"]


def test_filter_keeps_columns_when_nothing_matches():
    filter_node = FilterNode(
        FunctionCallExpression(pc.equal, col("species_id"), "XX"),
        PyArrowTableDataSource(TEST_DATA),
    )
    result = pa.Table.from_batches(filter_node.batches())
    assert result.num_rows == 0
    assert result.column_names == ["species_id", "year", "weight"]


def test_filter_node_str():
    filter_node = FilterNode(
        FunctionCallExpression(pc.equal, col("year"), 1995),
        PyArrowTableDataSource(TEST_DATA),
    )
    assert str(filter_node) == (
        "FilterNode(filter=pyarrow.compute.equal(ColumnRef(year),1995), "
        "child=PyArrowTableDataSource(columns=['species_id', 'year', 'weight'], rows=5))"
    )
