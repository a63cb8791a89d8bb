import pyarrow as pa
import pytest

from tidyground.compute import PivotLongerNode, PivotWiderNode, PyArrowTableDataSource
from tidyground.compute.reshape import common_type

WIDE_DATA = pa.table(
    {
        "plot_id": [1, 2, 3],
        "Dipodomys": [41.5, 44.0, None],
        "Onychomys": [25.0, None, 26.5],
    }
)

LONG_DATA = pa.table(
    {
        "plot_id": [1, 1, 2, 3],
        "genus": ["Dipodomys", "Onychomys", "Dipodomys", "Onychomys"],
        "mean_weight": [41.5, 25.0, 44.0, 26.5],
    }
)


def test_pivot_longer():
    node = PivotLongerNode(
        ["Dipodomys", "Onychomys"],
        PyArrowTableDataSource(WIDE_DATA),
        names_to="genus",
        values_to="mean_weight",
    )
    result = pa.Table.from_batches(node.batches())
    assert result.to_pydict() == {
        "plot_id": [1, 1, 2, 2, 3, 3],
        "genus": ["Dipodomys", "Onychomys"] * 3,
        "mean_weight": [41.5, 25.0, 44.0, None, None, 26.5],
    }


def test_pivot_longer_drop_missing_values():
    node = PivotLongerNode(
        ["Dipodomys", "Onychomys"],
        PyArrowTableDataSource(WIDE_DATA),
        values_drop_na=True,
    )
    result = pa.Table.from_batches(node.batches())
    assert result.column_names == ["plot_id", "name", "value"]
    assert result.column("plot_id").to_pylist() == [1, 1, 2, 3]
    assert result.column("value").to_pylist() == [41.5, 25.0, 44.0, 26.5]


def test_pivot_longer_mixed_types():
    data = pa.table({"id": [1], "count": [3], "mean": [2.5]})
    node = PivotLongerNode(["count", "mean"], PyArrowTableDataSource(data))
    result = pa.Table.from_batches(node.batches())
    assert result.schema.field("value").type == pa.float64()
    assert result.column("value").to_pylist() == [3.0, 2.5]


def test_pivot_longer_missing_column():
    node = PivotLongerNode(["Neotoma"], PyArrowTableDataSource(WIDE_DATA))
    with pytest.raises(KeyError):
        next(node.batches())


@pytest.mark.parametrize(
    "kwargs",
    [
        {"columns": []},
        {"columns": ["Dipodomys"], "names_to": "same", "values_to": "same"},
    ],
)
def test_pivot_longer_invalid_arguments(kwargs):
    with pytest.raises(ValueError):
        PivotLongerNode(child=PyArrowTableDataSource(WIDE_DATA), **kwargs)


def test_pivot_longer_existing_output_column():
    node = PivotLongerNode(
        ["Dipodomys"], PyArrowTableDataSource(WIDE_DATA), names_to="plot_id"
    )
    with pytest.raises(ValueError):
        next(node.batches())


@pytest.mark.parametrize(
    "types, expected",
    [
        ([pa.int64(), pa.int64()], pa.int64()),
        ([pa.int64(), pa.float64()], pa.float64()),
        ([pa.int32(), pa.null()], pa.float64()),
        ([pa.string(), pa.int64()], pa.string()),
    ],
)
def test_common_type(types, expected):
    assert common_type(types) == expected


def test_pivot_wider():
    node = PivotWiderNode("genus", "mean_weight", PyArrowTableDataSource(LONG_DATA))
    result = pa.Table.from_batches(node.batches())
    assert result.to_pydict() == {
        "plot_id": [1, 2, 3],
        "Dipodomys": [41.5, 44.0, None],
        "Onychomys": [25.0, None, 26.5],
    }


def test_pivot_wider_values_fill():
    node = PivotWiderNode(
        "genus", "mean_weight", PyArrowTableDataSource(LONG_DATA), values_fill=0.0
    )
    result = pa.Table.from_batches(node.batches())
    assert result.column("Dipodomys").to_pylist() == [41.5, 44.0, 0.0]
    assert result.column("Onychomys").to_pylist() == [25.0, 0.0, 26.5]


def test_pivot_wider_explicit_id_columns():
    data = LONG_DATA.append_column("year", pa.array([1995, 1996, 1995, 1997]))
    node = PivotWiderNode(
        "genus", "mean_weight", PyArrowTableDataSource(data), id_columns=["plot_id"]
    )
    result = pa.Table.from_batches(node.batches())
    assert result.column_names == ["plot_id", "Dipodomys", "Onychomys"]


def test_pivot_wider_missing_names():
    data = pa.table({"id": [1, 1], "sex": ["F", None], "n": [3, 4]})
    node = PivotWiderNode("sex", "n", PyArrowTableDataSource(data))
    result = pa.Table.from_batches(node.batches())
    assert result.to_pydict() == {"id": [1], "F": [3], "NA": [4]}


def test_pivot_wider_duplicated_values():
    data = pa.table({"id": [1, 1], "sex": ["F", "F"], "n": [3, 4]})
    node = PivotWiderNode("sex", "n", PyArrowTableDataSource(data))
    with pytest.raises(ValueError, match="not uniquely identified"):
        next(node.batches())


def test_pivot_wider_then_longer_restores_observations():
    wider = PivotWiderNode("genus", "mean_weight", PyArrowTableDataSource(LONG_DATA))
    longer = PivotLongerNode(
        ["Dipodomys", "Onychomys"],
        wider,
        names_to="genus",
        values_to="mean_weight",
        values_drop_na=True,
    )
    result = pa.Table.from_batches(longer.batches())
    assert result.equals(LONG_DATA)


def test_pivot_wider_nan_identifiers():
    nan = float("nan")
    data = pa.table({"ratio": [nan, nan, 1.0], "sex": ["F", "M", "F"], "n": [3, 4, 5]})
    node = PivotWiderNode("sex", "n", PyArrowTableDataSource(data))
    result = pa.Table.from_batches(node.batches()).to_pydict()
    assert len(result["ratio"]) == 2
    assert result["F"] == [3, 5]
    assert result["M"] == [4, None]
