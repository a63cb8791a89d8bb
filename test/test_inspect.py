import pyarrow.compute as pc
import pytest

from tidyground.dataframe import Dataframe
from tidyground.utils.inspect import get_body_source, get_qualname


def register(func):
    return func


class Surveys:
    def weigh(self):
        pass


def test_get_qualname_function():
    assert get_qualname(get_body_source) == "tidyground.utils.inspect.get_body_source"


def test_get_qualname_pyarrow_function():
    assert get_qualname(pc.equal) == "pyarrow.compute.equal"


def test_get_qualname_bound_method():
    assert get_qualname(Surveys().weigh) == f"{__name__}.Surveys.weigh"


def test_get_qualname_class():
    assert get_qualname(Dataframe) == "tidyground.dataframe.dataframe.Dataframe"


def test_get_body_source():
    def selecting(surveys):
        return surveys.select("plot_id", "species_id", "weight")

    assert get_body_source(selecting) == (
        'return surveys.select("plot_id", "species_id", "weight")'
    )


def test_get_body_source_skips_decorators_and_docstring():
    @register
    def filtering(
        surveys,
    ):
        """Keep the observations of a single year."""
        # Only 1995
        recent = surveys.filter(year=1995)
        return recent

    assert get_body_source(filtering).splitlines() == [
        "# Only 1995",
        "recent = surveys.filter(year=1995)",
        "return recent",
    ]


def test_get_body_source_only_docstring():
    def nothing(surveys):
        """Nothing to show."""

    assert get_body_source(nothing) == ""


def test_get_body_source_not_a_function():
    with pytest.raises(TypeError):
        get_body_source(42)


def test_get_body_source_lambda():
    heavy = lambda surveys: surveys.filter(weight=50)  # noqa: E731

    assert get_body_source(heavy) == "surveys.filter(weight=50)"


def test_get_body_source_lambda_on_continuation_line():
    steps = dict(
        a=1, heaviest=lambda surveys: surveys.arrange("-weight"))

    assert 'surveys.arrange("-weight")' in get_body_source(steps["heaviest"])
