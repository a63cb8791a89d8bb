import pytest
from pydantic import ValidationError

from tidyground.config import RenderSettings, load_settings


def test_defaults():
    settings = load_settings(environ={})
    assert settings == RenderSettings(
        output_format="markdown", theme="default", preview_rows=10, float_digits=2
    )


def test_environment():
    settings = load_settings(
        environ={
            "TIDYGROUND_FORMAT": "html",
            "TIDYGROUND_THEME": "darkly",
            "TIDYGROUND_ROWS": "5",
            "TIDYGROUND_DIGITS": "3",
            "UNRELATED": "value",
        }
    )
    assert settings.output_format == "html"
    assert settings.theme == "darkly"
    assert settings.preview_rows == 5
    assert settings.float_digits == 3


def test_overrides_win_over_environment():
    settings = load_settings(
        {"theme": "flatly", "preview_rows": None},
        environ={"TIDYGROUND_THEME": "darkly", "TIDYGROUND_ROWS": "5"},
    )
    assert settings.theme == "flatly"
    assert settings.preview_rows == 5


def test_empty_environment_values_are_ignored():
    assert load_settings(environ={"TIDYGROUND_ROWS": ""}).preview_rows == 10


@pytest.mark.parametrize(
    "overrides",
    [
        {"output_format": "pdf"},
        {"theme": "solarized"},
        {"preview_rows": 0},
        {"preview_rows": "many"},
        {"float_digits": -1},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(ValidationError):
        load_settings(overrides, environ={})


def test_settings_are_immutable():
    settings = RenderSettings()
    with pytest.raises(ValidationError):
        settings.preview_rows = 20
