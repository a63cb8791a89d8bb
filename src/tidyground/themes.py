"""Cosmetic themes for HTML lessons.

Themes only change how a lesson looks, never what it contains.
Markdown lessons are not affected by themes, their look
is decided by whatever tool displays them.
"""

from pydantic import BaseModel, ConfigDict


class Theme(BaseModel):
    """Colors and fonts of a rendered lesson."""

    model_config = ConfigDict(frozen=True)

    name: str
    background: str
    foreground: str
    accent: str
    code_background: str
    table_header_background: str
    table_border: str
    font_family: str = "Helvetica, Arial, sans-serif"

    def css(self) -> str:
        """The stylesheet applying the theme."""
        return (
            f"body {{ background: {self.background}; color: {self.foreground}; "
            f"font-family: {self.font_family}; max-width: 60em; margin: 2em auto; }}\n"
            f"h1, h2 {{ color: {self.accent}; }}\n"
            f"pre {{ background: {self.code_background}; padding: 0.8em; overflow-x: auto; }}\n"
            f"table.preview {{ border-collapse: collapse; margin: 0.5em 0; }}\n"
            f"table.preview th {{ background: {self.table_header_background}; }}\n"
            f"table.preview th, table.preview td {{ border: 1px solid {self.table_border}; "
            f"padding: 0.2em 0.6em; text-align: left; }}\n"
            f"td.na {{ color: {self.accent}; font-style: italic; }}\n"
            f"p.dimensions, p.more {{ color: {self.table_border}; font-size: 0.9em; }}\n"
        )


THEMES: dict[str, Theme] = {
    "default": Theme(
        name="default",
        background="#ffffff",
        foreground="#222222",
        accent="#1f5f8b",
        code_background="#f4f4f4",
        table_header_background="#e8eef3",
        table_border="#999999",
    ),
    "flatly": Theme(
        name="flatly",
        background="#ffffff",
        foreground="#2c3e50",
        accent="#18bc9c",
        code_background="#ecf0f1",
        table_header_background="#dce4ec",
        table_border="#95a5a6",
        font_family="Lato, Helvetica, Arial, sans-serif",
    ),
    "darkly": Theme(
        name="darkly",
        background="#222222",
        foreground="#eeeeee",
        accent="#3498db",
        code_background="#303030",
        table_header_background="#375a7f",
        table_border="#888888",
        font_family="Lato, Helvetica, Arial, sans-serif",
    ),
}


def get_theme(name: str) -> Theme:
    """Look up a theme by name."""
    try:
        return THEMES[name]
    except KeyError:
        raise ValueError(
            f"Unknown theme {name!r}, available themes: {sorted(THEMES)}"
        ) from None
