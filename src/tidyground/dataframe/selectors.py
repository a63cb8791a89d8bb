"""Pick columns by name or by pattern.

Wrangling verbs like ``select`` and ``pivot_longer`` need to know
which columns they should act on. Listing all of them by name
gets tedious quickly, so selectors allow to describe them::

    df.select("species_id", starts_with("hind"), exclude("record_id"))

Selectors are resolved against the columns of the data in the order
they are provided, each column is picked only once.
"""

import abc
import re

__all__ = (
    "ColumnNotFoundError",
    "ColumnSelector",
    "contains",
    "ends_with",
    "everything",
    "exclude",
    "matches",
    "resolve_selection",
    "starts_with",
)


class ColumnNotFoundError(KeyError):
    """A column was selected by name, but the data has no such column."""


class ColumnSelector(abc.ABC):
    """Describe a set of columns."""

    @abc.abstractmethod
    def resolve(self, columns: list[str]) -> list[str]:
        """Return the selected columns among ``columns``, in their order."""
        ...

    def __repr__(self) -> str:
        return str(self)


class Name(ColumnSelector):
    """Select one column by its exact name."""

    def __init__(self, name: str) -> None:
        self.name = name

    def resolve(self, columns: list[str]) -> list[str]:
        if self.name not in columns:
            raise ColumnNotFoundError(
                f"Column {self.name!r} doesn't exist, available columns: {columns}"
            )
        return [self.name]

    def __str__(self) -> str:
        return self.name


class PatternSelector(ColumnSelector):
    """Select all the columns whose name satisfies a test."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern

    @abc.abstractmethod
    def _test(self, name: str) -> bool: ...

    def resolve(self, columns: list[str]) -> list[str]:
        return [c for c in columns if self._test(c)]

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.pattern!r})"


class StartsWith(PatternSelector):
    def _test(self, name: str) -> bool:
        return name.startswith(self.pattern)


class EndsWith(PatternSelector):
    def _test(self, name: str) -> bool:
        return name.endswith(self.pattern)


class Contains(PatternSelector):
    def _test(self, name: str) -> bool:
        return self.pattern in name


class Matches(PatternSelector):
    """Select columns whose name matches a regular expression."""

    def __init__(self, pattern: str) -> None:
        super().__init__(pattern)
        self.regex = re.compile(pattern)

    def _test(self, name: str) -> bool:
        return self.regex.search(name) is not None


class Everything(ColumnSelector):
    """Select all columns."""

    def resolve(self, columns: list[str]) -> list[str]:
        return list(columns)

    def __str__(self) -> str:
        return "Everything()"


class Exclude(ColumnSelector):
    """Select all columns except those picked by other selectors.

    When used after other selectors it removes
    columns from those that were already selected::

        select(starts_with("hind"), exclude("hindfoot_length"))
    """

    def __init__(self, *selectors: "ColumnSelector | str") -> None:
        self.selectors = [as_selector(s) for s in selectors]

    def excluded(self, columns: list[str]) -> set[str]:
        """The columns that have to be removed."""
        return {c for s in self.selectors for c in s.resolve(columns)}

    def resolve(self, columns: list[str]) -> list[str]:
        excluded = self.excluded(columns)
        return [c for c in columns if c not in excluded]

    def __str__(self) -> str:
        return f"Exclude({', '.join(map(str, self.selectors))})"


def as_selector(selector: ColumnSelector | str) -> ColumnSelector:
    """Convert column names to selectors, leave selectors untouched."""
    if isinstance(selector, ColumnSelector):
        return selector
    if isinstance(selector, str):
        return Name(selector)
    raise TypeError(f"Expected a column name or a selector, got {selector!r}")


def resolve_selection(
    selectors: "tuple[ColumnSelector | str, ...] | list[ColumnSelector | str]",
    columns: list[str],
) -> list[str]:
    """Resolve a sequence of selectors to the list of selected columns.

    Columns are provided in the order they were selected,
    if the same column is selected more than once only the
    first occurrence is kept.

    When the first selector is an :func:`exclude`, the selection
    starts from all the columns.

    >>> resolve_selection(["b", starts_with("a")], ["a1", "b", "a2"])
    ['b', 'a1', 'a2']
    >>> resolve_selection([exclude("b")], ["a1", "b", "a2"])
    ['a1', 'a2']
    """
    selected: list[str] = []
    for idx, selector in enumerate(as_selector(s) for s in selectors):
        if isinstance(selector, Exclude):
            if idx == 0:
                selected = selector.resolve(columns)
            else:
                excluded = selector.excluded(columns)
                selected = [c for c in selected if c not in excluded]
            continue
        for column in selector.resolve(columns):
            if column not in selected:
                selected.append(column)
    return selected


def everything() -> ColumnSelector:
    """Select all columns."""
    return Everything()


def starts_with(prefix: str) -> ColumnSelector:
    """Select columns whose name starts with ``prefix``."""
    return StartsWith(prefix)


def ends_with(suffix: str) -> ColumnSelector:
    """Select columns whose name ends with ``suffix``."""
    return EndsWith(suffix)


def contains(text: str) -> ColumnSelector:
    """Select columns whose name contains ``text``."""
    return Contains(text)


def matches(regex: str) -> ColumnSelector:
    """Select columns whose name matches the ``regex`` regular expression."""
    return Matches(regex)


def exclude(*selectors: ColumnSelector | str) -> ColumnSelector:
    """Select all columns except the provided ones."""
    return Exclude(*selectors)
