"""Provide insights about Python objects."""

import ast
import inspect
import textwrap
from typing import Any, Callable


def get_qualname(obj: Any) -> str:
    """Get the qualified name of the given object.

    Will return the name of the object and the
    name of the module and class it belongs to.

    For functions or methods, this will return
    something like `module.class.method` or
    `module.function`.

    >>> class TestClass:
    ...   def method(self, arg):
    ...     pass
    >>> get_qualname(TestClass.method)
    'tidyground.utils.inspect.TestClass.method'
    """
    module = inspect.getmodule(obj).__name__
    if inspect.ismethod(obj) or inspect.isfunction(obj):
        if hasattr(obj, "__self__") and obj.__self__:
            class_name = obj.__self__.__class__.__name__
            return f"{module}.{class_name}.{obj.__name__}"
        return f"{module}.{obj.__qualname__}"
    elif inspect.isclass(obj):
        return f"{module}.{obj.__name__}"
    elif inspect.ismodule(obj):
        return obj.__name__
    elif isinstance(obj, object):
        return f"{module}.{obj.__class__.__name__}"
    raise ValueError(f"Unable to detect path for object of type {type(obj)}")


def get_body_source(func: Callable[..., Any]) -> str:
    """Get the source code of the body of a function.

    Decorators, the signature and the docstring
    are left out, the body is dedented so that it reads
    like code written at module level.

    For example for::

        @lesson.step("Selecting columns")
        def selecting(surveys):
            \"\"\"Pick three columns.\"\"\"
            return surveys.select("plot_id", "species_id", "weight")

    the result is ``return surveys.select("plot_id", "species_id", "weight")``.

    For lambdas the result is the expression they evaluate,
    or the source lines that define them when those can't be parsed
    on their own (like a lambda on a continuation line).
    """
    source = textwrap.dedent(inspect.getsource(func))
    try:
        tree = ast.parse(source)
    except SyntaxError:
        if func.__name__ == "<lambda>":
            return source.strip()
        raise

    if func.__name__ == "<lambda>":
        for node in ast.walk(tree):
            if isinstance(node, ast.Lambda):
                return ast.get_source_segment(source, node.body)
        return source.strip()

    function_def = tree.body[0]
    if not isinstance(function_def, (ast.FunctionDef, ast.AsyncFunctionDef)):
        raise ValueError(f"Expected a function, got {type(function_def).__name__}")

    statements = function_def.body
    first_statement = statements[0]
    if ast.get_docstring(function_def) is not None:
        if len(statements) == 1:
            return ""
        # Start right after the docstring to preserve comments
        # that precede the first statement.
        start_line = first_statement.end_lineno
    else:
        start_line = first_statement.lineno - 1

    body = source.splitlines()[start_line : function_def.end_lineno]
    return textwrap.dedent("\n".join(body)).strip()
