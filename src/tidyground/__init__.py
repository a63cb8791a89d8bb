"""tidyground

Tabular data wrangling, narrated.

tidyground was started as a playground to teach how data wrangling works:
selecting columns, filtering rows, summarizing groups and reshaping tables,
applied to a small CSV dataset and narrated in a generated lesson document.

The project is constituted by multiple components, each isolated within its own
package and each self documented in literate programming style.

The primary components are:

* The Compute Engine, in charge of executing transformations on the data.
* The Dataframe API, which provides the wrangling verbs on top of the compute engine.
* The Lessons, which narrate a sequence of transformations as a document.

For the user guide and code documentation of each component, refer to the
component itself.
"""

from . import compute, dataframe

__all__ = ("compute", "dataframe")
