import pyarrow.compute as pc

from tidyground.compute import CSVDataSource, FilterNode, FunctionCallExpression, col
from tidyground.lesson import surveys_dataset

query = FilterNode(
    FunctionCallExpression(pc.equal, col("plot_type"), "Control"),
    CSVDataSource(surveys_dataset(), block_size=512),
)
for batch in query.batches():
    print("---")
    print(batch)
