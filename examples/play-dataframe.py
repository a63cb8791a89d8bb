import pyarrow.compute as pc

from tidyground.dataframe import Dataframe, FunctionCallExpression, col, mean
from tidyground.lesson import surveys_dataset

df = Dataframe.open_csv(surveys_dataset()) \
  .filter(FunctionCallExpression(pc.is_valid, col("weight"))) \
  .group_by("species_id", "sex") \
  .summarize(mean_weight=mean("weight")) \
  .arrange("-mean_weight") \
  .collect()

print(df)
