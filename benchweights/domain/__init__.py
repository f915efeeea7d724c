"""Domain layer: batch models, cost model fitting and result grouping."""
