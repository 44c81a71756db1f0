"""Domain layer: errors, events, results, repository protocols and ports."""
