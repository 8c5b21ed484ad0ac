"""taxplan: household tax computation engine."""
