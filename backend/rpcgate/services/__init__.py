"""Services Layer — async shell around the core: context building, chain execution, dispatch."""
