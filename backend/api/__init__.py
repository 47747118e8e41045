"""HTTP layer: dependencies, helpers, routers."""
