"""HTTP layer: routes, dependency providers, error handlers and middleware."""
