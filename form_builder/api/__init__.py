"""HTTP API: app factory, routers, middleware and error handling."""
