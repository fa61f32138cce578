"""HTTP adapter: routers, schemas and error mapping."""
