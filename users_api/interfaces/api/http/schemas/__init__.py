"""HTTP DTOs (OpenAPI)."""
