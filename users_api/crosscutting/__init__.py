"""Cross-cutting concerns: config, logging, middleware, envelopes, pagination."""
