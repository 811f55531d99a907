"""
Utility modules for the eventdash backend.

- logging_config: Structured logging (console in development, JSON files in production)
- formatting: Datetime normalization and note formatting helpers
- revalidation: Collection of view-invalidation tokens produced by mutations
"""
