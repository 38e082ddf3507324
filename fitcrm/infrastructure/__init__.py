"""
Infrastructure layer - storage and external service integrations.

Each subpackage wraps an external dependency:
- storage: Blob storage (local files, R2/S3)
- persistence: Record backends for the client store
- wger: wger exercise catalogue API

These wrappers translate between external formats and our domain models.
"""
