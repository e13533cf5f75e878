"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies following the Dependency Inversion Principle.

Modules:
    - ai: Text completion providers (OpenAI, Gemini, mock) with a fallback client
    - storage: Blob storage abstraction (S3, placeholder)
    - container: Service locator wiring infrastructure into the domain services

This package enables:
    - Easy testing with mock implementations
    - Switching between providers without code changes
    - Degraded operation when an external provider is missing
"""
