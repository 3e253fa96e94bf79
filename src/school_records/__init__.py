"""
school_records: HTTP API for students, teachers and courses.

Every request is tagged with a trace id (see `core.tracing`) and every failure
is rendered by a single `ErrorNormalizer` (see `exceptions.normalizer`).
"""

__version__ = "0.1.0"
