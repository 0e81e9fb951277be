"""
PDF book catalogue service.

Books are described by a small metadata record (title, class, category,
author) kept in a single JSON document, and each record owns one PDF
file stored under a directory keyed by the record's generated id. The
``catalog`` package keeps the two in step and exposes them over a
FastAPI router.
"""
