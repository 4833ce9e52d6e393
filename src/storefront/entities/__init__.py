"""Entities grouped by business concept.

Each catalog entity package holds ``table.py`` (persistence model),
``entity.py`` (request payloads) and ``repository.py`` (data access).
"""
