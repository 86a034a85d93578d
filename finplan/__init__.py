"""
Financial Planning - Source Package

Data layer for an advisor/client financial-planning tool: typed records for
a client's personal data, goals, housing, insurance, taxes, investments,
pensions and budgets, persisted locally (SQLite) or in a hosted backend.

DESIGN PRINCIPLES:
1. One generic repository per entity kind, instantiated per table
2. Field names are mapped through checked per-entity tables
3. Storage layer is swappable
4. Failures propagate; nothing is retried behind the caller's back
"""

__version__ = "1.0.0"
__author__ = "Financial Planning Team"
