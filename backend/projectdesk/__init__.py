"""
Projectdesk Backend — Application Package Initializer
=======================================================

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (workflow + resolvers)   │  ← Validation, own-or-join transactions
    ├─────────────────────────────────────┤
    │    Repositories (data access)       │  ← Queries, flush, never commit
    ├─────────────────────────────────────┤
    │  Unit of Work + Database (sessions) │  ← One transaction per unit of work
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
