"""
Projectdesk Backend — Pydantic Schemas
========================================

Descriptors (inputs) state which fields are required and which are
defaulted; default substitution happens here, at the boundary, so
resolvers and the workflow receive already-normalized values.
Views (outputs) are the read projections returned by list/get paths.
"""
