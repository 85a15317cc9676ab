"""Domain layer for catorcena.

Entities, the period/recurrence engine and the services built on it. Import
services from their modules; this package does not re-export them so the
database layer can import entities without pulling services in.
"""
