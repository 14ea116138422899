"""
Persistence layer: configuration, ORM entities, DAOs and core service functions.
"""
