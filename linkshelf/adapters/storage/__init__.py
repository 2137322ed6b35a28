"""Bookmark and profile storage adapters.

The hosted relational store is an external collaborator; the service only
depends on the repository interface. The in-memory implementation backs
local runs and tests.
"""
