"""Repository package - database query layer.

Each repository extends BaseRepository for generic CRUD and adds the
domain-specific queries its service needs.
"""
