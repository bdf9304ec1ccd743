"""Pacote de repositórios — camada de consultas ao banco.

Repository package — Database query layer.
Each repository extends BaseRepository for generic CRUD and adds the
role, permission, user-role, direct user grant and audit queries.
"""
