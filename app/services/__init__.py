"""Pacote de serviços — camada de regras de negócio.

Service package — Business logic layer.
Services call repositories for DB operations and raise the HTTP
exceptions in app.utils.exceptions; routers commit.
"""
