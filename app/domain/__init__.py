"""Pure domain utilities: the greeting route table and dispatch.

Free of FastAPI/HTTP concerns so the server and the smoke runner can both
reuse it.
"""
__all__ = ["greetings"]
