"""
domain - Entities, value types, exceptions and repository ports.

Pure Python only. Never imports from application/, infrastructure/ or adapters/.
"""
