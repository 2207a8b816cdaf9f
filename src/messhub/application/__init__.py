"""
application - Use-case services and request-scoped context.

Depends on domain/ only. Repositories arrive through the constructor.
"""
