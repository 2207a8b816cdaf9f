"""
adapters - Delivery mechanisms (REST API, CLI) built on top of the ServiceFactory.
"""
