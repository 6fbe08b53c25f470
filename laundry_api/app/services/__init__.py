"""
Service layer.

``CatalogService`` reads the service catalog, ``OrderStore`` persists
orders and ``OrderService`` implements the order lifecycle on top of
both.  API handlers only talk to this layer.
"""
