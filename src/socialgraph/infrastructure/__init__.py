"""Infrastructure layer: persistence backends and the graph engine.

This layer depends on stdlib and third-party libs (SQLAlchemy, NetworkX).
It must never import from services, commands, or output.
The service layer bridges between domain rules and infrastructure.
"""
