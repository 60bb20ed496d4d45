"""Infrastructure layer — filesystem access and the document store.

The service layer bridges between lints and infrastructure.
Infrastructure must never import from services, commands, or output.
"""
