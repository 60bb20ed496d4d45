"""Service layer — orchestration returning ServiceResult.

Services may import from domain, lints, and infrastructure layers.
They must never import from commands or output.
"""
