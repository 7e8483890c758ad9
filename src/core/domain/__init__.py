"""Domain models.

Pure data shapes (Pydantic v2); no HTTP, CLI or SDK knowledge here.
"""
