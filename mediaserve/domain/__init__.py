"""Pure domain logic: path confinement, range planning, MIME lookup, errors.

Nothing here imports FastAPI, so these modules are unit-tested directly and
shared with the smoke runner.
"""
__all__ = ["errors", "media", "paths", "ranges"]
