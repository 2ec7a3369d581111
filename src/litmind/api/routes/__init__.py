from . import recommendations

__all__ = ["recommendations"]
