from .identity import extract_identity
from .financials import extract_financials

__all__ = ["extract_identity", "extract_financials"]
