"""Card generation service and card-level constraint checks."""

from .constraints import CardConstraintChecker, checker_for_format
from .service import BingoGeneratorService

__all__ = ["BingoGeneratorService", "CardConstraintChecker", "checker_for_format"]
