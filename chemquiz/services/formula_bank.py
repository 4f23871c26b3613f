import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

FORMULAS_PATH = Path(__file__).parent.parent / "data" / "formulas.json"


class FormulaBankError(ValueError):
    """Raised when the formula table cannot be used to run a quiz."""


@dataclass(frozen=True)
class Formula:
    """A chemical formula and its relative molecular mass."""

    formula: str
    molar_mass: float


class FormulaBank:
    """Read-only table of formulas that quiz questions are drawn from."""

    def __init__(
        self, formulas: Iterable[Formula], rng: Optional[random.Random] = None
    ) -> None:
        self._formulas = tuple(formulas)
        if not self._formulas:
            raise FormulaBankError("Formula table is empty")
        for item in self._formulas:
            if not item.formula:
                raise FormulaBankError("Formula label must not be empty")
            if not item.molar_mass > 0:
                raise FormulaBankError(
                    f"Molar mass of {item.formula} must be positive, got {item.molar_mass}"
                )
        self._rng = rng or random.Random()

    @classmethod
    def load(
        cls, path: Path = FORMULAS_PATH, rng: Optional[random.Random] = None
    ) -> "FormulaBank":
        """Load formulas from a JSON file."""
        try:
            with path.open(encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise FormulaBankError(f"Cannot read formula table {path}: {e}") from e

        try:
            formulas = [
                Formula(formula=str(row["formula"]), molar_mass=float(row["molar_mass"]))
                for row in raw
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise FormulaBankError(f"Malformed formula table {path}: {e}") from e

        bank = cls(formulas, rng=rng)
        logging.info(f"Loaded {len(bank)} formulas from {path.name}")
        return bank

    def __len__(self) -> int:
        return len(self._formulas)

    def __contains__(self, item: object) -> bool:
        return item in self._formulas

    @property
    def formulas(self) -> tuple[Formula, ...]:
        return self._formulas

    def pick_random(self) -> Formula:
        """Pick a formula uniformly at random."""
        return self._rng.choice(self._formulas)
