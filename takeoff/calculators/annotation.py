"""
Select and note measurements carry no quantities. Their calculators only
check and tidy the input; compute() returns None for the derived fields.
"""

from ..errors import InconsistentInput
from ..factors import DEFAULT_FACTORS, FactorTables
from .base import BaseCalculator


class SelectCalculator(BaseCalculator):
    kind = "select"

    def compute(self, params, factors: FactorTables = DEFAULT_FACTORS):
        return None

    def normalize(self, params):
        """Drop repeated ids, keeping first-seen order."""
        seen = list(dict.fromkeys(params.selected_measurements))
        return params.model_copy(update={"selected_measurements": seen})


class NoteCalculator(BaseCalculator):
    kind = "note"

    def compute(self, params, factors: FactorTables = DEFAULT_FACTORS):
        self.check_points(params.coordinates)
        if not params.text.strip():
            raise InconsistentInput("Note text is empty", field="text", expected="non-empty text")
        return None
