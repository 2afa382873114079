from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

# --- Records ---
class ItemType(BaseModel):
    id: str
    name: str
    base_image_url: Optional[str] = None

class NewItem(BaseModel):
    user_id: str
    item_type_id: str
    level: int = 1
    is_styled: bool = False
    current_stats: Optional[Dict[str, Any]] = None
    material_combo_hash: Optional[str] = None
    generated_image_url: Optional[str] = None
    image_generation_status: Optional[str] = None

class Item(NewItem):
    id: str

# --- Check Results ---
class NamingMismatch(BaseModel):
    name: str
    expected: str
    actual: str

class PropagationStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"

class PropagationResult(BaseModel):
    status: PropagationStatus
    item_type_name: Optional[str] = None
    expected_url: Optional[str] = None
    actual_url: Optional[str] = None
    reason: Optional[str] = None
    cleaned_up: bool = True
    leaked_rows: int = 0

def overall_passed(
    missing_count: int,
    pattern_error_count: int,
    naming_error_count: int,
    propagation: Optional[PropagationResult] = None,
    gate_on_propagation: bool = False,
) -> bool:
    """
    Propagation only counts when gate_on_propagation is set, and even then a
    skipped propagation check does not fail the run.
    """
    passed = missing_count == 0 and pattern_error_count == 0 and naming_error_count == 0
    if gate_on_propagation and propagation is not None:
        passed = passed and propagation.status != PropagationStatus.FAILED
    return passed

class CheckReport(BaseModel):
    item_types: List[ItemType] = []
    missing: List[ItemType] = []
    pattern_errors: List[ItemType] = []
    naming_errors: List[NamingMismatch] = []
    propagation: Optional[PropagationResult] = None
    error: Optional[str] = None
    gate_on_propagation: bool = False

    @property
    def missing_count(self) -> int:
        return len(self.missing)

    @property
    def pattern_error_count(self) -> int:
        return len(self.pattern_errors)

    @property
    def naming_error_count(self) -> int:
        return len(self.naming_errors)

    @property
    def with_url_count(self) -> int:
        return len(self.item_types) - self.missing_count

    @property
    def passed(self) -> bool:
        # A fatal fetch error means nothing was verified
        if self.error is not None:
            return False
        return overall_passed(
            self.missing_count,
            self.pattern_error_count,
            self.naming_error_count,
            propagation=self.propagation,
            gate_on_propagation=self.gate_on_propagation,
        )
