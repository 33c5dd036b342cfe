"""User profile: the physiological inputs to the Widmark model."""

import math
from dataclasses import dataclass
from enum import Enum

from bac_engine.errors import InvalidInput

# Widmark distribution ratio (body water constant).
R_MALE = 0.68
R_FEMALE = 0.55

DEFAULT_WEIGHT_LB = 160.0


class BiologicalSex(Enum):
    MALE = "Male"
    FEMALE = "Female"

    @property
    def body_water_constant(self) -> float:
        return R_MALE if self is BiologicalSex.MALE else R_FEMALE

    @classmethod
    def parse(cls, value) -> "BiologicalSex":
        if isinstance(value, cls):
            return value
        lowered = str(value).strip().lower()
        if lowered in {"male", "m"}:
            return cls.MALE
        if lowered in {"female", "f"}:
            return cls.FEMALE
        raise InvalidInput("Sex must be male or female")


@dataclass(frozen=True)
class UserProfile:
    weight_lb: float = DEFAULT_WEIGHT_LB
    sex: BiologicalSex = BiologicalSex.MALE

    def __post_init__(self):
        try:
            weight = float(self.weight_lb)
        except (TypeError, ValueError):
            raise InvalidInput("Weight must be a number")
        if math.isnan(weight) or math.isinf(weight) or weight <= 0:
            raise InvalidInput("Weight must be greater than 0 lb")
        object.__setattr__(self, "weight_lb", weight)
        object.__setattr__(self, "sex", BiologicalSex.parse(self.sex))

    @property
    def body_water_constant(self) -> float:
        return self.sex.body_water_constant

    def to_dict(self) -> dict:
        return {"weight_lb": self.weight_lb, "sex": self.sex.value}

    @classmethod
    def from_dict(cls, raw: dict) -> "UserProfile":
        return cls(weight_lb=raw.get("weight_lb", DEFAULT_WEIGHT_LB), sex=raw.get("sex", "male"))
