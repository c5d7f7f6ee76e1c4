from enum import Enum

from pydantic import BaseModel, NonNegativeInt


class DurationUnit(Enum):
    MILLISECOND = "ms"
    SECOND = "s"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for unit in cls:
                if unit.value == value.lower():
                    return unit
        return None


class Duration(BaseModel):
    amount: NonNegativeInt
    unit: DurationUnit
