from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


# Shared Pydantic base with ORM support (Pydantic v2)
class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Era(str, Enum):
    EIGHTIES = "1980-1989"
    NINETIES = "1990-1999"
    TWO_THOUSANDS = "2000-2009"
    TWENTY_TENS = "2010-2019"
    TWENTY_TWENTIES = "2020-now"


class HealthStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
