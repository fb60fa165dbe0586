"""
Domain enums for HealthyBites.
Contains all enumeration types used across the catalog schemas.
"""

import enum


class Species(str, enum.Enum):
    """Pet species a product or rating targets"""

    CAT = "cat"
    DOG = "dog"


class LifeStage(str, enum.Enum):
    """Pet life stage; ALL is stored as a wildcard for ADULT and YOUNG filters"""

    ADULT = "adult"
    YOUNG = "young"
    ALL = "all"


class FoodType(str, enum.Enum):
    """Food form"""

    DRY = "dry"
    WET = "wet"


class Unit(str, enum.Enum):
    """Unit a size is sold in"""

    LB = "lb"
    CAN = "can"
