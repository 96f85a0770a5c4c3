import enum
from sqlalchemy import Enum


class Department(str, enum.Enum):
    IT = "IT"
    AI_DS = "AI&DS"
    CSE = "CSE"
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    BIO_TECH = "Bio-tech"
    CHEMICAL = "Chemical"
    MECHANICAL = "Mechanical"


# Departments whose items are tracked by lab cabin
CABIN_DEPARTMENTS = frozenset({Department.IT, Department.AI_DS, Department.CSE})


def enum_column(enum_cls, name: str):
    """SQLAlchemy Enum that persists member values ("AI&DS") rather than names."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
