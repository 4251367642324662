#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Annotated

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from objext.abc import JsonName


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class StreetAddress:
    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    postal_code: str | None = None


@dataclass
class PermissionDto:
    name: str | None = None
    scope: str | None = None


@dataclass
class UserDto:
    UserId: int = 0
    FirstName: Annotated[str | None, JsonName("firstName")] = None
    LastName: str = ""
    BirthDate: dt.datetime | None = None
    IsActive: bool = False
    Salary: Decimal = Decimal("0")
    Permissions: list[PermissionDto] | None = None
    Address: StreetAddress | None = None


@dataclass
class Flags:
    IsActive: bool = False
    IsDeleted: bool = False
    Note: str | None = None
    Count: int = 0
    Ratio: float = 0.0


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def user() -> UserDto:
    """A fully populated user, only nested members carry None values."""
    return UserDto(
        UserId=42,
        FirstName="Ann",
        LastName="Lee",
        BirthDate=dt.datetime(1990, 5, 17, 8, 30),
        IsActive=True,
        Salary=Decimal("1234.50"),
        Permissions=[PermissionDto("read", "all"), PermissionDto("write", None)],
        Address=StreetAddress("1 Main St", None, "Springfield", "12345"),
    )


@pytest.fixture
def flags() -> Flags:
    """Booleans, a None member and two numbers."""
    return Flags(IsActive=True, IsDeleted=False, Note=None, Count=3, Ratio=1.5)
