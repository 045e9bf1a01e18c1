"""Shared pydantic field types for instruction accounts and params."""

from typing import Annotated

from pydantic import AfterValidator, Field

from src.rc_common.pda import validate_address
from src.rc_common.u64 import U64_MAX

Address = Annotated[str, AfterValidator(validate_address)]

U64Int = Annotated[int, Field(ge=0, le=U64_MAX)]

U16Int = Annotated[int, Field(ge=0, le=0xFFFF)]
