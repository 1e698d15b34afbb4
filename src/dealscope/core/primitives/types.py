# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from pydantic import Field
from typing_extensions import Annotated

# constrained types
PositiveInt = Annotated[int, Field(ge=0)]
PositiveFloat = Annotated[float, Field(ge=0)]
FloatBetween0And1 = Annotated[float, Field(ge=0, le=1)]
FloatBetween0And100 = Annotated[float, Field(ge=0, le=100)]
Score = Annotated[float, Field(ge=0, le=100)]
