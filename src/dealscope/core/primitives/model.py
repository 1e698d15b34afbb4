# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Acronyms kept upper-case in the camelCase JSON keys (currentNOI, pricePerSF)
_ACRONYMS = {"sf": "SF", "psf": "PSF", "noi": "NOI", "gla": "GLA", "ocr": "OCR"}


def to_camel_alias(name: str) -> str:
    """Convert a snake_case attribute to the camelCase key used by the web form."""
    head, *rest = name.split("_")
    return head + "".join(_ACRONYMS.get(part, part.title()) for part in rest)


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable, slot-based models. Records are built once per analysis and
    never mutated afterwards.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,  # Immutable records; derived values are new models
        slots=True,
        extra="forbid",  # Catches misspelled form keys immediately
    )


class CamelModel(Model):
    """Record exchanged with the camelCase JSON form.

    Attributes keep snake_case names; the camelCase key is accepted as an
    alias and reproduced by ``model_dump(by_alias=True)``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel_alias,
        populate_by_name=True,
    )
