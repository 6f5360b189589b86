"""
Set list endpoint.

Lists the sets a user can pick and the booster products each offers.
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from pullvalue.services.set_catalog import get_sets

router = APIRouter(prefix="/sets", tags=["sets"])


class BoosterOption(BaseModel):
    """One booster product available for a set."""

    value: str
    label: str


class SetResponse(BaseModel):
    code: str
    name: str
    released: str
    era: str
    boosters: list[BoosterOption] = Field(default_factory=list)


class SetListResponse(BaseModel):
    sets: list[SetResponse]
    count: int


@router.get("", response_model=SetListResponse)
async def list_sets() -> SetListResponse:
    """All sets, newest first."""
    try:
        sets = get_sets()
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Set list unavailable",
        ) from e

    items = [
        SetResponse(
            code=card_set.code,
            name=card_set.name,
            released=card_set.released.isoformat(),
            era=card_set.era.value,
            boosters=[
                BoosterOption(value=booster.value, label=label)
                for booster, label in card_set.booster_labels.items()
            ],
        )
        for card_set in sets
    ]
    return SetListResponse(sets=items, count=len(items))
