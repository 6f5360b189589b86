"""
Card lookup endpoint.

Query string (all optional):
    set      set code, defaults to the newest set
    booster  play | collector
    min      minimum display price
    foils    include | exclude
    rares    include | exclude
    list     include | exclude supplementary cards (Special Guests)
"""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, Field

from pullvalue.config import DEFAULT_MIN_PRICE
from pullvalue.models.card import BoosterType
from pullvalue.models.entry import DisplayGroup
from pullvalue.models.failure import (
    ApiResponse,
    FailureKind,
    KnownError,
    UnknownSetError,
    create_success,
)
from pullvalue.models.query import CardQuery, ViewFilters
from pullvalue.services.lookup import CardLookup, LookupResult
from pullvalue.services.pack_value import PackValue
from pullvalue.services.set_catalog import find_set, get_sets

router = APIRouter(prefix="/cards", tags=["cards"])

IncludeMode = Literal["include", "exclude"]


class FinishResponse(BaseModel):
    finish: str
    price: float
    treatment: str


class CardGroupResponse(BaseModel):
    """One printing with its qualifying finishes, most expensive first."""

    id: str
    name: str
    set: str
    collector_number: str
    rarity: str
    treatment: str
    is_foil: bool
    max_price: float
    image_url: str
    detail_url: str
    finishes: list[FinishResponse]
    supplementary: str | None = None


class BucketResponse(BaseModel):
    bucket: str
    pool_size: int
    expected_value: float


class PackValueResponse(BaseModel):
    expected_value: float
    approximate: bool = Field(
        default=True,
        description="Simplified slot model; commons, uncommons and wildcard slots are ignored",
    )
    buckets: list[BucketResponse] = Field(default_factory=list)


class LookupResponse(BaseModel):
    set: str
    booster: str
    include_supplementary: bool
    min_price: float
    cards: list[CardGroupResponse]
    count: int
    eligible_printings: int
    pack_value: PackValueResponse


def get_card_lookup(request: Request) -> CardLookup:
    """Lookup service created at startup."""
    lookup: CardLookup | None = getattr(request.app.state, "lookup", None)
    if lookup is None:
        raise KnownError(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message="Card lookup is not ready yet.",
            suggestion="Retry in a few seconds.",
            status_code=503,
        )
    return lookup


def _group_response(group: DisplayGroup) -> CardGroupResponse:
    printing = group.printing
    return CardGroupResponse(
        id=printing.id,
        name=printing.name,
        set=printing.set_code,
        collector_number=printing.collector_number,
        rarity=printing.rarity.value,
        treatment=group.treatment,
        is_foil=group.is_foil,
        max_price=round(group.max_price, 2),
        image_url=printing.image_url,
        detail_url=printing.detail_url,
        finishes=[
            FinishResponse(finish=f.finish.value, price=round(f.price, 2), treatment=f.treatment)
            for f in group.finishes
        ],
        supplementary=printing.provenance.value if printing.provenance else None,
    )


def _pack_value_response(pack_value: PackValue) -> PackValueResponse:
    return PackValueResponse(
        expected_value=round(pack_value.expected_value, 2),
        approximate=pack_value.approximate,
        buckets=[
            BucketResponse(
                bucket=b.bucket.value,
                pool_size=b.pool_size,
                expected_value=round(b.expected_value, 2),
            )
            for b in pack_value.buckets
        ],
    )


def to_lookup_response(result: LookupResult) -> LookupResponse:
    cards = [_group_response(g) for g in result.groups]
    return LookupResponse(
        set=result.query.set_code,
        booster=result.query.booster_type.value,
        include_supplementary=result.query.include_supplementary,
        min_price=result.filters.min_price,
        cards=cards,
        count=len(cards),
        eligible_printings=result.eligible_printings,
        pack_value=_pack_value_response(result.pack_value),
    )


@router.get("", response_model=ApiResponse[LookupResponse])
async def lookup_cards(
    lookup: Annotated[CardLookup, Depends(get_card_lookup)],
    set_code: Annotated[str | None, Query(alias="set")] = None,
    booster: BoosterType = BoosterType.PLAY,
    min_price: Annotated[float, Query(alias="min", ge=0)] = DEFAULT_MIN_PRICE,
    foils: IncludeMode = "include",
    rares: IncludeMode = "include",
    supplementary: Annotated[IncludeMode, Query(alias="list")] = "exclude",
) -> ApiResponse[Any]:
    """
    Notable cards for a set and booster type, plus the pack's expected value.

    Display filters (min, foils, rares) never change the expected value.
    """
    try:
        sets = get_sets()
    except (FileNotFoundError, ValueError) as e:
        raise KnownError(
            kind=FailureKind.NOT_FOUND,
            message="Set list unavailable.",
            detail=str(e),
            status_code=503,
        ) from e

    if set_code:
        card_set = find_set(sets, set_code)
        if card_set is None:
            raise UnknownSetError(set_code)
    elif sets:
        card_set = sets[0]
    else:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="No set selected and no sets are available.",
            status_code=400,
        )

    if not card_set.offers(booster):
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message=f"{card_set.name} has no {booster.value} booster.",
            suggestion="Use booster=play for sets released before collector boosters.",
            status_code=400,
        )

    query = CardQuery(
        set_code=card_set.code,
        booster_type=booster,
        include_supplementary=supplementary == "include",
    )
    filters = ViewFilters(
        min_price=min_price,
        exclude_rares=rares == "exclude",
        exclude_foils=foils == "exclude",
    )

    result = await lookup.lookup(query, filters)
    return create_success(to_lookup_response(result))
