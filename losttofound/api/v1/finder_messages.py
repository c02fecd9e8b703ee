"""Finder message intake: the form on every public pet page.

No authentication: anyone holding the tag can report a sighting.
"""

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from losttofound.api.deps import Session
from losttofound.services.finder_reports import submit_report

router = APIRouter(tags=["finder-messages"])


class FinderMessageRequest(BaseModel):
    """Field names follow the front end's JSON body."""
    model_config = ConfigDict(populate_by_name=True)

    pet_id: str | None = Field(default=None, alias="petId")
    type: str | None = None
    message: str | None = None
    general_location: str | None = Field(default=None, alias="generalLocation")


class FinderMessageCreated(BaseModel):
    ok: bool = True
    id: str


@router.post("/finder-message", response_model=FinderMessageCreated)
async def create_finder_message(
    body: FinderMessageRequest,
    session: Session,
) -> FinderMessageCreated:
    message_id = await submit_report(
        session,
        pet_id=body.pet_id,
        report_kind=body.type,
        message=body.message,
        general_location=body.general_location,
    )
    return FinderMessageCreated(id=str(message_id))
