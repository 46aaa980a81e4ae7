"""Tag listing."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campus_connect.core.database import get_db
from campus_connect.schemas.events import TagOut
from campus_connect.services.events import list_tags

router = APIRouter()


@router.get("", response_model=list[TagOut])
def get_tags(db: Annotated[Session, Depends(get_db)]) -> list[TagOut]:
    return [TagOut.model_validate(t) for t in list_tags(db)]
