from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from portal_backend.auth.dependencies import require_admin
from portal_backend.auth.sessions import SessionSnapshot
from portal_backend.database import get_db
from portal_backend.models.carousel import (
    DATE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    SUBTITLE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)
from portal_backend.models.competition import ICON_MAX_LENGTH, NAME_MAX_LENGTH
from portal_backend.repositories.content import CarouselStore, CompetitionStore
from portal_backend.services.content import CarouselService, CompetitionService

router = APIRouter(tags=['content'])


class CreateCompetitionRequest(BaseModel):
    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    icon: str | None = Field(default=None, max_length=ICON_MAX_LENGTH)


class DropdownEntry(BaseModel):
    model_config = ConfigDict(extra='ignore')

    title: str | None = None
    content: str | None = None
    competition_id: int | None = None


class ParentGroup(BaseModel):
    model_config = ConfigDict(extra='ignore')

    title: str | None = None
    dropdowns: list[DropdownEntry] = Field(default_factory=list)


class CarouselCardRequest(BaseModel):
    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    date: str | None = Field(default=None, max_length=DATE_MAX_LENGTH)
    subtitle: str | None = Field(default=None, max_length=SUBTITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    parents: list[ParentGroup] | None = None

    def parent_dicts(self) -> list[dict] | None:
        if self.parents is None:
            return None
        return [parent.model_dump() for parent in self.parents]


def get_competition_service(db: Session = Depends(get_db)) -> CompetitionService:
    return CompetitionService(CompetitionStore(db))


def get_carousel_service(db: Session = Depends(get_db)) -> CarouselService:
    return CarouselService(CarouselStore(db), CompetitionStore(db))


@router.get('/competitions')
def list_competitions(service: CompetitionService = Depends(get_competition_service)):
    return {'success': True, 'data': service.list()}


@router.post('/competitions')
def create_competition(
    data: CreateCompetitionRequest,
    admin: SessionSnapshot = Depends(require_admin),
    service: CompetitionService = Depends(get_competition_service),
):
    return {'success': True, 'id': service.create(data.name, data.icon)}


@router.delete('/competitions/{competition_id}')
def delete_competition(
    competition_id: int,
    admin: SessionSnapshot = Depends(require_admin),
    service: CompetitionService = Depends(get_competition_service),
):
    service.delete(competition_id)
    return {'success': True}


@router.get('/carousel/insights')
def list_carousel_insights(service: CarouselService = Depends(get_carousel_service)):
    return {'success': True, 'data': service.list()}


@router.get('/carousel/insights/{card_id}')
def get_carousel_insight(card_id: int, service: CarouselService = Depends(get_carousel_service)):
    return {'success': True, 'data': service.get(card_id)}


@router.post('/carousel/insights')
def create_carousel_insight(
    data: CarouselCardRequest,
    admin: SessionSnapshot = Depends(require_admin),
    service: CarouselService = Depends(get_carousel_service),
):
    card_id = service.create(
        data.title,
        date=data.date,
        subtitle=data.subtitle,
        description=data.description,
        parents=data.parent_dicts(),
    )
    return {'success': True, 'id': card_id}


@router.put('/carousel/insights/{card_id}')
def update_carousel_insight(
    card_id: int,
    data: CarouselCardRequest,
    admin: SessionSnapshot = Depends(require_admin),
    service: CarouselService = Depends(get_carousel_service),
):
    service.update(
        card_id,
        data.title,
        date=data.date,
        subtitle=data.subtitle,
        description=data.description,
        parents=data.parent_dicts(),
    )
    return {'success': True, 'id': card_id}


@router.delete('/carousel/insights/{card_id}')
def delete_carousel_insight(
    card_id: int,
    admin: SessionSnapshot = Depends(require_admin),
    service: CarouselService = Depends(get_carousel_service),
):
    service.delete(card_id)
    return {'success': True}
