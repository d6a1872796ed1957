"""Competitions and carousel insight cards."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from portal_backend.core.exceptions import DuplicateName, NotFound, ValidationError
from portal_backend.database import store_operation
from portal_backend.models.carousel import CarouselCard
from portal_backend.models.competition import Competition
from portal_backend.repositories import carousel_shapes
from portal_backend.repositories.content import CarouselStore, CompetitionStore
from portal_backend.services.accounts import clean


logger = logging.getLogger(__name__)

CAROUSEL_TEXT_FIELDS = ("date", "subtitle", "description")


def competition_view(competition: Competition) -> dict:
    return {
        "id": competition.id,
        "name": competition.name,
        "icon": competition.icon,
        "created_at": competition.created_at.isoformat() if competition.created_at else None,
    }


class CompetitionService:
    def __init__(self, competitions: CompetitionStore):
        self.competitions = competitions

    def list(self) -> list[dict]:
        with store_operation(self.competitions, "listing competitions"):
            return [competition_view(row) for row in self.competitions.list()]

    def create(self, name: str | None, icon: str | None = None) -> int:
        name = clean(name)
        if not name:
            raise ValidationError("Competition name is required")

        with store_operation(self.competitions, "creating competition"):
            try:
                competition = self.competitions.create(name=name, icon=clean(icon) or None)
            except IntegrityError as exc:
                self.competitions.rollback()
                raise DuplicateName() from exc
        logger.info("Competition %s created", competition.id)
        return competition.id

    def delete(self, competition_id: int) -> None:
        with store_operation(self.competitions, "deleting competition"):
            competition = self.competitions.get(competition_id)
            if competition is None:
                raise NotFound("Competition not found")
            self.competitions.delete(competition)
        logger.info("Competition %s deleted", competition_id)


class CarouselService:
    def __init__(self, cards: CarouselStore, competitions: CompetitionStore):
        self.cards = cards
        self.competitions = competitions

    def _views(self, cards: list[CarouselCard]) -> list[dict]:
        normalized = [
            (card, carousel_shapes.normalize_parents(card.parents, card.dropdowns))
            for card in cards
        ]
        wanted: set[int] = set()
        for _, groups in normalized:
            wanted |= carousel_shapes.referenced_competition_ids(groups)
        competitions = self.competitions.get_many(wanted)

        return [
            {
                "id": card.id,
                "title": card.title,
                "date": card.date,
                "subtitle": card.subtitle,
                "description": card.description,
                "parents": carousel_shapes.attach_competitions(groups, competitions),
            }
            for card, groups in normalized
        ]

    def list(self) -> list[dict]:
        with store_operation(self.cards, "listing carousel cards"):
            return self._views(self.cards.list())

    def get(self, card_id: int) -> dict:
        with store_operation(self.cards, "loading carousel card"):
            card = self.cards.get(card_id)
            if card is None:
                raise NotFound("Carousel card not found")
            return self._views([card])[0]

    def _fields(self, title: str | None, **optional: str | None) -> dict:
        title = clean(title)
        if not title:
            raise ValidationError("Title is required")
        fields = {"title": title}
        for name in CAROUSEL_TEXT_FIELDS:
            fields[name] = clean(optional.get(name)) or None
        return fields

    def create(
        self,
        title: str | None,
        date: str | None = None,
        subtitle: str | None = None,
        description: str | None = None,
        parents: list[dict] | None = None,
    ) -> int:
        fields = self._fields(title, date=date, subtitle=subtitle, description=description)
        with store_operation(self.cards, "creating carousel card"):
            card = self.cards.create(fields, parents)
        logger.info("Carousel card %s created", card.id)
        return card.id

    def update(
        self,
        card_id: int,
        title: str | None,
        date: str | None = None,
        subtitle: str | None = None,
        description: str | None = None,
        parents: list[dict] | None = None,
    ) -> int:
        fields = self._fields(title, date=date, subtitle=subtitle, description=description)
        with store_operation(self.cards, "updating carousel card"):
            card = self.cards.get(card_id)
            if card is None:
                raise NotFound("Carousel card not found")
            self.cards.replace(card, fields, parents)
        logger.info("Carousel card %s updated", card_id)
        return card_id

    def delete(self, card_id: int) -> None:
        with store_operation(self.cards, "deleting carousel card"):
            card = self.cards.get(card_id)
            if card is None:
                raise NotFound("Carousel card not found")
            self.cards.delete(card)
        logger.info("Carousel card %s deleted", card_id)
