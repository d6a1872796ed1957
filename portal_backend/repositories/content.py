"""Content store for competitions and carousel insight cards."""

from __future__ import annotations

from sqlalchemy.orm import Session

from portal_backend.models.carousel import CarouselCard
from portal_backend.models.competition import Competition
from portal_backend.repositories import carousel_shapes


class CompetitionStore:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> list[Competition]:
        return self.db.query(Competition).order_by(Competition.name.asc()).all()

    def get(self, competition_id: int) -> Competition | None:
        return self.db.query(Competition).filter(Competition.id == competition_id).first()

    def get_many(self, competition_ids: set[int]) -> dict[int, Competition]:
        if not competition_ids:
            return {}
        rows = self.db.query(Competition).filter(Competition.id.in_(competition_ids)).all()
        return {row.id: row for row in rows}

    def create(self, name: str, icon: str | None = None) -> Competition:
        competition = Competition(name=name, icon=icon)
        self.db.add(competition)
        self.db.commit()
        self.db.refresh(competition)
        return competition

    def delete(self, competition: Competition) -> None:
        self.db.delete(competition)
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()


class CarouselStore:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> list[CarouselCard]:
        return self.db.query(CarouselCard).order_by(CarouselCard.id.asc()).all()

    def get(self, card_id: int) -> CarouselCard | None:
        return self.db.query(CarouselCard).filter(CarouselCard.id == card_id).first()

    def create(self, fields: dict, parents: list[dict] | None) -> CarouselCard:
        card = CarouselCard(**fields)
        card.parents = carousel_shapes.serialize_parents(parents)
        card.dropdowns = None
        self.db.add(card)
        self.db.commit()
        self.db.refresh(card)
        return card

    def replace(self, card: CarouselCard, fields: dict, parents: list[dict] | None) -> CarouselCard:
        for key, value in fields.items():
            setattr(card, key, value)
        card.parents = carousel_shapes.serialize_parents(parents)
        card.dropdowns = None
        self.db.commit()
        self.db.refresh(card)
        return card

    def delete(self, card: CarouselCard) -> None:
        self.db.delete(card)
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
