# app/repos/base.py
from sqlalchemy.orm import Session


class BaseRepo:
    """
    Wspolna czesc repozytoriow. Repo nie commituje samo,
    granice transakcji ustala serwis (commit / rollback).
    """

    def __init__(self, db: Session):
        self.db = db

    def add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj

    def delete(self, obj) -> None:
        self.db.delete(obj)
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, obj):
        self.db.refresh(obj)
        return obj
