# app/repos/category_repo.py
from sqlalchemy import select, func

from app.data.models.category import CategoryModel
from app.repos.base import BaseRepo


class CategoryRepo(BaseRepo):
    def get(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_by_name(self, name: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(func.lower(CategoryModel.name) == name.lower())
        ).scalar_one_or_none()

    def list(self) -> list[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars())
