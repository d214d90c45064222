# app/repos/customer_repo.py
from sqlalchemy import select, func

from app.data.models.customer import CustomerModel
from app.repos.base import BaseRepo


class CustomerRepo(BaseRepo):
    def get(self, customer_id: int) -> CustomerModel | None:
        return self.db.get(CustomerModel, customer_id)

    def get_by_email(self, email: str) -> CustomerModel | None:
        return self.db.execute(
            select(CustomerModel).where(func.lower(CustomerModel.email) == email.lower())
        ).scalar_one_or_none()
