# app/services/customer_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.customer import CustomerModel
from app.domain.errors import Conflict, NotFound
from app.domain.schemas import CustomerIn
from app.repos.customer_repo import CustomerRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CustomerService:
    def __init__(self, db: Session):
        self.repo = CustomerRepo(db)

    def create_customer(self, payload: CustomerIn) -> CustomerModel:
        if self.repo.get_by_email(payload.email):
            raise Conflict(f"Customer with email {payload.email} already exists")

        try:
            customer = self.repo.add(self._build(payload))
            self.repo.commit()
        except IntegrityError:
            # rownolegly checkout albo rejestracja z tym samym emailem
            self.repo.rollback()
            raise Conflict(f"Customer with email {payload.email} already exists")

        logger.info(f"Customer {customer.id} created")
        return customer

    def get_customer(self, customer_id: int) -> CustomerModel:
        customer = self.repo.get(customer_id)
        if not customer:
            raise NotFound("Customer", customer_id)
        return customer

    def get_or_create(self, payload: CustomerIn) -> CustomerModel:
        """
        Klient po emailu albo nowy. Bez commita - wchodzi w transakcje checkoutu.
        Wolajacy trzyma customer_lock_key(email), odczyt + insert nie sciga sie z innym checkoutem.
        """
        existing = self.repo.get_by_email(payload.email)
        if existing:
            return existing

        customer = self.repo.add(self._build(payload))
        logger.info(f"Customer {customer.id} created for {payload.email}")
        return customer

    @staticmethod
    def _build(payload: CustomerIn) -> CustomerModel:
        return CustomerModel(
            name=payload.name,
            email=payload.email.lower(),
            phone=payload.phone,
            address=payload.address.model_dump() if payload.address else None,
        )
