from sqlalchemy.orm import Session
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError
from storefront.repos.user_repo import UserRepo
from storefront.domain.schemas import UserCreate, UserRead


class UserService:
    """Uzytkownicy tworzeni po rejestracji u zewnetrznego dostawcy tozsamosci."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user(payload.id) if payload.id else None
        if not existing and payload.email:
            existing = self.repo.get_user_by_email(payload.email)
        if existing:
            return UserRead.model_validate(existing)

        user = UserModel(name=payload.name, email=payload.email)
        if payload.id:
            user.id = payload.id
        created = self.repo.create_user(user)
        return UserRead.model_validate(created)

    def get_user(self, user_id: str) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserRead.model_validate(user)
