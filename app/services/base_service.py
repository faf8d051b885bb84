from typing import Type, TypeVar, Optional, List
from pydantic import BaseModel
from sqlalchemy.orm import Session

ModelType = TypeVar('ModelType')
UpdateSchemaType = TypeVar('UpdateSchemaType')


class BaseService:
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def create(self, db: Session, obj_in, **extra) -> ModelType:
        """
        Create a new record in the database

        Args:
            db: Database session
            obj_in: Either a SQLAlchemy model or a Pydantic schema
            extra: Column values that are not part of the schema

        Returns:
            The created model instance
        """
        if isinstance(obj_in, BaseModel):
            db_obj = self.model(**obj_in.model_dump(), **extra)
        else:
            db_obj = obj_in
            for key, value in extra.items():
                setattr(db_obj, key, value)

        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    def get_for_update(self, db: Session, id: int) -> Optional[ModelType]:
        """Load a row and lock it until the current transaction ends."""
        return db.query(self.model).filter(self.model.id == id).with_for_update().first()

    def get_all(self, db: Session, skip: int = 0, limit: int = 100) -> List[ModelType]:
        return db.query(self.model).order_by(self.model.id).offset(skip).limit(limit).all()

    def update(self, db: Session, db_obj: ModelType, obj_in: UpdateSchemaType) -> ModelType:
        for key, value in obj_in.model_dump(exclude_unset=True).items():
            setattr(db_obj, key, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj
