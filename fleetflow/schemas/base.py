# fleetflow/schemas/base.py
from pydantic import BaseModel, ConfigDict

from fleetflow.models.base import DocumentModel

class OutSchema(BaseModel):
    id: str

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @classmethod
    def from_model(cls, obj: DocumentModel):
        return cls.model_validate(obj.model_dump())
