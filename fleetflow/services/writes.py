# fleetflow/services/writes.py
"""Sequential multi-record writes with compensation.

A lifecycle transition touches up to three documents (trip, vehicle,
driver). The store offers no multi-document atomicity here, so the writes
are issued one at a time, each awaited before the next. When one fails,
the writes already applied are reverted in reverse order and the caller
gets an ``OperationFailed`` saying whether the revert fully succeeded.
Nothing is retried.
"""
import logging
from typing import Any, List, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from fleetflow.crud.base import CRUDBase
from fleetflow.errors import FleetFlowError, OperationFailed
from fleetflow.models.base import DocumentModel

logger = logging.getLogger(__name__)


class _Step:
    description = ""

    async def apply(self, db: AsyncIOMotorDatabase) -> None:
        raise NotImplementedError

    async def revert(self, db: AsyncIOMotorDatabase) -> None:
        raise NotImplementedError


class _UpdateStep(_Step):
    def __init__(self, crud: CRUDBase, obj: DocumentModel, values: Mapping[str, Any]):
        self.crud = crud
        self.id = obj.id
        self.values = dict(values)
        self.previous = {k: getattr(obj, k) for k in values}
        self.description = f"update {crud.entity} {obj.id}"

    async def apply(self, db):
        await self.crud.update(db, self.id, values=self.values)

    async def revert(self, db):
        await self.crud.update(db, self.id, values=self.previous)


class _CreateStep(_Step):
    def __init__(self, crud: CRUDBase, obj_in: Mapping[str, Any]):
        self.crud = crud
        self.obj_in = dict(obj_in)
        self.created: Optional[DocumentModel] = None
        self.description = f"create {crud.entity}"

    async def apply(self, db):
        self.created = await self.crud.create(db, obj_in=self.obj_in)

    async def revert(self, db):
        if self.created is not None:
            await self.crud.remove(db, self.created.id)


class _RemoveStep(_Step):
    def __init__(self, crud: CRUDBase, obj: DocumentModel):
        self.crud = crud
        self.obj = obj
        self.description = f"delete {crud.entity} {obj.id}"

    async def apply(self, db):
        await self.crud.remove(db, self.obj.id)

    async def revert(self, db):
        await self.crud.restore(db, self.obj)


class WriteSequence:
    """Collects writes, then applies them in order with ``commit``::

        writes = WriteSequence(db, "complete trip")
        writes.update(crud.trip, trip, {"status": TripStatus.completed})
        writes.update(crud.vehicle, vehicle, {"status": VehicleStatus.available})
        await writes.commit()
    """

    def __init__(self, db: AsyncIOMotorDatabase, label: str):
        self.db = db
        self.label = label
        self.steps: List[_Step] = []

    def update(self, crud: CRUDBase, obj: DocumentModel, values: Mapping[str, Any]) -> "WriteSequence":
        self.steps.append(_UpdateStep(crud, obj, values))
        return self

    def create(self, crud: CRUDBase, obj_in: Mapping[str, Any]) -> _CreateStep:
        step = _CreateStep(crud, obj_in)
        self.steps.append(step)
        return step

    def remove(self, crud: CRUDBase, obj: DocumentModel) -> "WriteSequence":
        self.steps.append(_RemoveStep(crud, obj))
        return self

    async def commit(self) -> None:
        applied: List[_Step] = []
        for step in self.steps:
            try:
                await step.apply(self.db)
            except FleetFlowError as e:
                logger.error("%s: %s failed: %s", self.label, step.description, e)
                compensated = await self._compensate(applied)
                raise OperationFailed(
                    message=f"Failed to {self.label}",
                    details=f"{step.description} failed: {e}",
                    compensated=compensated,
                )
            applied.append(step)

    async def _compensate(self, applied: List[_Step]) -> bool:
        compensated = True
        for step in reversed(applied):
            try:
                await step.revert(self.db)
                logger.warning("%s: reverted %s", self.label, step.description)
            except FleetFlowError as e:
                compensated = False
                logger.error("%s: could not revert %s: %s", self.label, step.description, e)
        return compensated

