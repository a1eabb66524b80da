"""Multi-step employee writes with a single, inspectable terminal outcome.

An update runs as::

    IDLE -> UPDATING -> UPDATE_FAILED
                     -> UPDATE_SUCCEEDED -> NO_ASSET_STEP
                                         -> UPLOADING_ASSET -> UPLOAD_FAILED
                                                            -> UPLOAD_SUCCEEDED

The photo upload only starts after the record update committed, and a failed
upload never rolls that update back. Deletion is a separate, one-step
sequence guarded by the protected super admin id.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from src.auth.context import AuthContext
from src.config import PROFILE_PHOTO_BUCKET, SUPER_ADMIN_ID
from src.errors import DomainError, Ok, ProtectedResourceError, ValidationError, as_result
from src.storage.base import Cache, ObjectStore, RecordStore
from src.storage.cache import EMPLOYEES_KEY, employee_key
from src.users.schemas import Employee, EmployeeUpdate
from src.users.service import update_employee, upload_profile_photo

logger = logging.getLogger(__name__)


class MutationState(str, enum.Enum):
    IDLE = "idle"
    UPDATING = "updating"
    UPDATE_FAILED = "update_failed"
    UPDATE_SUCCEEDED = "update_succeeded"
    NO_ASSET_STEP = "no_asset_step"
    UPLOADING_ASSET = "uploading_asset"
    UPLOAD_FAILED = "upload_failed"
    UPLOAD_SUCCEEDED = "upload_succeeded"


TERMINAL_STATES = frozenset({
    MutationState.UPDATE_FAILED,
    MutationState.NO_ASSET_STEP,
    MutationState.UPLOAD_FAILED,
    MutationState.UPLOAD_SUCCEEDED,
})


@dataclass(frozen=True)
class PhotoUpload:
    filename: str
    content: bytes


@dataclass
class MutationOutcome:
    state: MutationState = MutationState.IDLE
    history: list = field(default_factory=lambda: [MutationState.IDLE])
    employee: Optional[Employee] = None
    avatar_url: Optional[str] = None
    update_error: Optional[DomainError] = None
    upload_error: Optional[DomainError] = None

    def advance(self, state: MutationState) -> None:
        self.state = state
        self.history.append(state)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def updated(self) -> bool:
        return self.employee is not None

    @property
    def succeeded(self) -> bool:
        return self.state in (MutationState.NO_ASSET_STEP, MutationState.UPLOAD_SUCCEEDED)

    @property
    def partial(self) -> bool:
        """Record updated, photo not stored."""
        return self.state == MutationState.UPLOAD_FAILED


class EmployeeMutationSequencer:
    def __init__(
        self,
        store: RecordStore,
        objects: ObjectStore,
        cache: Cache,
        bucket: str = PROFILE_PHOTO_BUCKET,
        protected_ids: Iterable[str] = (SUPER_ADMIN_ID,),
    ):
        self.store = store
        self.objects = objects
        self.cache = cache
        self.bucket = bucket
        self.protected_ids = frozenset(protected_ids)

    async def _invalidate(self, employee_id: str) -> None:
        await self.cache.invalidate(employee_key(employee_id))
        await self.cache.invalidate(EMPLOYEES_KEY)

    async def update(
        self,
        ctx: AuthContext,
        employee_id: str,
        update: EmployeeUpdate,
        photo: Optional[PhotoUpload] = None,
        on_reset: Optional[Callable[[], None]] = None,
        allow_self: bool = False,
    ) -> MutationOutcome:
        outcome = MutationOutcome()
        outcome.advance(MutationState.UPDATING)

        result = await update_employee(ctx, self.store, employee_id, update, allow_self=allow_self)
        if not result.ok:
            outcome.update_error = result.error
            outcome.advance(MutationState.UPDATE_FAILED)
            return outcome

        employee = result.value
        outcome.employee = employee
        outcome.advance(MutationState.UPDATE_SUCCEEDED)
        await self._invalidate(employee.id)

        if photo is None:
            outcome.advance(MutationState.NO_ASSET_STEP)
            self._reset(on_reset)
            return outcome

        outcome.advance(MutationState.UPLOADING_ASSET)
        # keyed by the id the store returned, not the one we were given
        upload = await upload_profile_photo(
            ctx, self.store, self.objects, employee.id, photo.filename, photo.content, bucket=self.bucket,
        )
        if upload.ok:
            outcome.avatar_url = upload.value
            outcome.employee = employee.model_copy(update={"avatar": upload.value})
            await self._invalidate(employee.id)
            outcome.advance(MutationState.UPLOAD_SUCCEEDED)
        else:
            logger.warning("Employee %s updated but photo upload failed: %s", employee.id, upload.message)
            outcome.upload_error = upload.error
            outcome.advance(MutationState.UPLOAD_FAILED)

        self._reset(on_reset)
        return outcome

    @staticmethod
    def _reset(on_reset: Optional[Callable[[], None]]) -> None:
        if on_reset is not None:
            on_reset()

    @as_result
    async def delete(self, ctx: AuthContext, employee_id: str):
        if not employee_id:
            raise ValidationError("Cannot delete: no employee ID provided")
        if employee_id in self.protected_ids:
            raise ProtectedResourceError("Cannot delete super admin account")
        ctx.require_admin()

        await self.store.delete("users", employee_id)
        await self.cache.invalidate(EMPLOYEES_KEY)
        await self.cache.remove(employee_key(employee_id))
        logger.info("Employee %s deleted by %s", employee_id, ctx.user.id)
        return Ok(employee_id, "Employee deleted successfully")
