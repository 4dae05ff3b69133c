"""
Verify Manager PIN Use Case

A signed-in user asks a manager or owner at the till to approve an action.
"""

import logging
from typing import Optional

from libs.result import Error, Result, Return
from tillflow.app.services.approval_pin import verify_manager_pin
from tillflow.app.services.login_throttle import LoginThrottle
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import AuthenticatedUser
from .dtos import ManagerApproval

logger = logging.getLogger(__name__)


class VerifyManagerPinUseCase:
    """
    Use case for checking a manager approval PIN.

    Business Rules:
    - Only PINs of active MANAGER/OWNER users of the caller's business count
    - Wrong PINs count against a throttle keyed by business and client IP;
      a correct PIN clears it
    """

    def __init__(self, uow: UnitOfWork, throttle: LoginThrottle):
        self.uow = uow
        self.throttle = throttle

    async def execute(
        self,
        current: AuthenticatedUser,
        pin: str,
        ip_address: Optional[str] = None,
    ) -> Result[ManagerApproval]:
        if not pin.strip():
            return Return.err(Error("MISSING_PIN", "Manager PIN is required"))

        throttle_key = f"pin:{current.business_id}"
        if self.throttle.status(throttle_key, ip_address).is_blocked:
            return Return.err(
                Error("TOO_MANY_ATTEMPTS", "Too many wrong PINs, try again later")
            )

        async with self.uow:
            approver = await verify_manager_pin(self.uow, current.business_id, pin)
            approval = (
                ManagerApproval(
                    approver_id=approver.id,
                    approver_name=approver.name,
                    approver_role=approver.role,
                )
                if approver is not None
                else None
            )

        if approval is None:
            self.throttle.record_failure(throttle_key, ip_address)
            logger.warning(f"Wrong manager PIN entered by user {current.id}")
            return Return.err(Error("INVALID_PIN", "Invalid manager PIN"))

        self.throttle.clear(throttle_key, ip_address)
        logger.info(f"User {current.id} approved by {approval.approver_id}")
        return Return.ok(approval)
