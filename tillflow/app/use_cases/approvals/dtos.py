from uuid import UUID

from pydantic import BaseModel

from tillflow.domain.entities import Role


class ManagerApproval(BaseModel):
    """Who approved; the PIN itself never leaves the use case"""

    approver_id: UUID
    approver_name: str
    approver_role: Role
