# backend/inventory_api/services/permission_service.py
from dataclasses import dataclass
from typing import Optional
from inventory_api.models.purchase_order import OrderStatus
from inventory_api.models.user import User, UserRole


@dataclass(frozen=True)
class Actor:
    """The user a service call acts on behalf of."""

    id: int
    role: str
    username: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, role=user.role, username=user.username)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


# Roles that may work with purchase orders at all
ORDER_ROLES = frozenset({UserRole.ADMIN.value, UserRole.STAFF.value})

# Statuses in which an admin may still edit an order
ADMIN_EDITABLE = frozenset({OrderStatus.PENDING.value, OrderStatus.PROCESSING.value})


class PermissionService:
    """Pure permission decisions over roles and order state. No I/O."""

    @staticmethod
    def can_edit(role: Optional[str], order_status: Optional[str], is_owner: bool) -> bool:
        """Whether ``role`` may update an order currently in ``order_status``.

        ADMIN may edit PENDING and PROCESSING orders. STAFF may edit only
        PENDING orders they created. Everyone else may not.
        """
        if role == UserRole.ADMIN.value:
            return order_status in ADMIN_EDITABLE
        if role == UserRole.STAFF.value:
            return order_status == OrderStatus.PENDING.value and is_owner
        return False

    @staticmethod
    def can_create(role: Optional[str]) -> bool:
        return role in ORDER_ROLES

    @staticmethod
    def can_change_status(role: Optional[str]) -> bool:
        return role in ORDER_ROLES

    @staticmethod
    def can_delete(role: Optional[str]) -> bool:
        return role in ORDER_ROLES
