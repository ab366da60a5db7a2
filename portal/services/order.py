"""
Order service: placing orders, staff status and asset updates, and the
customer-facing order views.

Order reads always pass through the override registry, so a status, payment
status or asset change applied by staff shows up on the next read even before
the database row reflects it.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from portal.config import settings
from portal.models.order import Order, OrderStatus, PaymentStatus
from portal.models.deliverable import Deliverable, DeliverableType
from portal.models.user import User
from portal.overrides.registry import OverrideRegistry
from portal.repositories.order import OrderRepository
from portal.repositories.property import PropertyRepository
from portal.repositories.payment_method import PaymentMethodRepository
from portal.schemas.order import OrderCreate, OrderUpdate, AssetCreate
from portal.services.catalog import CatalogService
from portal.services.payment_gateway import StripeGateway
from portal.services.stats import money, with_tax
from portal.services.timeline import build_timeline, client_status_label
from portal.utils.exceptions import (
    APIException,
    NotFoundError,
    ForbiddenError,
    ValidationError,
    BadRequestError,
    PaymentFailedError,
    OverrideStorageError
)
import uuid
import logging

logger = logging.getLogger(__name__)


def parse_uuid(value: Any, field: str = "id") -> uuid.UUID:
    """Parse an id from a request body or path, raising a 422 on bad input."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {field}", field_errors=[{"field": field, "message": "Must be a valid UUID"}])


class OrderService:
    """
    Business logic for service orders.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        overrides: OverrideRegistry,
        gateway: Optional[StripeGateway] = None
    ):
        self.db = db_session
        self.overrides = overrides
        self.gateway = gateway
        self.order_repo = OrderRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.payment_method_repo = PaymentMethodRepository(db_session)
        self.catalog = CatalogService(db_session)

    # Serialization

    def serialize(self, order: Order) -> Dict[str, Any]:
        """Order record with overrides merged and derived display fields added."""
        merged = self.overrides.merge_order(order.to_dict())
        merged["client_status"] = client_status_label(merged["status"])
        merged["total_with_tax"] = float(with_tax(merged["total_amount"], settings.tax_rate))
        return merged

    async def _load(self, order_id: uuid.UUID) -> Order:
        order = await self.order_repo.get_order_with_details(order_id)
        if not order:
            raise NotFoundError("Order", str(order_id))
        return order

    async def _load_for_user(self, order_id: uuid.UUID, user: User) -> Order:
        order = await self._load(order_id)
        if not user.can_access(order.agent_id):
            logger.warning(f"User {user.email} denied access to order {order_id}")
            raise ForbiddenError("You can only access your own orders")
        return order

    def _set_override(self, namespace: str, order_id: uuid.UUID, value: Any) -> None:
        store = self.overrides.stores()[namespace]
        try:
            store.set_override(order_id, value)
        except (OSError, TypeError, ValueError) as e:
            logger.error(
                f"Failed to write {namespace} override for order {order_id}: {e}",
                extra={"namespace": namespace, "order_id": str(order_id)}
            )
            raise OverrideStorageError()

    # Placing orders

    async def create_order(self, order_data: OrderCreate, current_user: User) -> Dict[str, Any]:
        """
        Place an order for one of the user's properties.

        Paid orders are charged before the order row exists; a failed charge
        leaves nothing behind. Drafts are stored unpaid.

        Raises:
            NotFoundError: If the property or payment method does not exist
            ForbiddenError: If the property belongs to someone else
            ServiceUnavailableForOrderError: If a service is unknown or inactive
            PaymentFailedError: If the payment gateway declines the charge
        """
        try:
            property_id = parse_uuid(order_data.property_id, "property_id")
            property_obj = await self.property_repo.get_by_id(property_id)
            if not property_obj:
                raise NotFoundError("Property", str(property_id))
            if not property_obj.is_owned_by(current_user.id):
                raise ForbiddenError("You can only order services for your own properties")

            prices = await self.catalog.resolve_services(order_data.services)
            subtotal = money(sum(prices.values(), Decimal("0")))

            create_data = {
                "property_id": property_id,
                "agent_id": current_user.id,
                "services": list(prices),
                "service_prices": {name: float(price) for name, price in prices.items()},
                "shoot_date": order_data.shoot_date,
                "shoot_time": order_data.shoot_time,
                "notes": order_data.notes,
                "total_amount": subtotal,
            }

            if order_data.save_as_draft:
                create_data["status"] = OrderStatus.DRAFT
                create_data["payment_status"] = PaymentStatus.PENDING
            else:
                payment = await self._charge(order_data, current_user, subtotal, property_obj.address)
                create_data["status"] = OrderStatus.SCHEDULED if order_data.shoot_date else OrderStatus.DRAFT
                create_data["payment_status"] = PaymentStatus.PAID
                create_data["payment_intent_id"] = payment.get("payment_intent_id")

            try:
                order = await self.order_repo.create(create_data)
            except Exception as e:
                if create_data.get("payment_intent_id"):
                    logger.error(
                        f"Order insert failed after charge {create_data['payment_intent_id']}: {e}",
                        extra={"payment_intent_id": create_data["payment_intent_id"], "agent_id": str(current_user.id)}
                    )
                raise

            order = await self._load(order.id)
            logger.info(
                f"Order {order.id} placed by {current_user.email}: {len(order.services)} services, "
                f"subtotal {subtotal}, status {order.status.value}"
            )
            return self.serialize(order)

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create order for {current_user.email}: {e}")
            raise BadRequestError("Failed to create order")

    async def _charge(self, order_data: OrderCreate, user: User, subtotal: Decimal, address: str) -> Dict[str, Any]:
        method_id = parse_uuid(order_data.payment_method_id, "payment_method_id")
        method = await self.payment_method_repo.get_by_id(method_id)
        if not method or method.user_id != user.id:
            raise NotFoundError("Payment method", str(method_id))
        if self.gateway is None:
            raise PaymentFailedError("Payment gateway is not configured")

        amount = with_tax(subtotal, settings.tax_rate)
        result = await self.gateway.create_payment_intent(
            amount,
            method.gateway_reference,
            description=f"Marketing services for {address}",
            metadata={"agent_id": str(user.id)}
        )
        if not result.get("success"):
            logger.warning(f"Payment failed for {user.email}: {result.get('error')}")
            raise PaymentFailedError(result.get("error") or "Payment failed")
        return result

    # Reads

    async def get_order(self, order_id: uuid.UUID, current_user: User) -> Dict[str, Any]:
        return self.serialize(await self._load_for_user(order_id, current_user))

    async def merged_orders(
        self,
        agent_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """All matching orders, newest first, with overrides applied."""
        orders = await self.order_repo.list_orders(agent_id=agent_id, search=search)
        return [self.serialize(order) for order in orders]

    async def list_orders(
        self,
        current_user: User,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
        all_customers: bool = False
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        List orders for the user (or every customer, for staff).

        The status filter applies to the merged status so that a locally
        applied status change is reflected in filtered lists too.

        Returns:
            Tuple of (orders for the page, total matching count)
        """
        if all_customers and not current_user.is_staff:
            raise ForbiddenError("Only staff can list every order")

        agent_id = None if all_customers else current_user.id
        orders = await self.merged_orders(agent_id=agent_id, search=search)
        if status is not None:
            orders = [order for order in orders if order["status"] == OrderStatus(status).value]

        start = (page - 1) * page_size
        return orders[start:start + page_size], len(orders)

    async def get_timeline(self, order_id: uuid.UUID, current_user: User) -> Dict[str, Any]:
        return build_timeline(await self.get_order(order_id, current_user))

    async def list_deliverables(
        self,
        current_user: User,
        deliverable_type: Optional[DeliverableType] = None,
        search: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Orders with delivered assets, for the customer deliverables page.
        Orders left with no assets after the type filter are omitted.
        """
        results = []
        for order in await self.merged_orders(agent_id=current_user.id, search=search):
            assets = order["deliverables"] or []
            if deliverable_type is not None:
                assets = [a for a in assets if a["type"] == DeliverableType(deliverable_type).value]
            if not assets:
                continue
            results.append({
                "order_id": order["id"],
                "property_address": order["property_address"],
                "status": order["status"],
                "shoot_date": order["shoot_date"],
                "deliverables": assets,
            })
        return results

    # Staff updates

    async def update_order(self, order_id: uuid.UUID, update_data: OrderUpdate) -> Dict[str, Any]:
        """Edit shoot details, notes or services; changing services re-prices the order."""
        await self._load(order_id)
        changes = update_data.model_dump(exclude_unset=True)
        try:
            if changes.get("services"):
                prices = await self.catalog.resolve_services(changes["services"])
                changes["services"] = list(prices)
                changes["service_prices"] = {name: float(price) for name, price in prices.items()}
                changes["total_amount"] = money(sum(prices.values(), Decimal("0")))

            await self.order_repo.update(order_id, changes)
            order = await self._load(order_id)
            logger.info(f"Order {order_id} updated: {', '.join(changes) or 'no changes'}")
            return self.serialize(order)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update order {order_id}: {e}")
            raise BadRequestError("Failed to update order")

    async def update_status(self, order_id: uuid.UUID, status: OrderStatus) -> Dict[str, Any]:
        """
        Change the production status. The override is stored before the row is
        written so the new status is visible even if the row write lags.
        """
        status = OrderStatus(status)
        await self._load(order_id)
        self._set_override("order_status", order_id, status.value)
        await self.order_repo.update(order_id, {"status": status})
        logger.info(f"Order {order_id} status set to {status.value}")
        return self.serialize(await self._load(order_id))

    async def update_payment_status(self, order_id: uuid.UUID, payment_status: PaymentStatus) -> Dict[str, Any]:
        payment_status = PaymentStatus(payment_status)
        await self._load(order_id)
        self._set_override("payment_status", order_id, payment_status.value)
        await self.order_repo.update(order_id, {"payment_status": payment_status})
        logger.info(f"Order {order_id} payment status set to {payment_status.value}")
        return self.serialize(await self._load(order_id))

    async def add_asset(self, order_id: uuid.UUID, asset: AssetCreate) -> Dict[str, Any]:
        """
        Attach an asset to one of the order's services and refresh the asset
        override with the order's full asset list.
        """
        order = await self._load(order_id)
        if not order.has_service(asset.service_name):
            raise BadRequestError(f"Order does not include the service '{asset.service_name}'")

        asset_type = asset.type or Deliverable.default_type_for_service(asset.service_name)
        data = {
            "service_name": asset.service_name,
            "url": asset.url,
            "label": asset.label or asset.service_name,
            "type": DeliverableType(asset_type),
            "is_web_optimized": asset.is_web_optimized,
            "is_print_optimized": asset.is_print_optimized,
        }
        await self.order_repo.add_deliverable(order_id, data)

        order = await self._load(order_id)
        self._set_override("order_assets", order_id, [d.to_dict() for d in order.deliverables])
        return self.serialize(order)

    async def remove_asset(self, order_id: uuid.UUID, deliverable_id: uuid.UUID) -> Dict[str, Any]:
        await self._load(order_id)
        if not await self.order_repo.remove_deliverable(order_id, deliverable_id):
            raise NotFoundError("Deliverable", str(deliverable_id))

        order = await self._load(order_id)
        self._set_override("order_assets", order_id, [d.to_dict() for d in order.deliverables])
        return self.serialize(order)
