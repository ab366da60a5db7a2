"""
Tests for model helpers: password hashing, role checks, listing validation,
order pricing and deliverable defaults.
"""

import uuid
from decimal import Decimal

import pytest

from portal.models.deliverable import Deliverable, DeliverableType
from portal.models.order import Order
from portal.models.property import Property
from portal.models.user import User, UserRole


class TestUserModel:

    def test_password_hashing(self):
        hashed = User.hash_password("password123")
        user = User(email="a@example.com", full_name="A", hashed_password=hashed, role=UserRole.AGENT)

        assert hashed != "password123"
        assert user.verify_password("password123")
        assert not user.verify_password("password124")

    def test_short_password_rejected(self):
        with pytest.raises(ValueError):
            User.hash_password("short")

    def test_email_normalization(self):
        assert User.validate_email_format("Agent@Example.COM") == "agent@example.com"
        with pytest.raises(ValueError):
            User.validate_email_format("not-an-email")

    @pytest.mark.parametrize("role,is_staff", [
        (UserRole.AGENT, False),
        (UserRole.BROKERAGE_ADMIN, False),
        (UserRole.UPCA_ADMIN, True),
    ])
    def test_roles(self, role, is_staff):
        user = User(id=uuid.uuid4(), email="a@example.com", full_name="A", hashed_password="x", role=role)
        assert user.is_staff is is_staff
        assert user.is_customer is not is_staff

    def test_can_access(self):
        owner_id = uuid.uuid4()
        agent = User(id=owner_id, email="a@example.com", full_name="A", hashed_password="x", role=UserRole.AGENT)
        staff = User(id=uuid.uuid4(), email="s@example.com", full_name="S", hashed_password="x", role=UserRole.UPCA_ADMIN)

        assert agent.can_access(owner_id)
        assert not agent.can_access(uuid.uuid4())
        assert staff.can_access(owner_id)


class TestPropertyModel:

    def make(self, **overrides) -> Property:
        data = {"address": "42 Harbour Street", "beds": 3, "baths": 2, "sqft": 1850, "price": Decimal("899000")}
        data.update(overrides)
        return Property(**data)

    def test_valid_listing(self):
        listing = self.make()
        assert listing.validate_price()
        assert listing.validate_rooms()
        assert listing.validate_sqft()

    def test_invalid_listing(self):
        assert not self.make(price=Decimal("0")).validate_price()
        assert not self.make(beds=51).validate_rooms()
        assert not self.make(sqft=0).validate_sqft()

    def test_ownership(self):
        agent_id = uuid.uuid4()
        assert self.make(agent_id=agent_id).is_owned_by(agent_id)


class TestOrderModel:

    def test_subtotal_uses_price_snapshot(self):
        order = Order(
            services=["Real Estate Photography", "Drone Photos & Films"],
            service_prices={"Real Estate Photography": 250.0, "Drone Photos & Films": 300.0}
        )
        assert order.calculate_subtotal() == Decimal("550.00")
        assert order.has_service("Drone Photos & Films")
        assert not order.has_service("Property Video Tours")


class TestDeliverableModel:

    def test_default_types(self):
        assert Deliverable.default_type_for_service("Property Microsites & Agent Websites") == DeliverableType.LINK
        assert Deliverable.default_type_for_service("Real Estate Photography") == DeliverableType.OTHER
        assert Deliverable.default_type_for_service(None) == DeliverableType.OTHER
