"""
Tests for repository queries: listing filters, order search, default cards
and message read state.
"""

import uuid

from portal.models.property import PropertyStatus
from portal.repositories.message import MessageRepository
from portal.repositories.order import OrderRepository
from portal.repositories.payment_method import PaymentMethodRepository
from portal.repositories.property import PropertyRepository
from portal.repositories.service_pricing import ServicePricingRepository
from portal.repositories.user import UserRepository
from tests.conftest import PaymentMethodFactory, PropertyFactory


class TestUserRepository:

    async def test_get_by_email_is_case_insensitive(self, db_session, test_agent):
        found = await UserRepository(db_session).get_by_email("AGENT@test.com")
        assert found.id == test_agent.id

    async def test_authenticate(self, db_session, test_agent):
        repo = UserRepository(db_session)
        assert (await repo.authenticate_user(test_agent.email, "testpassword123")).id == test_agent.id
        assert await repo.authenticate_user(test_agent.email, "wrong-password") is None


class TestPropertyRepository:

    async def test_filters_and_search(self, db_session, test_agent, other_agent):
        repo = PropertyRepository(db_session)
        await PropertyFactory.create_property(db_session, test_agent.id, address="42 Harbour Street")
        await PropertyFactory.create_property(
            db_session, test_agent.id, address="7 Queen Street", status=PropertyStatus.SOLD, mls_number="C5829173"
        )
        await PropertyFactory.create_property(db_session, other_agent.id, address="9 King Street")

        _, total = await repo.list_properties(agent_id=test_agent.id)
        assert total == 2

        sold, total = await repo.list_properties(status=PropertyStatus.SOLD)
        assert total == 1 and sold[0].address == "7 Queen Street"

        by_mls, _ = await repo.list_properties(search="c5829")
        assert [p.address for p in by_mls] == ["7 Queen Street"]

        assert await repo.count_for_agent(other_agent.id) == 1


class TestOrderRepository:

    async def test_search_by_address_and_id(self, db_session, test_agent, test_property):
        repo = OrderRepository(db_session)
        order = await repo.create({
            "property_id": test_property.id,
            "agent_id": test_agent.id,
            "services": ["Real Estate Photography"],
            "service_prices": {"Real Estate Photography": 250.0},
            "total_amount": 250,
        })

        assert [o.id for o in await repo.list_orders(search="HARBOUR")] == [order.id]
        assert [o.id for o in await repo.list_orders(search=str(order.id)[:8])] == [order.id]
        assert await repo.list_orders(agent_id=uuid.uuid4()) == []
        assert await repo.count_for_property(test_property.id) == 1

    async def test_deliverables(self, db_session, test_agent, test_property):
        repo = OrderRepository(db_session)
        order = await repo.create({
            "property_id": test_property.id,
            "agent_id": test_agent.id,
            "services": ["Real Estate Photography"],
            "service_prices": {"Real Estate Photography": 250.0},
            "total_amount": 250,
        })
        deliverable = await repo.add_deliverable(order.id, {
            "label": "Photos",
            "url": "https://media.example.com/photos.zip",
            "service_name": "Real Estate Photography",
        })

        loaded = await repo.get_order_with_details(order.id)
        assert [d.id for d in loaded.deliverables] == [deliverable.id]

        assert await repo.remove_deliverable(order.id, uuid.uuid4()) is False
        assert await repo.remove_deliverable(order.id, deliverable.id) is True
        assert (await repo.get_order_with_details(order.id)).deliverables == []


class TestPaymentMethodRepository:

    async def test_set_default_is_exclusive(self, db_session, test_agent):
        repo = PaymentMethodRepository(db_session)
        first = await PaymentMethodFactory.create_method(db_session, test_agent.id, last4="4242", is_default=True)
        second = await PaymentMethodFactory.create_method(db_session, test_agent.id, last4="1881", is_default=False)

        await repo.set_default(test_agent.id, second.id)

        assert (await repo.get_default(test_agent.id)).id == second.id
        assert [m.last4 for m in await repo.list_for_user(test_agent.id)] == ["1881", "4242"]
        assert (await repo.get_by_id(first.id)).is_default is False


class TestMessageRepository:

    async def test_unread_counts_and_mark_read(self, db_session, test_agent, test_admin):
        repo = MessageRepository(db_session)
        for content in ("one", "two"):
            await repo.create({
                "customer_id": test_agent.id,
                "sender_id": test_agent.id,
                "sender_name": test_agent.full_name,
                "content": content,
                "is_admin": False,
            })
        await repo.create({
            "customer_id": test_agent.id,
            "sender_id": test_admin.id,
            "sender_name": "UPCA Admin",
            "content": "reply",
            "is_admin": True,
        })

        assert await repo.unread_counts() == {test_agent.id: 2}
        assert await repo.mark_read(test_agent.id, from_admin=False) == 2
        assert await repo.unread_counts() == {}
        assert [m.content for m in await repo.list_for_customer(test_agent.id)] == ["one", "two", "reply"]


class TestServicePricingRepository:

    async def test_catalog_lookup(self, db_session):
        repo = ServicePricingRepository(db_session)
        services = await repo.list_services(active_only=True)

        assert services[0].name == "Real Estate Photography"
        found = await repo.get_by_names(["Drone Photos & Films", "Unknown"])
        assert list(found) == ["Drone Photos & Films"]
