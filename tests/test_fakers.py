from __future__ import annotations

from movebridge.testing import Faker, fake_address, fake_hash
from movebridge.utils import is_valid_address


def test_same_seed_same_sequence() -> None:
    first, second = Faker(42), Faker(42)

    assert [first.fake_address() for _ in range(3)] == [second.fake_address() for _ in range(3)]
    assert first.fake_signature() == second.fake_signature()
    assert first.fake_event() == second.fake_event()


def test_different_seeds_differ() -> None:
    assert fake_address(1) != fake_address(2)
    assert fake_hash(1) != fake_hash(2)


def test_generated_values_are_well_formed() -> None:
    faker = Faker("demo")

    assert is_valid_address(faker.fake_address())
    assert len(faker.fake_hash()) == 66
    assert len(faker.fake_public_key()) == 32
    assert len(faker.fake_signature()) == 64
    assert int(faker.fake_amount(minimum=5, maximum=5)) == 5


def test_fake_event_and_response() -> None:
    faker = Faker(3)

    event = faker.fake_event("0x1::coin::DepositEvent", sequence_number=9, data={"amount": "1"})
    assert event.sequence == 9
    assert event.data == {"amount": "1"}

    response = faker.fake_transaction_response("0xabc", success=False)
    assert response.hash == "0xabc"
    assert response.success is False
