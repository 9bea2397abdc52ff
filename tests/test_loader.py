"""Tests for the entity loader."""

from uuid import uuid4

from or_mastery.domain.outcomes import Failed, NotFound, Ok
from or_mastery.services.loader import EntityLoader
from tests.conftest import (
    InMemoryPhotoRepository,
    InMemoryProcedureRepository,
    InMemorySurgeonRepository,
)


def test_load_surgeons_orders_by_last_name(
    loader: EntityLoader, surgeon_repository: InMemorySurgeonRepository
) -> None:
    user_id = uuid4()
    surgeon_repository.add(user_id, "Ben", "Zhou")
    surgeon_repository.add(user_id, "Ada", "Adams")
    surgeon_repository.add(uuid4(), "Other", "Aaron")

    outcome = loader.load_surgeons(user_id)

    assert isinstance(outcome, Ok)
    assert [s.last_name for s in outcome.value] == ["Adams", "Zhou"]


def test_load_surgeon_of_another_user_is_not_found(
    loader: EntityLoader, surgeon_repository: InMemorySurgeonRepository
) -> None:
    surgeon = surgeon_repository.add(uuid4(), "Ada", "Adams")

    assert loader.load_surgeon(uuid4(), surgeon.id) == NotFound()


def test_load_surgeon_detail_lists_procedures_newest_first(
    loader: EntityLoader,
    surgeon_repository: InMemorySurgeonRepository,
    procedure_repository: InMemoryProcedureRepository,
) -> None:
    user_id = uuid4()
    surgeon = surgeon_repository.add(user_id, "Ada", "Adams")
    older = procedure_repository.add(user_id, surgeon.id, "Appendectomy")
    newer = procedure_repository.add(user_id, surgeon.id, "Hernia repair")
    procedure_repository.add(user_id, uuid4(), "Other surgeon")

    outcome = loader.load_surgeon_detail(user_id, surgeon.id)

    assert isinstance(outcome, Ok)
    assert outcome.value.surgeon == surgeon
    assert [p.id for p in outcome.value.procedures] == [newer.id, older.id]


def test_load_procedure_with_wrong_parent_is_not_found(
    loader: EntityLoader,
    procedure_repository: InMemoryProcedureRepository,
) -> None:
    user_id = uuid4()
    procedure = procedure_repository.add(user_id, uuid4(), "Whipple")

    assert loader.load_procedure(user_id, procedure.id, uuid4()) == NotFound()
    assert isinstance(loader.load_procedure(user_id, procedure.id), Ok)


def test_load_procedure_detail_includes_photos(
    loader: EntityLoader,
    procedure_repository: InMemoryProcedureRepository,
    photo_repository: InMemoryPhotoRepository,
) -> None:
    user_id = uuid4()
    procedure = procedure_repository.add(user_id, uuid4(), "Whipple")
    first = photo_repository.create_photo(user_id, procedure.id, "a", None)
    second = photo_repository.create_photo(user_id, procedure.id, "b", "Mayo stand")

    outcome = loader.load_procedure_detail(user_id, procedure.id)

    assert isinstance(outcome, Ok)
    assert [p.id for p in outcome.value.photos] == [second.id, first.id]


def test_load_photos_failure_is_reported(
    loader: EntityLoader, photo_repository: InMemoryPhotoRepository
) -> None:
    photo_repository.fail_on.add("list_photos")

    outcome = loader.load_photos(uuid4(), uuid4())

    assert outcome == Failed("list_photos unavailable")


def test_every_read_is_scoped_to_the_user(
    loader: EntityLoader,
    surgeon_repository: InMemorySurgeonRepository,
    procedure_repository: InMemoryProcedureRepository,
) -> None:
    user_id = uuid4()
    surgeon = surgeon_repository.add(user_id, "Ada", "Adams")

    loader.load_surgeon_detail(user_id, surgeon.id)
    loader.load_procedures_for_surgeon(user_id, surgeon.id)

    calls = surgeon_repository.calls + procedure_repository.calls
    assert calls
    assert {owner for _name, owner in calls} == {user_id}
