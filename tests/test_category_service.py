"""Tests for CategoryService."""

import pytest

from householdtodo.engine.cache import category_key
from householdtodo.errors import ConflictError, InvalidArgumentError, NotFoundError
from householdtodo.models.task import TaskCreate
from householdtodo.services.category_service import CategoryCreate, CategoryUpdate


@pytest.fixture
def kitchen(category_service, test_household_id):
    return category_service.create_category(
        test_household_id, CategoryCreate(name="Kitchen", color="#FF8800", icon="utensils", sort_order=2)
    )


class TestCreateCategory:
    def test_create(self, kitchen, test_household_id):
        assert kitchen.name == "Kitchen"
        assert kitchen.household_id == test_household_id
        assert kitchen.is_active is True
        assert kitchen.sort_order == 2

    def test_duplicate_name_conflicts(self, category_service, kitchen, test_household_id):
        with pytest.raises(ConflictError):
            category_service.create_category(test_household_id, CategoryCreate(name="Kitchen"))

    def test_same_name_in_other_household_is_allowed(self, category_service, kitchen, other_household_id):
        other = category_service.create_category(other_household_id, CategoryCreate(name="Kitchen"))
        assert other.id != kitchen.id

    def test_name_of_deleted_category_can_be_reused(self, category_service, kitchen, test_household_id):
        category_service.delete_category(test_household_id, kitchen.id)
        again = category_service.create_category(test_household_id, CategoryCreate(name="Kitchen"))
        assert again.is_active is True

    @pytest.mark.parametrize(
        "fields",
        [
            {"name": "   "},
            {"name": "x" * 101},
            {"name": "Bad color", "color": "orange"},
            {"name": "Short color", "color": "#FFF"},
            {"name": "Long description", "description": "d" * 501},
            {"name": "Long icon", "icon": "i" * 51},
        ],
    )
    def test_invalid_fields(self, category_service, test_household_id, fields):
        with pytest.raises(InvalidArgumentError):
            category_service.create_category(test_household_id, CategoryCreate(**fields))


class TestUpdateCategory:
    def test_partial_update(self, category_service, kitchen, test_household_id):
        updated = category_service.update_category(test_household_id, kitchen.id, CategoryUpdate(sort_order=9))
        assert updated.sort_order == 9
        assert updated.name == "Kitchen"
        assert updated.color == "#FF8800"

    def test_explicit_none_clears_color(self, category_service, kitchen, test_household_id):
        updated = category_service.update_category(test_household_id, kitchen.id, CategoryUpdate(color=None))
        assert updated.color is None

    def test_rename_to_existing_name_conflicts(self, category_service, kitchen, test_household_id):
        garden = category_service.create_category(test_household_id, CategoryCreate(name="Garden"))
        with pytest.raises(ConflictError):
            category_service.update_category(test_household_id, garden.id, CategoryUpdate(name="Kitchen"))

    def test_keeping_own_name_is_fine(self, category_service, kitchen, test_household_id):
        updated = category_service.update_category(
            test_household_id, kitchen.id, CategoryUpdate(name="Kitchen", icon="pot")
        )
        assert updated.icon == "pot"

    def test_update_invalidates_cache(self, category_service, result_cache, kitchen, test_household_id):
        category_service.get_category(test_household_id, kitchen.id)
        assert category_key(kitchen.id) in result_cache

        category_service.update_category(test_household_id, kitchen.id, CategoryUpdate(name="Galley"))
        assert category_service.get_category(test_household_id, kitchen.id).name == "Galley"

    def test_other_household_is_not_found(self, category_service, kitchen, other_household_id):
        with pytest.raises(NotFoundError):
            category_service.update_category(other_household_id, kitchen.id, CategoryUpdate(name="Mine"))


class TestDeleteCategory:
    def test_delete_unused_category(self, category_service, kitchen, test_household_id):
        category_service.get_category(test_household_id, kitchen.id)
        category_service.delete_category(test_household_id, kitchen.id)

        with pytest.raises(NotFoundError):
            category_service.get_category(test_household_id, kitchen.id)
        assert category_service.category_exists(test_household_id, kitchen.id) is False
        assert category_service.category_count(test_household_id) == 0

    def test_delete_category_with_tasks_conflicts(
        self, category_service, task_service, kitchen, test_household_id, test_user_id
    ):
        task_service.create_task(test_household_id, TaskCreate(title="Dishes", category_id=kitchen.id), test_user_id)
        with pytest.raises(ConflictError):
            category_service.delete_category(test_household_id, kitchen.id)

    def test_deleted_tasks_do_not_block_delete(
        self, category_service, task_service, kitchen, test_household_id, test_user_id
    ):
        task = task_service.create_task(
            test_household_id, TaskCreate(title="Dishes", category_id=kitchen.id), test_user_id
        )
        task_service.delete_task(test_household_id, task.id, test_user_id)
        category_service.delete_category(test_household_id, kitchen.id)
        assert category_service.category_exists(test_household_id, kitchen.id) is False


class TestListCategories:
    def test_ordered_by_sort_order(self, category_service, kitchen, test_household_id, other_household_id):
        category_service.create_category(test_household_id, CategoryCreate(name="Bathroom", sort_order=1))
        category_service.create_category(test_household_id, CategoryCreate(name="Garage", sort_order=3))
        category_service.create_category(other_household_id, CategoryCreate(name="Attic"))

        names = [c.name for c in category_service.list_categories(test_household_id)]
        assert names == ["Bathroom", "Kitchen", "Garage"]
