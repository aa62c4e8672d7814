"""
Tests for category seeding.
"""

import json

import pytest

from comment_generator.errors import InvalidRequest
from comment_generator.services import CategorySeeder

TREE = [
    {
        "id": "food",
        "name": "美食",
        "icon": "food.png",
        "active_icon": "food-active.png",
        "children": [
            {"id": "hotpot", "name": "火锅"},
            {"name": "烧烤", "keyword": "bbq"},
        ],
    },
    {"id": "travel", "name": "旅游/出行"},
]


@pytest.fixture
def seeder(repository, tmp_path):
    """Create a seeder reading from a temporary directory."""
    return CategorySeeder(repository, seed_dir=tmp_path)


def write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


def test_seed_tree(seeder, repository, tmp_path):
    """Test a nested tree is upserted parents first with keywords defaulting to ids."""
    write(tmp_path, "category.json", TREE)

    seeded = seeder.seed_from_file("category.json")

    assert [c.name for c in seeded] == ["美食", "火锅", "烧烤", "旅游/出行"]
    food = repository.find_category(name="美食")
    hotpot = repository.find_category(name="火锅")
    bbq = repository.find_category(name="烧烤")
    assert food.icon == "food.png"
    assert hotpot.parent_id == food.id
    assert hotpot.keyword == "hotpot"
    assert bbq.keyword == "bbq"
    assert repository.find_category(name="旅游/出行").parent_id is None


def test_seed_is_idempotent(seeder, repository, tmp_path):
    """Test seeding twice keeps ids stable."""
    write(tmp_path, "category.json", TREE)

    first = seeder.seed_from_file("category.json")
    second = seeder.seed_from_file("category.json")

    assert [c.id for c in first] == [c.id for c in second]


@pytest.mark.parametrize("wrapper", ["items", "categories"])
def test_seed_wrapped_document(seeder, tmp_path, wrapper):
    """Test an object holding the list under items or categories is accepted."""
    write(tmp_path, "wrapped.json", {wrapper: [{"id": "spa", "name": "丽人"}]})
    assert [c.name for c in seeder.seed_from_file("wrapped.json")] == ["丽人"]


def test_seed_absolute_path(seeder, tmp_path):
    """Test an absolute path bypasses the seed directory."""
    path = write(tmp_path, "abs.json", [{"id": "sport", "name": "运动健身"}])
    assert len(seeder.seed_from_file(str(path))) == 1


def test_missing_file(seeder):
    """Test a missing seed file is an invalid request."""
    with pytest.raises(InvalidRequest):
        seeder.seed_from_file("missing.json")


def test_malformed_json(seeder, tmp_path):
    """Test unparsable and wrongly shaped documents are rejected."""
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    write(tmp_path, "shape.json", {"unexpected": 1})

    with pytest.raises(InvalidRequest):
        seeder.seed_from_file("broken.json")
    with pytest.raises(InvalidRequest):
        seeder.seed_from_file("shape.json")


def test_node_without_name(seeder, tmp_path):
    """Test a node without a name is rejected."""
    write(tmp_path, "noname.json", [{"id": "x"}])
    with pytest.raises(InvalidRequest):
        seeder.seed_from_file("noname.json")


def test_reseed_without_icons_keeps_them(seeder, repository, tmp_path):
    """Test a later seed file without icons does not erase stored icons."""
    write(tmp_path, "category.json", TREE)
    seeder.seed_from_file("category.json")

    write(tmp_path, "plain.json", [{"id": "food", "name": "美食"}])
    seeder.seed_from_file("plain.json")

    food = repository.find_category(name="美食")
    assert food.icon == "food.png"
    assert food.active_icon == "food-active.png"
