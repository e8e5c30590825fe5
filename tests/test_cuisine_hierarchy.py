from core.cuisine_hierarchy import (
    CUISINE_HIERARCHY,
    all_parents,
    cuisine_options,
    cuisines_for_filter,
    parent_of,
)


def test_parent_expands_to_itself_and_children():
    got = cuisines_for_filter("Asian")
    assert got[0] == "Asian"
    assert {"Japanese", "Thai", "Korean"} <= set(got)
    assert "Italian" not in got


def test_specific_cuisine_is_not_widened():
    assert cuisines_for_filter("Italian") == ["Italian"]
    assert cuisines_for_filter("Martian") == ["Martian"]


def test_hierarchy_is_a_strict_two_level_tree():
    children = [c for kids in CUISINE_HIERARCHY.values() for c in kids]
    assert len(children) == len(set(children)), "a cuisine has two parents"
    assert not set(children) & set(CUISINE_HIERARCHY), "a parent is also a child"


def test_parent_of():
    assert parent_of("Moroccan") == "African"
    assert parent_of("Japanese") == "Asian"
    assert parent_of("Asian") is None


def test_cuisine_options_groups_first_then_present_cuisines():
    opts = cuisine_options(["Thai", "Asian", "Fusion", "Italian", "Thai"])

    groups = [o for o in opts if o.is_group]
    assert [o.value for o in groups] == all_parents()
    assert groups[0].label == f"{all_parents()[0]} (All)"

    singles = [o.value for o in opts if not o.is_group]
    assert singles == ["Fusion", "Italian", "Thai"]
    assert opts[: len(groups)] == groups
