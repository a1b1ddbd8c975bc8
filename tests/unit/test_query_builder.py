from club_console.app.domain.models.collection import CollectionQuery
from club_console.app.ui.filters import build_query, export_query, update_query


def test_build_query_drops_empty_filters_and_all_status() -> None:
    query = build_query(page=2, limit=10, search="   ", status="All")

    assert query == CollectionQuery(page=2, limit=10)
    assert query.to_params() == {"page": 2, "limit": 10}


def test_build_query_normalizes_text_and_sort() -> None:
    query = build_query(search="  ana ", status=" pending ", sort_by="createdAt", sort_order="DESC")

    assert query.search == "ana"
    assert query.status == "pending"
    assert query.to_params() == {
        "page": 1,
        "limit": 10,
        "search": "ana",
        "status": "pending",
        "sortBy": "createdAt",
        "sortOrder": "desc",
    }


def test_build_query_ignores_unknown_sort_order_and_clamps_numbers() -> None:
    query = build_query(page=0, limit=-5, sort_order="sideways")

    assert query.page == 1
    assert query.limit == 1
    assert query.sort_order is None


def test_equal_inputs_produce_equal_queries_and_cache_keys() -> None:
    first = build_query(page=3, search="ana", status="pending")
    second = build_query(status=" pending", search="ana  ", page=3)

    assert first == second
    assert first.cache_key("applications") == second.cache_key("applications")
    assert first.cache_key("applications").startswith("applications:list:")
    assert first.cache_key("applications") != first.with_page(4).cache_key("applications")


def test_search_change_resets_page() -> None:
    current = build_query(page=4, search="ana")

    updated = update_query(current, search="bob")

    assert updated.page == 1
    assert updated.search == "bob"


def test_status_change_resets_page() -> None:
    current = build_query(page=4, status="pending")

    assert update_query(current, status="approved").page == 1
    assert update_query(current, status="all").status is None
    assert update_query(current, status="all").page == 1


def test_unchanged_normalized_search_keeps_page() -> None:
    current = build_query(page=4, search="ana")

    assert update_query(current, search="  ana ").page == 4


def test_page_and_sort_changes_keep_filters() -> None:
    current = build_query(page=2, search="ana", status="pending")

    moved = update_query(current, page=3)
    sorted_query = update_query(current, sort_by="fullName", sort_order="asc")

    assert (moved.page, moved.search, moved.status) == (3, "ana", "pending")
    assert (sorted_query.page, sorted_query.sort_by, sorted_query.sort_order) == (2, "fullName", "asc")


def test_export_query_keeps_active_filters_on_first_page() -> None:
    current = build_query(page=5, limit=10, search="ana", status="pending", sort_by="createdAt", sort_order="desc")

    query = export_query(current, limit=1000)

    assert query.to_params() == {
        "page": 1,
        "limit": 1000,
        "search": "ana",
        "status": "pending",
        "sortBy": "createdAt",
        "sortOrder": "desc",
    }
