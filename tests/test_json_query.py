from __future__ import annotations

from typing import Any

from tracegraph.core.json_query import extract, query_by_path

JSON_1: dict[str, Any] = {
    "parameter": "param1",
    "inputs": [
        {"key": "country", "value": "US"},
        {"key": "langage", "value": "en"},
        {"key": "name", "value": "John"},
    ],
    "outputs": [{"key": "population", "value": 200}, {"key": "age", "value": 2}],
}
JSON_2: dict[str, Any] = {
    "parameter": "param2",
    "inputs": [{"key": "country", "value": "France"}],
    "outputs": [{"key": "value", "value": 50000}, {"key": "currency", "value": "EUR"}],
}
JSON_3: dict[str, Any] = {
    "parameter": "param2",
    "inputs": [{"key": "country", "value": "US"}],
    "outputs": [{"key": "value", "value": 1000}, {"key": "currency", "value": "EUR"}],
}


def test_query_plain_and_selector_paths() -> None:
    assert query_by_path(JSON_1, "parameter") == "param1"
    assert query_by_path(JSON_1, "inputs[key = country].value") == "US"
    assert query_by_path(JSON_1, "outputs [  key = population  ] . value") == 200


def test_query_unresolved_path_returns_none() -> None:
    assert query_by_path(JSON_1, "inputs[key = missing].value") is None
    assert query_by_path(JSON_1, "parameter.deeper") is None
    assert query_by_path(JSON_1, "inputs.10") is None


def test_query_first_match_in_array_elements() -> None:
    array = [JSON_1, JSON_2, JSON_3]

    assert query_by_path(array, "parameter", search_in_array_elements="FIRST") == "param1"
    assert query_by_path(array, "inputs[key = country].value", search_in_array_elements="FIRST") == "US"
    assert query_by_path(array, "outputs[key=population].value", search_in_array_elements="FIRST") == 200


def test_query_all_matches_in_array_elements() -> None:
    array = [JSON_1, JSON_2, JSON_3]

    assert query_by_path(array, "parameter", search_in_array_elements="ALL") == ["param1", "param2", "param2"]
    assert query_by_path(array, "inputs[key = country].value", search_in_array_elements="ALL") == [
        "US",
        "France",
        "US",
    ]
    assert query_by_path(array, "outputs[key=population].value", search_in_array_elements="ALL") == [200]


def test_query_reads_object_attributes() -> None:
    class Reading:
        city = "Paris"

    assert query_by_path({"reading": Reading()}, "reading.city") == "Paris"


def test_extract_returns_one_record_per_path() -> None:
    extraction = extract(
        {
            "inputs": {"ratio": 0.12, "number": 3},
            "outputs": {
                "color": "America",
                "others": [
                    {"key": "O", "value": "ORANGE"},
                    {"key": "Y", "value": "YELLOW"},
                    {"key": "R", "value": "RED"},
                ],
            },
            "parent": "handler",
        },
        ["inputs.number", "parent", "outputs.others.2.key", "outputs.others[key=Y].value", "missing"],
    )

    assert extraction == [
        {"inputs.number": 3},
        {"parent": "handler"},
        {"outputs.others.2.key": "R"},
        {"outputs.others[key=Y].value": "YELLOW"},
        {},
    ]
