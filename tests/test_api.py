"""
Tests for the people API
"""

DATATABLES_URL = "/v1/api/people/datatables"


def _query(**values):
    params = {
        "sEcho": "3",
        "iColumns": "5",
        "iDisplayStart": "0",
        "iDisplayLength": "10",
        "iSortingCols": "1",
        "iSortCol_0": "0",
        "sSortDir_0": "asc",
        "bSortable_0": "true",
        "sSearch": "",
    }
    params.update(values)
    return params


def test_datatables_response_shape(client):
    r = client.get(DATATABLES_URL, params=_query())
    assert r.status_code == 200, r.text

    body = r.json()
    assert body["sEcho"] == "3"
    assert body["iTotalRecords"] == 3
    assert body["iTotalDisplayRecords"] == 3
    assert len(body["aaData"]) == 3
    assert all(len(row) == 5 for row in body["aaData"])


def test_datatables_renders_cells(client):
    r = client.get(DATATABLES_URL, params=_query())
    first = r.json()["aaData"][0]

    assert first[0] == '<a href="/people/p1">Alice</a>'
    assert first[1:4] == ["30", "alice@example.com", "31"]
    assert first[4] == '<a href="#"></a>'


def test_datatables_sort_descending(client):
    r = client.get(DATATABLES_URL, params=_query(sSortDir_0="desc"))
    names = [row[2] for row in r.json()["aaData"]]

    assert names == ["", "bob@example.com", "alice@example.com"]


def test_datatables_search(client):
    r = client.get(DATATABLES_URL, params=_query(sSearch="bob@"))

    assert [row[1] for row in r.json()["aaData"]] == ["25"]


def test_create_and_delete_person(client):
    r = client.post("/v1/api/people", json={"name": "Dave", "age": 50})
    assert r.status_code == 200, r.text
    person_id = r.json()["person_id"]

    r = client.get(DATATABLES_URL, params=_query())
    assert r.json()["iTotalRecords"] == 4

    r = client.post(f"/v1/api/people/{person_id}/delete")
    assert r.status_code == 200, r.text

    r = client.post(f"/v1/api/people/{person_id}/delete")
    assert r.status_code == 404


def test_list_people(client):
    r = client.get("/v1/api/people")
    assert r.status_code == 200, r.text
    assert [p["name"] for p in r.json()] == ["Alice", "Bob", "Carol"]
