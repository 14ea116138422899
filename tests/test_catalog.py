"""Tests for the scripts catalog routes and helpers."""

from xtermux.catalog.scripts import filter_scripts, load_scripts, paginate, risk_level


def test_risk_levels():
    assert risk_level("Phishing") == "High Risk"
    assert risk_level("Exploit") == "High Risk"
    assert risk_level("Spam") == "Moderate"
    assert risk_level("OSINT") == "Safe"
    assert risk_level("Utility") == "Safe"
    assert risk_level("Unknown") == "Safe"


def test_catalog_entries_are_unique():
    ids = [s.id for s in load_scripts()]
    assert len(ids) == len(set(ids))


def test_filter_matches_name_or_description_case_insensitively():
    assert [s.id for s in filter_scripts(search="SHERLOCK")] == ["sherlock"]
    by_description = filter_scripts(search="sql injection")
    assert [s.id for s in by_description] == ["sqlmap"]


def test_filter_by_category():
    osint = filter_scripts(category="OSINT")
    assert osint and all(s.category == "OSINT" for s in osint)
    assert len(filter_scripts(category="All")) == len(load_scripts())


def test_paginate():
    items = list(load_scripts())
    page, has_more = paginate(items, offset=0, limit=10)
    assert len(page) == min(10, len(items))
    assert has_more == (len(items) > 10)
    tail, more = paginate(items, offset=10, limit=10)
    assert more is False
    assert len(tail) == len(items) - 10


def test_list_scripts_route(client):
    response = client.get("/api/scripts")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == len(load_scripts())
    assert len(body["items"]) == min(10, body["total"])
    assert body["has_more"] == (body["total"] > 10)
    assert all("risk_level" in item for item in body["items"])


def test_list_scripts_filtered(client):
    body = client.get("/api/scripts", params={"category": "Exploit", "search": "scanner"}).json()
    assert body["items"]
    assert all(item["category"] == "Exploit" for item in body["items"])
    assert all(item["risk_level"] == "High Risk" for item in body["items"])


def test_list_scripts_no_match(client):
    body = client.get("/api/scripts", params={"search": "zzz-nothing"}).json()
    assert body == {"items": [], "total": 0, "has_more": False}


def test_categories_route(client):
    names = [c["name"] for c in client.get("/api/scripts/categories").json()]
    assert names == ["All", "OSINT", "Phishing", "Spam", "Utility", "Exploit"]


def test_script_detail(client):
    response = client.get("/api/scripts/nmap")
    assert response.status_code == 200
    assert response.json()["install_command"] == "pkg install nmap -y"
    assert client.get("/api/scripts/not-a-script").status_code == 404
