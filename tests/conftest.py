import pytest
import yaml

from abq.store import ContactStore


def write_record(directory, filename, data):
    path = directory / filename
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


JANE = {
    "contact": {
        "uid": "1111-aaaa",
        "first": "Jane",
        "last": "Doe",
        "emails": [
            {"email": "j@x.com", "description": "_$!<Work>!$_"},
            {"email": "jane@y.com", "description": "_$!<Home>!$_"},
        ],
    }
}

BOB = {
    "contact": {
        "uid": "2222-bbbb",
        "first": "Robert",
        "middle": "Q",
        "last": "Smith",
        "nickname": "Bob",
        "company": "Acme Corp",
        "title": "Engineer",
        "birthday": "1980-05-01",
        "phones": [
            {"number": "555-0100", "description": "_$!<Work>!$_"},
            {"number": "555-0101", "description": "_$!<Mobile>!$_"},
            {"number": "555-0102", "description": "_$!<Home>!$_"},
        ],
        "emails": [
            {"email": "bob@home.example", "description": "_$!<Home>!$_"},
            {"email": "bob@acme.example", "description": "_$!<Work>!$_",
             "primary": True},
        ],
        "addresses": [
            {"address1": "1 Main St", "address2": "", "city": "Springfield",
             "state": "IL", "zipcode": "62701", "country": "USA",
             "description": "_$!<Home>!$_"},
            {"address1": "9 Works Rd", "city": "Shelbyville",
             "state": "IL", "zipcode": "62565",
             "description": "_$!<Work>!$_"},
        ],
        "websites": [
            {"url": "https://bob.example", "description": "_$!<HomePage>!$_"},
        ],
        "related": [
            {"name": "Alice Smith", "description": "_$!<Spouse>!$_"},
        ],
        "profiles": [
            {"service": "Mastodon", "username": "@bob@social.example"},
            {"service": "GitHub", "username": "bobsmith"},
        ],
        "notes": "first line\nsecond line\r\nthird line",
    }
}

ACME = {
    "contact": {
        "uid": "3333-cccc",
        "company": "Acme Corp",
        "phones": [
            {"number": "555-0199", "description": "Switchboard"},
        ],
    }
}

FRIENDS = {
    "group": {
        "uid": "9999-gggg",
        "name": "Friends",
        "members": ["1111-aaaa", "2222-bbbb", "missing-uid"],
    }
}

COWORKERS = {
    "group": {
        "uid": "8888-hhhh",
        "name": "coworkers",
        "members": ["2222-bbbb"],
    }
}


@pytest.fixture()
def data_dir(tmp_path):
    directory = tmp_path / "data"
    directory.mkdir()
    write_record(directory, "jane.yml", JANE)
    write_record(directory, "bob.yml", BOB)
    write_record(directory, "acme.yml", ACME)
    write_record(directory, "friends.yml", FRIENDS)
    write_record(directory, "coworkers.yml", COWORKERS)
    return directory


@pytest.fixture()
def store(data_dir):
    return ContactStore(str(data_dir))
