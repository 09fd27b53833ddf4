import pytest

import statement_builder as sb
from errors import BadRequest
from query_translator import translate


def test_list_with_translated_fragment():
    frag = translate({"age": "25", "sort_by": "name", "order": "desc",
                      "limit": "10", "offset": "20"})
    stmt = sb.build(sb.LIST, "users", fragment=frag)
    assert stmt.sql == "SELECT * FROM users WHERE age = ? ORDER BY name DESC LIMIT 10 OFFSET 20"
    assert stmt.params == (25,)


def test_list_without_fragment():
    stmt = sb.build(sb.LIST, "users")
    assert stmt.sql == "SELECT * FROM users"
    assert stmt.params == ()


def test_get_by_id():
    stmt = sb.build(sb.GET, "users", record_id="123")
    assert stmt.sql == "SELECT * FROM users WHERE id = ?"
    assert stmt.params == (123,)


def test_create_keeps_body_order():
    stmt = sb.build(sb.CREATE, "users", body={"name": "John", "age": 30})
    assert stmt.sql == "INSERT INTO users (name, age) VALUES (?, ?)"
    assert stmt.params == ("John", 30)


def test_update_binds_body_then_id():
    stmt = sb.build(sb.UPDATE, "users", record_id="123", body={"age": 31, "name": "Jo"})
    assert stmt.sql == "UPDATE users SET age = ?, name = ? WHERE id = ?"
    assert stmt.params == (31, "Jo", 123)


def test_delete():
    stmt = sb.build(sb.DELETE, "users", record_id="123")
    assert stmt.sql == "DELETE FROM users WHERE id = ?"
    assert stmt.params == (123,)


def test_string_ids_stay_strings():
    stmt = sb.build(sb.DELETE, "sessions", record_id="abc-42")
    assert stmt.params == ("abc-42",)


def test_custom_primary_key():
    stmt = sb.build(sb.GET, "orders", record_id="7", primary_key="order_id")
    assert stmt.sql == "SELECT * FROM orders WHERE order_id = ?"


def test_primary_key_is_sanitized():
    with pytest.raises(BadRequest):
        sb.build(sb.GET, "orders", record_id="7", primary_key="id OR 1=1")


@pytest.mark.parametrize("verb", [sb.CREATE, sb.UPDATE])
@pytest.mark.parametrize("body", [{}, None, [], ["name"]])
def test_empty_or_non_object_body_rejected(verb, body):
    with pytest.raises(BadRequest):
        sb.build(verb, "users", record_id="1", body=body)


def test_body_keys_are_sanitized():
    with pytest.raises(BadRequest, match="invalid column"):
        sb.build(sb.CREATE, "users", body={"name) VALUES (1); --": "x"})


def test_nested_values_rejected():
    with pytest.raises(BadRequest, match="scalar"):
        sb.build(sb.CREATE, "users", body={"tags": ["a", "b"]})


def test_null_and_bool_values_are_bound():
    stmt = sb.build(sb.CREATE, "users", body={"nickname": None, "active": True})
    assert stmt.params == (None, True)


@pytest.mark.parametrize("table", ["", "users;", "users x", "a.b"])
def test_invalid_table_rejected(table):
    with pytest.raises(BadRequest):
        sb.build(sb.LIST, table)


@pytest.mark.parametrize("verb", [sb.GET, sb.UPDATE, sb.DELETE])
def test_id_required(verb):
    with pytest.raises(BadRequest, match="record id"):
        sb.build(verb, "users", body={"a": 1})


def test_values_never_reach_sql_text():
    stmt = sb.build(sb.CREATE, "users", body={"name": "x'); DROP TABLE users; --"})
    assert "DROP" not in stmt.sql


@pytest.mark.parametrize("method,record_id,verb", [
    ("GET", None, sb.LIST),
    ("get", "1", sb.GET),
    ("HEAD", None, sb.LIST),
    ("HEAD", "1", sb.GET),
    ("POST", None, sb.CREATE),
    ("PATCH", "1", sb.UPDATE),
    ("PUT", "1", sb.UPDATE),
    ("DELETE", "1", sb.DELETE),
])
def test_verb_for(method, record_id, verb):
    assert sb.verb_for(method, record_id) == verb


@pytest.mark.parametrize("method,record_id", [
    ("POST", "1"),
    ("PATCH", None),
    ("PUT", None),
    ("DELETE", None),
    ("OPTIONS", None),
])
def test_verb_for_rejects_bad_combinations(method, record_id):
    with pytest.raises(BadRequest):
        sb.verb_for(method, record_id)
