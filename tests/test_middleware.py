"""Tests for request logging helpers."""

from bookshelf.middleware import operation_name_from_payload, sanitize_query_params


class TestSanitizeQueryParams:
    def test_redacts_sensitive_keys(self):
        sanitized = sanitize_query_params(
            {"password": "pw", "access_token": "abc", "Authorization": "Bearer x", "genre": "scifi"}
        )

        assert sanitized == {
            "password": "[REDACTED]",
            "access_token": "[REDACTED]",
            "Authorization": "[REDACTED]",
            "genre": "scifi",
        }

    def test_redacts_graphql_payload(self):
        sanitized = sanitize_query_params(
            {"query": "{ me { username } }", "variables": "{}", "operationName": "Me"}
        )

        assert sanitized == {
            "query": "[REDACTED]",
            "variables": "[REDACTED]",
            "operationName": "Me",
        }

    def test_author_is_not_sensitive(self):
        assert sanitize_query_params({"author": "Tolkien"}) == {"author": "Tolkien"}


class TestOperationName:
    def test_explicit_operation_name(self):
        assert operation_name_from_payload({"operationName": "AllBooks", "query": "..."}) == "AllBooks"

    def test_named_query(self):
        payload = {"query": "query AllAuthors { allAuthors { name } }"}
        assert operation_name_from_payload(payload) == "AllAuthors"

    def test_named_mutation(self):
        payload = {"query": "mutation Login($u: String!) { login(username: $u) { value } }"}
        assert operation_name_from_payload(payload) == "mutation:Login"

    def test_anonymous_operation(self):
        assert operation_name_from_payload({"query": "{ bookCount }"}) == "unnamed_operation"

    def test_introspection(self):
        payload = {"query": "query IntrospectionQuery { __schema { types { name } } }"}
        assert operation_name_from_payload(payload) == "__introspection"

    def test_missing_query(self):
        assert operation_name_from_payload({}) is None
        assert operation_name_from_payload({"query": 42}) is None
