"""
Student Registry — /students Endpoint Tests
============================================

What:  End-to-end HTTP tests against the real app and a scratch SQLite database.
How:   HTTPX AsyncClient over ASGITransport; the lifespan (pool + schema init)
       runs for every test, so each test starts with an empty table.

What we test:
    ✅ Create/read/update/delete round trips and their status codes
    ✅ Exact, case-sensitive filter lookups; empty arrays rather than 404
    ✅ Name lookup with duplicate names returns one of the matches
    ✅ Input storage would reject is answered with 500 "Database error"
"""

import pytest


async def _create(client, **body):
    response = await client.post("/students", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateAndRead:

    @pytest.mark.asyncio
    async def test_create_get_delete_scenario(self, test_client, sample_student_data):
        """POST → GET → DELETE → GET 404, the canonical lifecycle."""
        created = await _create(test_client, **sample_student_data)

        assert isinstance(created["id"], int)
        assert {k: created[k] for k in sample_student_data} == sample_student_data

        fetched = await test_client.get(f"/students/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == created

        deleted = await test_client.delete(f"/students/{created['id']}")
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Student deleted successfully"}

        gone = await test_client.get(f"/students/{created['id']}")
        assert gone.status_code == 404
        assert gone.json()["message"] == "Student not found"

    @pytest.mark.asyncio
    async def test_list_contains_created_record_once(self, test_client, sample_student_data):
        empty = await test_client.get("/students")
        assert empty.status_code == 200
        assert empty.json() == []

        created = await _create(test_client, **sample_student_data)
        await _create(test_client, name="Ben", age=21, course="EE", gender="male")

        listed = (await test_client.get("/students")).json()
        assert len(listed) == 2
        assert listed.count(created) == 1

    @pytest.mark.asyncio
    async def test_ids_are_distinct(self, test_client, sample_student_data):
        first = await _create(test_client, **sample_student_data)
        second = await _create(test_client, **sample_student_data)
        assert first["id"] != second["id"]

    @pytest.mark.asyncio
    async def test_numeric_string_age_is_coerced(self, test_client):
        created = await _create(test_client, name="Cy", age="19", course="CS", gender="male")
        assert created["age"] == 19

    @pytest.mark.asyncio
    async def test_numeric_text_fields_are_stored_as_text(self, test_client):
        created = await _create(test_client, name=123, age=20, course=101, gender="female")

        assert created["name"] == "123"
        assert created["course"] == "101"
        fetched = await test_client.get(f"/students/{created['id']}")
        assert fetched.json()["name"] == "123"

    @pytest.mark.asyncio
    async def test_get_unknown_id_is_404(self, test_client):
        response = await test_client.get("/students/12345")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_update_replaces_all_fields(self, test_client, sample_student_data):
        created = await _create(test_client, **sample_student_data)
        new_values = {"name": "Anna", "age": 21, "course": "Math", "gender": "female"}

        response = await test_client.put(f"/students/{created['id']}", json=new_values)

        assert response.status_code == 200
        assert response.json() == {"id": created["id"], **new_values}
        fetched = await test_client.get(f"/students/{created['id']}")
        assert fetched.json() == {"id": created["id"], **new_values}

    @pytest.mark.asyncio
    async def test_update_unknown_id_is_404_and_creates_nothing(
        self, test_client, sample_student_data
    ):
        response = await test_client.put("/students/999", json=sample_student_data)

        assert response.status_code == 404
        assert (await test_client.get("/students")).json() == []

    @pytest.mark.asyncio
    async def test_delete_unknown_id_is_404(self, test_client):
        response = await test_client.delete("/students/999")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_only_removes_target(self, test_client, sample_student_data):
        keep = await _create(test_client, **sample_student_data)
        drop = await _create(test_client, name="Ben", age=21, course="EE", gender="male")

        await test_client.delete(f"/students/{drop['id']}")

        assert (await test_client.get("/students")).json() == [keep]


class TestLookups:

    @pytest.mark.asyncio
    async def test_gender_filter_is_exact_and_case_sensitive(self, test_client):
        ann = await _create(test_client, name="Ann", age=20, course="CS", gender="female")
        await _create(test_client, name="Bea", age=22, course="CS", gender="Female")
        await _create(test_client, name="Ben", age=21, course="EE", gender="male")

        response = await test_client.get("/students/gender/female")

        assert response.status_code == 200
        assert response.json() == [ann]

    @pytest.mark.asyncio
    async def test_course_filter(self, test_client):
        cs = [
            await _create(test_client, name="Ann", age=20, course="CS", gender="female"),
            await _create(test_client, name="Ben", age=21, course="CS", gender="male"),
        ]
        await _create(test_client, name="Cy", age=19, course="cs", gender="male")

        response = await test_client.get("/students/course/CS")

        assert response.status_code == 200
        assert sorted(response.json(), key=lambda s: s["id"]) == cs

    @pytest.mark.asyncio
    async def test_filters_without_match_return_empty_list(self, test_client, sample_student_data):
        await _create(test_client, **sample_student_data)

        by_gender = await test_client.get("/students/gender/other")
        by_course = await test_client.get("/students/course/History")

        assert (by_gender.status_code, by_gender.json()) == (200, [])
        assert (by_course.status_code, by_course.json()) == (200, [])

    @pytest.mark.asyncio
    async def test_get_by_name(self, test_client, sample_student_data):
        created = await _create(test_client, **sample_student_data)

        response = await test_client.get("/students/name/Ann")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_by_name_with_duplicates_returns_one_of_them(self, test_client):
        sams = [
            await _create(test_client, name="Sam", age=age, course="CS", gender="male")
            for age in (18, 19, 20)
        ]

        response = await test_client.get("/students/name/Sam")

        assert response.status_code == 200
        assert response.json() in sams

    @pytest.mark.asyncio
    async def test_get_by_name_unknown_is_404(self, test_client, sample_student_data):
        await _create(test_client, **sample_student_data)

        response = await test_client.get("/students/name/ann")

        assert response.status_code == 404


class TestRejectedInput:
    """Input that cannot reach storage intact gets the same 500 as a failed write."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"name": "Ann", "age": "twenty", "course": "CS", "gender": "female"},
        {"name": "Ann", "course": "CS", "gender": "female"},
        {},
    ])
    async def test_create_with_bad_body_is_database_error(self, test_client, body):
        response = await test_client.post("/students", json=body)

        assert response.status_code == 500
        assert response.json()["message"] == "Database error"
        assert (await test_client.get("/students")).json() == []

    @pytest.mark.asyncio
    async def test_non_integer_id_is_database_error(self, test_client):
        response = await test_client.get("/students/abc")

        assert response.status_code == 500
        assert response.json()["error"] == "database_error"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get("/students/404", headers={"X-Request-ID": "trace-01"})

        assert response.headers["X-Request-ID"] == "trace-01"
        assert response.json()["request_id"] == "trace-01"
