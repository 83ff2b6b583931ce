"""
Integration tests against a running MongoDB replica set.

Skipped unless JOBBOARD_MONGO_TESTS=1. Connection settings come from the
usual DB_* variables; DB_REPLICA_SET must name the replica set because the
status pipeline writes inside multi-document transactions. The test
database is dropped before and after every test.
"""

import os
from datetime import date, datetime, timezone

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure

from jobboard.core.access import CompanyAccess
from jobboard.core.applicants import ApplicantSearchService, parse_filter_params
from jobboard.core.exceptions import PersistenceError
from jobboard.core.pipeline import StatusTransitionEngine
from jobboard.data.database import get_database_manager
from jobboard.data.models import Application, Company, JobPosting, User
from jobboard.data.repositories import (
    ApplicationRepository,
    CompanyRepository,
    InterviewRepository,
    JobPostingRepository,
    NotificationRepository,
)
from jobboard.utils.constants import COLLECTIONS, ApplicationStatus

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.environ.get("JOBBOARD_MONGO_TESTS") != "1",
        reason="set JOBBOARD_MONGO_TESTS=1 to run against MongoDB",
    ),
]

TODAY = date(2025, 6, 15)


class FailingNotificationRepository(NotificationRepository):
    """Writes the notification, then fails as a lost connection would."""

    def notify(self, *args, **kwargs):
        super().notify(*args, **kwargs)
        raise OperationFailure("connection lost")


@pytest.fixture
def db():
    manager = get_database_manager()
    client = manager.get_sync_client()
    client.drop_database(manager._db_name)
    yield manager
    client.drop_database(manager._db_name)


@pytest.fixture
def seed(db):
    """Company, posting and helpers that insert users and applications."""
    database = db.get_sync_database()
    admin_id = ObjectId()
    company = Company(id=ObjectId(), name="Acme Corp", admin_id=admin_id)
    posting = JobPosting(id=ObjectId(), company_id=company.id, title="Backend Engineer")
    database[COLLECTIONS["companies"]].insert_one(company.model_dump_mongo())
    database[COLLECTIONS["job_postings"]].insert_one(posting.model_dump_mongo())

    def add(first_name, age=None, **application_fields):
        user = User(
            id=ObjectId(),
            first_name=first_name,
            last_name=None,
            email=f"user.{ObjectId()}@example.com",
            date_of_birth=datetime(TODAY.year - age, 1, 1, tzinfo=timezone.utc) if age else None,
        )
        database[COLLECTIONS["users"]].insert_one(user.model_dump_mongo())
        application = Application(
            id=ObjectId(), job_posting_id=posting.id, user_id=user.id, **application_fields
        )
        database[COLLECTIONS["applications"]].insert_one(application.model_dump_mongo())
        return application

    return {"admin_id": admin_id, "company": company, "posting": posting, "add": add, "database": database}


@pytest.fixture
def search(db):
    return ApplicantSearchService(
        access=CompanyAccess(CompanyRepository(db), JobPostingRepository(db)),
        application_repository=ApplicationRepository(db),
    )


def make_engine(db, notifications=None):
    return StatusTransitionEngine(
        access=CompanyAccess(CompanyRepository(db), JobPostingRepository(db)),
        application_repository=ApplicationRepository(db),
        job_posting_repository=JobPostingRepository(db),
        interview_repository=InterviewRepository(db),
        notification_repository=notifications or NotificationRepository(db),
        db_manager=db,
    )


def listed(search, seed, **params):
    result = search.list_applicants(
        seed["company"].id, seed["admin_id"], parse_filter_params(params), today=TODAY
    )
    return [a.applicant.name for a in result.applications], result.pagination.total


class TestListing:
    def test_age_range_scenario(self, search, seed):
        seed["add"]("A", age=24, expected_salary=12_000_000)
        seed["add"]("B", expected_salary=15_000_000)

        assert listed(search, seed, ageMin="20", ageMax="30") == (["A"], 1)
        assert listed(search, seed, sortBy="expectedSalary", sortOrder="asc") == (["A", "B"], 2)

    def test_missing_values_in_store_sort(self, search, seed):
        seed["add"]("Scored", test_score=80, expected_salary=100)
        seed["add"]("Unscored")

        assert listed(search, seed, sortBy="testScore", sortOrder="desc")[0] == ["Unscored", "Scored"]
        assert listed(search, seed, sortBy="expectedSalary", sortOrder="desc")[0] == ["Scored", "Unscored"]

    def test_accented_names(self, search, seed):
        for name in ["Zoe", "Émile", "adam"]:
            seed["add"](name)

        assert listed(search, seed, sortBy="name")[0] == ["adam", "Émile", "Zoe"]

    def test_one_page_with_total(self, search, seed):
        for i in range(5):
            seed["add"](f"P{i}")

        assert listed(search, seed, page="2", limit="2") == (["P2", "P3"], 5)


class TestTransitions:
    def test_reason_removed_when_leaving_rejected(self, db, seed):
        application = seed["add"]("Rejected", status=ApplicationStatus.REJECTED, rejection_reason="Too junior")

        make_engine(db).transition(application.id, ApplicationStatus.REVIEWED, reviewed_by=seed["admin_id"])

        stored = seed["database"][COLLECTIONS["applications"]].find_one({"_id": application.id})
        assert stored["status"] == "REVIEWED"
        assert "rejection_reason" not in stored
        assert stored["reviewed_by"] == seed["admin_id"]

    def test_failed_notification_rolls_back(self, db, seed):
        application = seed["add"]("Pending")
        engine = make_engine(db, notifications=FailingNotificationRepository(db))

        with pytest.raises(PersistenceError):
            engine.transition(
                application.id,
                ApplicationStatus.INTERVIEW_SCHEDULED,
                reviewed_by=seed["admin_id"],
                interview={"scheduledAt": "2025-07-01T09:00:00Z"},
            )

        database = seed["database"]
        stored = database[COLLECTIONS["applications"]].find_one({"_id": application.id})
        assert stored["status"] == "PENDING"
        assert database[COLLECTIONS["interviews"]].count_documents({}) == 0
        assert database[COLLECTIONS["notifications"]].count_documents({}) == 0
