"""
Shared test fixtures for the job board test suite.

Sets environment variables before any jobboard imports to prevent config
failures, then provides an in-memory store with fake repositories and a
fake transaction manager so no test needs a running MongoDB.
"""

import copy
import os
import re

# === Set environment BEFORE any jobboard imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_NAME", "jobboard_test")

from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterator, Optional

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure

from jobboard.core.access import CompanyAccess
from jobboard.core.applicants import ApplicantSearchService
from jobboard.core.applicants.sorting import name_sort_key
from jobboard.core.pipeline import StatusTransitionEngine
from jobboard.data.models import (
    Application,
    Company,
    InterviewSchedule,
    JobPosting,
    Notification,
    Region,
    User,
    utcnow,
)
from jobboard.data.repositories.base import BaseRepository
from jobboard.utils.config import ApplicantSettings
from jobboard.utils.constants import (
    COLLECTIONS,
    ApplicationStatus,
    EducationLevel,
    NotificationType,
)

TODAY = date(2025, 6, 15)
BASE_TIME = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)

_oid = BaseRepository._to_object_id


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------


class InMemoryStore:
    """Documents of every collection, held as models."""

    def __init__(self) -> None:
        self.companies: dict[ObjectId, Company] = {}
        self.postings: dict[ObjectId, JobPosting] = {}
        self.users: dict[ObjectId, User] = {}
        self.applications: dict[ObjectId, Application] = {}
        self.interviews: list[InterviewSchedule] = []
        self.notifications: list[Notification] = []
        self._clock = 0

    # Seeding helpers

    def add_company(self, admin_id: Optional[ObjectId] = None, name: str = "Acme Corp") -> Company:
        company = Company(id=ObjectId(), name=name, admin_id=admin_id or ObjectId())
        self.companies[company.id] = company
        return company

    def add_posting(self, company: Company, title: str = "Backend Engineer", **fields: Any) -> JobPosting:
        posting = JobPosting(id=ObjectId(), company_id=company.id, title=title, **fields)
        self.postings[posting.id] = posting
        return posting

    def add_user(
        self,
        first_name: Optional[str] = "Jane",
        last_name: Optional[str] = "Smith",
        email: Optional[str] = None,
        age: Optional[int] = None,
        city: Optional[str] = None,
        province: Optional[str] = None,
        **fields: Any,
    ) -> User:
        if age is not None:
            fields["date_of_birth"] = datetime(TODAY.year - age, 1, 1, tzinfo=timezone.utc)
        user = User(
            id=ObjectId(),
            first_name=first_name,
            last_name=last_name,
            email=email or f"user{len(self.users)}@example.com",
            city=Region(name=city) if city else None,
            province=Region(name=province) if province else None,
            **fields,
        )
        self.users[user.id] = user
        return user

    def add_application(self, posting: JobPosting, user: Optional[User] = None, **fields: Any) -> Application:
        user = user or self.add_user()
        if "created_at" not in fields:
            # Strictly increasing creation times in insertion order
            self._clock += 1
            fields["created_at"] = BASE_TIME + timedelta(minutes=self._clock)
        fields.setdefault("updated_at", fields["created_at"])
        application = Application(id=ObjectId(), job_posting_id=posting.id, user_id=user.id, **fields)
        self.applications[application.id] = application
        return application

    def add_interview(self, application: Application, scheduled_at: datetime, **fields: Any) -> InterviewSchedule:
        interview = InterviewSchedule(
            id=ObjectId(),
            job_application_id=application.id,
            job_posting_id=application.job_posting_id,
            candidate_id=application.user_id,
            scheduled_at=scheduled_at,
            **fields,
        )
        self.interviews.append(interview)
        return interview

    # Aggregation stand-in

    def joined_document(self, application: Application) -> dict[str, Any]:
        """An application joined the way the search pipeline joins it."""
        document = application.model_dump(by_alias=True)
        document["applicant"] = self.users[application.user_id].model_dump(by_alias=True)
        document["job_posting"] = self.postings[application.job_posting_id].model_dump(by_alias=True)
        interviews = sorted(
            (i for i in self.interviews if i.job_application_id == application.id),
            key=lambda i: i.scheduled_at,
            reverse=True,
        )
        document["latest_interview"] = [i.model_dump(by_alias=True) for i in interviews[:1]]
        return document

    def collections(self) -> dict[str, list[dict[str, Any]]]:
        """Every collection as the stored documents."""
        def dump(models):
            return [m.model_dump(by_alias=True) for m in models]

        return {
            COLLECTIONS["companies"]: dump(self.companies.values()),
            COLLECTIONS["job_postings"]: dump(self.postings.values()),
            COLLECTIONS["users"]: dump(self.users.values()),
            COLLECTIONS["applications"]: dump(self.applications.values()),
            COLLECTIONS["interviews"]: dump(self.interviews),
            COLLECTIONS["notifications"]: dump(self.notifications),
        }

    # Transactions

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(
            {
                "applications": self.applications,
                "interviews": self.interviews,
                "notifications": self.notifications,
            }
        )

    def restore(self, snapshot: dict[str, Any]) -> None:
        self.applications = snapshot["applications"]
        self.interviews = snapshot["interviews"]
        self.notifications = snapshot["notifications"]


# ---------------------------------------------------------------------------
# Aggregation evaluator
# ---------------------------------------------------------------------------

_MISSING = object()


def _get_path(document: Any, path: str) -> Any:
    value = document
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _bson_key(value: Any) -> tuple[int, Any]:
    """Comparison key placing null below every other value, as BSON does."""
    if value is None or value is _MISSING:
        return (0, 0)
    return (1, value)


def _eval(expression: Any, document: dict[str, Any], variables: dict[str, Any]) -> Any:
    """Evaluate the aggregation expression operators the search pipeline uses."""
    if isinstance(expression, str) and expression.startswith("$$"):
        name, _, rest = expression[2:].partition(".")
        value = variables[name]
        return _get_path(value, rest) if rest else value
    if isinstance(expression, str) and expression.startswith("$"):
        value = _get_path(document, expression[1:])
        return None if value is _MISSING else value
    if isinstance(expression, list):
        return [_eval(e, document, variables) for e in expression]
    if not isinstance(expression, dict):
        return expression

    if len(expression) != 1 or not next(iter(expression)).startswith("$"):
        return {k: _eval(v, document, variables) for k, v in expression.items()}

    operator, args = next(iter(expression.items()))
    if operator == "$ifNull":
        value = _eval(args[0], document, variables)
        return _eval(args[1], document, variables) if value is None else value
    if operator == "$cond":
        condition, then, otherwise = args
        return _eval(then if _eval(condition, document, variables) else otherwise, document, variables)
    if operator == "$trim":
        value = _eval(args["input"], document, variables)
        return None if value is None else value.strip(args.get("chars"))
    if operator in ("$year", "$month", "$dayOfMonth"):
        value = _eval(args, document, variables)
        if value is None:
            return None
        return {"$year": value.year, "$month": value.month, "$dayOfMonth": value.day}[operator]

    values = [_eval(a, document, variables) for a in args]
    if operator == "$eq":
        return values[0] == values[1]
    if operator == "$gt":
        return _bson_key(values[0]) > _bson_key(values[1])
    if any(v is None for v in values):
        return None
    if operator == "$concat":
        return "".join(values)
    if operator == "$add":
        return sum(values)
    if operator == "$subtract":
        return values[0] - values[1]
    if operator == "$multiply":
        return values[0] * values[1]
    raise NotImplementedError(f"expression operator {operator}")


def _field_matches(value: Any, condition: Any) -> bool:
    if isinstance(condition, re.Pattern):
        return isinstance(value, str) and bool(condition.search(value))
    if not (isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition)):
        return (None if value is _MISSING else value) == condition

    flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
    for operator, argument in condition.items():
        if operator == "$options":
            continue
        if operator == "$regex":
            pattern = argument if isinstance(argument, re.Pattern) else re.compile(argument, flags)
            if not _field_matches(value, pattern):
                return False
        elif operator == "$not":
            if _field_matches(value, argument):
                return False
        elif operator == "$in":
            if value is _MISSING or value not in argument:
                return False
        elif operator == "$ne":
            if _field_matches(value, argument):
                return False
        elif operator in ("$gte", "$gt", "$lte", "$lt"):
            # Range operators never match null or a missing field
            if value is None or value is _MISSING:
                return False
            compare = {
                "$gte": value >= argument,
                "$gt": value > argument,
                "$lte": value <= argument,
                "$lt": value < argument,
            }
            if not compare[operator]:
                return False
        else:
            raise NotImplementedError(f"query operator {operator}")
    return True


def _matches(document: dict[str, Any], query: dict[str, Any], variables: dict[str, Any]) -> bool:
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(document, q, variables) for q in condition):
                return False
        elif key == "$and":
            if not all(_matches(document, q, variables) for q in condition):
                return False
        elif key == "$expr":
            if not _eval(condition, document, variables):
                return False
        elif not _field_matches(_get_path(document, key), condition):
            return False
    return True


def _sort(documents: list[dict[str, Any]], keys: dict[str, int], collation: Any) -> list[dict[str, Any]]:
    ordered = list(documents)
    # Stable sorts applied from the least significant key up
    for path, direction in reversed(list(keys.items())):

        def key(document, path=path):
            value = _get_path(document, path)
            if collation is not None and isinstance(value, str):
                value = name_sort_key(value)
            return _bson_key(value)

        ordered.sort(key=key, reverse=direction == -1)
    return ordered


def run_pipeline(
    pipeline: list[dict[str, Any]],
    documents: list[dict[str, Any]],
    collections: dict[str, list[dict[str, Any]]],
    collation: Any = None,
    variables: Optional[dict[str, Any]] = None,
) -> list[dict[str, Any]]:
    """Run an aggregation pipeline over in-memory documents."""
    variables = variables or {}
    for stage in pipeline:
        (name, spec), = stage.items()
        if name == "$match":
            documents = [d for d in documents if _matches(d, spec, variables)]
        elif name == "$lookup":
            foreign = collections[spec["from"]]
            joined = []
            for document in documents:
                if "pipeline" in spec:
                    local = {k: _eval(v, document, variables) for k, v in spec.get("let", {}).items()}
                    matched = run_pipeline(spec["pipeline"], foreign, collections, collation, local)
                else:
                    local_value = _get_path(document, spec["localField"])
                    matched = [f for f in foreign if _get_path(f, spec["foreignField"]) == local_value]
                joined.append({**document, spec["as"]: copy.deepcopy(matched)})
            documents = joined
        elif name == "$unwind":
            field = spec[1:]
            documents = [{**d, field: item} for d in documents for item in d.get(field) or []]
        elif name == "$addFields":
            documents = [
                {**d, **{k: _eval(v, d, variables) for k, v in spec.items()}} for d in documents
            ]
        elif name == "$sort":
            documents = _sort(documents, spec, collation)
        elif name == "$skip":
            documents = documents[spec:]
        elif name == "$limit":
            documents = documents[:spec]
        elif name == "$count":
            documents = [{spec: len(documents)}] if documents else []
        elif name == "$facet":
            documents = [
                {
                    key: run_pipeline(sub, documents, collections, collation, variables)
                    for key, sub in spec.items()
                }
            ]
        else:
            raise NotImplementedError(f"pipeline stage {name}")
    return documents


# ---------------------------------------------------------------------------
# Fake repositories and transaction manager
# ---------------------------------------------------------------------------


class FakeCompanyRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def get_by_id(self, id_value, session=None):
        return self.store.companies.get(_oid(id_value))


class FakeJobPostingRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def get_by_id(self, id_value, session=None):
        return self.store.postings.get(_oid(id_value))

    def get_ids_for_company(self, company_id):
        company_id = _oid(company_id)
        return [p.id for p in self.store.postings.values() if p.company_id == company_id]

    def get_for_company(self, job_posting_id, company_id):
        posting = self.get_by_id(job_posting_id)
        if posting is None or posting.company_id != _oid(company_id):
            return None
        return posting


class FakeApplicationRepository:
    """Runs search pipelines with the in-memory aggregation evaluator."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.pipelines: list[list[dict[str, Any]]] = []
        self.collations: list[Any] = []
        self.fail_search = False

    def get_by_id(self, id_value, session=None):
        return self.store.applications.get(_oid(id_value))

    def get_in_postings(self, application_id, job_posting_ids, session=None):
        application = self.get_by_id(application_id)
        if application is None or application.job_posting_id not in job_posting_ids:
            return None
        return application

    def search(self, pipeline, collation=None):
        if self.fail_search:
            raise OperationFailure("search failed")
        self.pipelines.append(pipeline)
        self.collations.append(collation)
        collections = self.store.collections()
        return run_pipeline(
            pipeline, collections[COLLECTIONS["applications"]], collections, collation
        )

    def apply_review(
        self,
        application_id,
        status,
        reviewed_by,
        reviewed_at,
        rejection_reason=None,
        admin_notes=None,
        session=None,
    ):
        application = self.get_by_id(application_id)
        if application is None:
            return None
        update = {
            "status": status.value,
            "rejection_reason": rejection_reason,
            "reviewed_at": reviewed_at,
            "reviewed_by": _oid(reviewed_by),
            "updated_at": utcnow(),
        }
        if admin_notes is not None:
            update["admin_notes"] = admin_notes
        updated = application.model_copy(update=update)
        self.store.applications[updated.id] = updated
        return updated


class FakeInterviewRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.fail = False

    def schedule(self, interview, session=None):
        assert session is not None, "interviews must be written inside a transaction"
        interview.id = ObjectId()
        self.store.interviews.append(interview)
        if self.fail:
            raise OperationFailure("insert failed")
        return interview


class FakeNotificationRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.fail = False

    def notify(
        self,
        user_id,
        message,
        link,
        notification_type=NotificationType.APPLICATION_STATUS_UPDATE,
        session=None,
    ):
        assert session is not None, "notifications must be written inside a transaction"
        notification = Notification(
            id=ObjectId(), user_id=_oid(user_id), type=notification_type, message=message, link=link
        )
        self.store.notifications.append(notification)
        if self.fail:
            raise OperationFailure("insert failed")
        return notification


class FakeDatabaseManager:
    """Transactions that roll the in-memory store back on any exception."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.transactions = 0
        self.aborted = 0
        self.healthy = True

    @contextmanager
    def transaction(self) -> Iterator[object]:
        snapshot = self.store.snapshot()
        self.transactions += 1
        try:
            yield object()
        except BaseException:
            self.aborted += 1
            self.store.restore(snapshot)
            raise

    def check_sync_connection(self) -> bool:
        return self.healthy

    def close_all(self) -> None:
        pass


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def admin_id() -> ObjectId:
    return ObjectId()


@pytest.fixture
def company(store, admin_id) -> Company:
    return store.add_company(admin_id=admin_id)


@pytest.fixture
def posting(store, company) -> JobPosting:
    return store.add_posting(company, title="Backend Engineer", salary_min=5000, salary_max=9000)


@pytest.fixture
def repositories(store) -> dict[str, Any]:
    return {
        "companies": FakeCompanyRepository(store),
        "postings": FakeJobPostingRepository(store),
        "applications": FakeApplicationRepository(store),
        "interviews": FakeInterviewRepository(store),
        "notifications": FakeNotificationRepository(store),
    }


@pytest.fixture
def db_manager(store) -> FakeDatabaseManager:
    return FakeDatabaseManager(store)


@pytest.fixture
def access(repositories) -> CompanyAccess:
    return CompanyAccess(repositories["companies"], repositories["postings"])


@pytest.fixture
def search_service(access, repositories) -> ApplicantSearchService:
    return ApplicantSearchService(access=access, application_repository=repositories["applications"])


@pytest.fixture
def make_engine(access, repositories, db_manager):
    """Factory building a transition engine over the in-memory store."""

    def _factory(enforce_pipeline: bool = False) -> StatusTransitionEngine:
        return StatusTransitionEngine(
            access=access,
            application_repository=repositories["applications"],
            job_posting_repository=repositories["postings"],
            interview_repository=repositories["interviews"],
            notification_repository=repositories["notifications"],
            db_manager=db_manager,
            settings=ApplicantSettings(enforce_status_pipeline=enforce_pipeline),
        )

    return _factory


@pytest.fixture
def engine(make_engine) -> StatusTransitionEngine:
    return make_engine()


@pytest.fixture
def sample_user(store) -> User:
    return store.add_user(
        first_name="Budi",
        last_name="Santoso",
        email="budi.santoso@example.com",
        age=30,
        city="Bandung",
        province="Jawa Barat",
        last_education=EducationLevel.BACHELOR,
        phone_number="+62-812-0000",
    )


@pytest.fixture
def sample_application(store, posting, sample_user) -> Application:
    return store.add_application(
        posting,
        sample_user,
        expected_salary=7000,
        cover_letter="I would love to join.",
        cv_url="https://files.example.com/cv.pdf",
        test_score=82.5,
    )


@pytest.fixture
def pending_application(sample_application) -> Application:
    assert sample_application.status == ApplicationStatus.PENDING
    return sample_application
