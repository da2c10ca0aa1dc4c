import pytest
import os
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from agency_hr.database import Base, get_db
from agency_hr.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema per test; services commit, so rollback isolation is not enough."""
    import agency_hr.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def leave_types(db_session):
    """The default CL / SL / EL registry, keyed by code."""
    from agency_hr.services.leave_types import LeaveTypeService
    LeaveTypeService(db_session).seed_default_leave_types()
    return {t.code: t for t in LeaveTypeService(db_session).list_types()}


@pytest.fixture(scope="function")
def designer_role(db_session):
    from agency_hr.models.team_member import JobRole
    role = JobRole(title="Designer", description="Visual design")
    db_session.add(role)
    db_session.commit()
    return role


@pytest.fixture(scope="function")
def make_member(db_session):
    """Factory for team members; joined before the current year unless told otherwise."""
    from agency_hr.models.team_member import TeamMember
    counter = {"n": 0}

    def _make(joined_date=None, role_title=None, slack_user_id=None):
        counter["n"] += 1
        member = TeamMember(
            name=f"Member {counter['n']}",
            email=f"member{counter['n']}@agency.test",
            role_title=role_title,
            joined_date=joined_date or date(date.today().year - 1, 3, 1),
            slack_user_id=slack_user_id,
        )
        db_session.add(member)
        db_session.commit()
        return member
    return _make


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
