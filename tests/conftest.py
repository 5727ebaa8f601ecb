from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from fantaf1.core.security import create_access_token
from fantaf1.db.session import Base, get_db
from fantaf1.db.models import _all
from fantaf1.db.models.driver import Driver
from fantaf1.db.models.event import Event
from fantaf1.db.models.prediction import Prediction
from fantaf1.db.models.season import Season
from fantaf1.db.models.user import User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


def make_user(db, username, role="user"):
    user = User(email=f"{username}@example.com", username=username, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_season(db, scoring_type="LEGACY_TOP3", year=2025):
    season = Season(year=year, name=f"Stagione {year}", is_active=True, scoring_type=scoring_type)
    db.add(season)
    db.commit()
    db.refresh(season)
    return season


def make_event(db, season, name="Gran Premio d'Italia", type="RACE", days=7, status="UPCOMING"):
    date = datetime.utcnow() + timedelta(days=days)
    event = Event(
        season_id=season.id,
        name=name,
        type=type,
        date=date,
        closing_date=date - timedelta(hours=1),
        status=status,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def make_prediction(db, user, event, podium=(None, None, None), rankings=None, points=None):
    prediction = Prediction(
        user_id=user.id,
        event_id=event.id,
        first_place_id=podium[0],
        second_place_id=podium[1],
        third_place_id=podium[2],
        rankings=rankings,
        points=points,
    )
    db.add(prediction)
    db.commit()
    db.refresh(prediction)
    return prediction


@pytest.fixture
def drivers(db):
    rows = [
        Driver(code=code, name=name, number=number)
        for code, name, number in [
            ("VER", "Max Verstappen", 1),
            ("NOR", "Lando Norris", 4),
            ("LEC", "Charles Leclerc", 16),
            ("HAM", "Lewis Hamilton", 44),
            ("PIA", "Oscar Piastri", 81),
        ]
    ]
    db.add_all(rows)
    db.commit()
    return [d.id for d in rows]


@pytest.fixture
def admin(db):
    return make_user(db, "admin", role="admin")
