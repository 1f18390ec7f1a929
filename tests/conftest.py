from pathlib import Path

import pytest

from src.domain.entities import User
from src.rules.loader import load_rules
from src.rules.models import Rules


@pytest.fixture
def rules() -> Rules:
    """Real rules from the project root."""
    rules_path = Path(__file__).resolve().parent.parent / "rules.yaml"
    return load_rules(rules_path)


@pytest.fixture
def user() -> User:
    return User(id="user-1", username="alice", display_name="Alice")
