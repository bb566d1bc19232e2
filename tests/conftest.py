"""
Pytest configuration and fixtures for the issue classifier tests.
"""

from pathlib import Path

import pytest

from issue_classifier.data import load_issues
from issue_classifier.model import train_model
from issue_classifier.predictor import Predictor

FIXTURE_DIR = Path(__file__).parent / "data"
REFERENCE_DIR = Path(__file__).parent.parent / "data"

DATA_TABLE_TITLE = "DataTable not updating Database with DataAdapter"
DATA_TABLE_DESCRIPTION = (
    "I am trying to update a database with info from a WinForm. I had no issues when using a "
    "“normal” SQL update command written by hand (parameters set to the text box values,) "
    "but I am trying to clean up and reduce my code and I thought I would bind the controls to a "
    "DataTable and use a DataAdapter's update command to achieve the same thing. I have tried to get "
    "various combinations of setting parameters and update commands to work, but the Database is not "
    "getting updated from the new DataTable values. I have stepped through the code with each change "
    "and can see that the DataTable is getting the new textbox values, but those updates aren’t "
    "going to the Database."
)


@pytest.fixture
def train_path():
    return str(FIXTURE_DIR / "issues_train.tsv")


@pytest.fixture
def test_path():
    return str(FIXTURE_DIR / "issues_test.tsv")


@pytest.fixture(scope="module")
def trained_predictor():
    """Predictor trained on the bundled fixture issues, with test data loaded."""
    predictor = Predictor()
    predictor.load_train_data(str(FIXTURE_DIR / "issues_train.tsv"))
    predictor.load_test_data(str(FIXTURE_DIR / "issues_test.tsv"))
    predictor.build_and_train_model()
    return predictor


@pytest.fixture
def bad_schema_path(tmp_path):
    path = tmp_path / "bad.tsv"
    path.write_text("ID\tSummary\tArea\n1\tsomething broke\tarea-System.IO\n", encoding="utf-8")
    return str(path)


@pytest.fixture(scope="module")
def trained_model():
    return train_model(load_issues(str(FIXTURE_DIR / "issues_train.tsv")))


@pytest.fixture
def data_table_issue():
    return DATA_TABLE_TITLE, DATA_TABLE_DESCRIPTION


@pytest.fixture
def reference_paths():
    train = REFERENCE_DIR / "issues_train.tsv"
    test = REFERENCE_DIR / "issues_test.tsv"
    if not (train.exists() and test.exists()):
        pytest.skip("reference dataset not present under data/")
    return str(train), str(test)
