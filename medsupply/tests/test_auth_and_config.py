import pydantic
import pytest

from medsupply.app.core.config import Settings
from medsupply.app.db.models.core_types import CatalogSource, IssueNoFormat
from medsupply.services.auth import hash_password, verify_password


def test_hashed_password_round_trip():
    stored = hash_password("s3cret")

    assert stored != "s3cret"
    assert stored.startswith("$pbkdf2-sha256$")
    assert verify_password("s3cret", stored)
    assert not verify_password("S3cret", stored)


def test_legacy_plaintext_compare():
    assert verify_password("plain-pw", "plain-pw")
    assert not verify_password("plain-pw", "plain-pw ")
    assert not verify_password("anything", None)


def test_settings_enums_and_prefix():
    cfg = Settings(CATALOG_SOURCE="api", ISSUE_NO_FORMAT="date", API_PREFIX="api/")

    assert cfg.CATALOG_SOURCE is CatalogSource.api
    assert cfg.ISSUE_NO_FORMAT is IssueNoFormat.date
    assert cfg.API_PREFIX == "/api"


@pytest.mark.parametrize("field,value", [("CATALOG_SOURCE", "ldap"), ("ISSUE_NO_FORMAT", "weekly")])
def test_settings_reject_unknown_modes(field, value):
    with pytest.raises(pydantic.ValidationError):
        Settings(**{field: value})
