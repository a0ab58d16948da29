import pytest

from meeting_checkin.core.exceptions import NotFoundError, ValidationError
from meeting_checkin.mailers.storage import MailerStorage


@pytest.fixture
def storage(tmp_path):
    return MailerStorage(tmp_path)


def _touch(storage, meeting_id, name, content=b"%PDF-1.4"):
    path = storage.path_for(meeting_id, name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def test_files_are_kept_per_meeting(storage, tmp_path):
    assert storage.path_for("3", "mailers-batch-1.pdf") == tmp_path / "3" / "mailers-batch-1.pdf"


@pytest.mark.parametrize("name", ["../secret.pdf", "notes.txt", "", ".hidden.pdf", "a/b.pdf"])
def test_path_for_rejects_unsafe_names(storage, name):
    with pytest.raises(ValidationError):
        storage.path_for("3", name)


def test_meeting_id_must_be_numeric(storage):
    with pytest.raises(ValidationError):
        storage.meeting_dir("../3")


def test_list_files(storage):
    assert storage.list_files("3") == []
    _touch(storage, "3", "mailers-batch-2.pdf")
    _touch(storage, "3", "mailers-batch-1.pdf", b"12345")

    files = storage.list_files("3")

    assert [f["name"] for f in files] == ["mailers-batch-1.pdf", "mailers-batch-2.pdf"]
    assert files[0]["size"] == 5
    assert "T" in files[0]["created"]


def test_existing_and_delete(storage):
    _touch(storage, "3", "mailers-batch-1.pdf")
    _touch(storage, "3", "mailers-batch-2.pdf")

    with pytest.raises(NotFoundError):
        storage.existing("3", "mailers-batch-9.pdf")

    assert storage.delete("3", "mailers-batch-1.pdf") == 1
    assert storage.delete("3") == 1
    assert storage.list_files("3") == []
