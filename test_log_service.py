"""
Tests for the device Log Service HTTP surface and store
"""

import re
import threading
from datetime import datetime, timedelta, timezone

from log_service.errors import InvalidPayloadError, LogWriteError
from log_service.main import CLEAR_OK_MESSAGE, EMPTY_LOG_MESSAGE, WRITE_OK_MESSAGE
from log_service.models import DeviceRecord
from log_service.store import LogStore, rfc3339

LINE_RE = re.compile(
    r"^\[\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(Z|[+-]\d{2}:\d{2})\] "
    r"Name=(?P<name>[^,]*), Type=(?P<type>[^,]*), IP=(?P<ip>[^,]*), Routing=(?P<routing>.*)$"
)

PC1 = {"DeviceName": "PC1_1", "DeviceType": "PC", "IPAddress": "192.168.1.10", "RoutingType": "Static"}


def test_get_before_any_post_returns_empty_message(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == EMPTY_LOG_MESSAGE


def test_post_then_get_returns_formatted_line(client):
    r = client.post("/", json=PC1)
    assert r.status_code == 200
    assert r.text == WRITE_OK_MESSAGE

    r = client.get("/")
    assert r.status_code == 200
    assert "Name=PC1_1, Type=PC, IP=192.168.1.10, Routing=Static" in r.text


def test_each_post_appends_exactly_one_line(client):
    for i in range(5):
        payload = dict(PC1, DeviceName=f"PC{i}_1", IPAddress=f"192.168.1.{10 + i}")
        assert client.post("/", json=payload).status_code == 200

    lines = client.get("/").text.splitlines()
    assert len(lines) == 5
    for i, line in enumerate(lines):
        m = LINE_RE.match(line)
        assert m, line
        assert m.group("name") == f"PC{i}_1"
        assert m.group("ip") == f"192.168.1.{10 + i}"
        assert m.group("routing") == "Static"


def test_invalid_json_returns_400_and_leaves_file_unchanged(client, log_path):
    client.post("/", json=PC1)
    before = log_path.read_bytes()

    for body in ['"not json"', "{bad", "", "[1, 2]", '{"DeviceName": 5}']:
        r = client.post("/", content=body, headers={"Content-Type": "application/json"})
        assert r.status_code == 400, body
        assert r.text == "Invalid JSON format"

    assert log_path.read_bytes() == before


def test_invalid_json_does_not_create_file(client, log_path):
    r = client.post("/", content="not json")
    assert r.status_code == 400
    assert not log_path.exists()


def test_missing_and_unknown_fields_are_tolerated(client):
    r = client.post("/", json={"DeviceName": "X", "Extra": "ignored"})
    assert r.status_code == 200
    assert "Name=X, Type=, IP=, Routing=" in client.get("/").text


def test_lone_surrogate_escape_is_logged_as_replacement_char(client, log_path):
    r = client.post("/", content='{"DeviceName": "\\ud800", "DeviceType": "PC"}')
    assert r.status_code == 200
    assert r.text == WRITE_OK_MESSAGE

    text = log_path.read_text(encoding="utf-8")
    assert "Name=\ufffd, Type=PC," in text
    assert "Name=\ufffd, Type=PC," in client.get("/").text


def test_surrogate_pair_escape_is_kept(client, log_path):
    r = client.post("/", content='{"DeviceName": "\\ud83d\\ude00"}')
    assert r.status_code == 200
    assert "Name=\U0001F600," in log_path.read_text(encoding="utf-8")


def test_null_body_logs_empty_record(client):
    r = client.post("/", content="null")
    assert r.status_code == 200
    assert "Name=, Type=, IP=, Routing=" in client.get("/").text


def test_null_fields_are_logged_empty(client):
    r = client.post("/", json={"DeviceName": None, "DeviceType": "PC"})
    assert r.status_code == 200
    assert "Name=, Type=PC, IP=, Routing=" in client.get("/").text


def test_field_names_match_case_insensitively(client):
    body = {"devicename": "PC1_1", "DEVICETYPE": "PC", "ipAddress": "192.168.1.10", "routingtype": "Static"}
    r = client.post("/", json=body)
    assert r.status_code == 200
    assert "Name=PC1_1, Type=PC, IP=192.168.1.10, Routing=Static" in client.get("/").text


def test_data_after_first_json_value_is_ignored(client):
    r = client.post("/", content='  {"DeviceName": "A"} trailing')
    assert r.status_code == 200
    lines = client.get("/").text.splitlines()
    assert len(lines) == 1
    assert "Name=A, Type=, IP=, Routing=" in lines[0]


def test_delete_then_get_returns_empty_message(client):
    client.post("/", json=PC1)
    client.post("/", json=PC1)

    r = client.delete("/")
    assert r.status_code == 200
    assert r.text == CLEAR_OK_MESSAGE

    r = client.get("/")
    assert r.status_code == 200
    assert r.text == EMPTY_LOG_MESSAGE


def test_delete_missing_file_returns_200(client, log_path):
    r = client.delete("/")
    assert r.status_code == 200
    assert not log_path.exists()
    assert client.get("/").text == EMPTY_LOG_MESSAGE


def test_other_methods_are_not_allowed(client):
    for method in ("PUT", "PATCH"):
        r = client.request(method, "/")
        assert r.status_code == 405, method


def test_unreadable_file_returns_500(tmp_path):
    from fastapi.testclient import TestClient
    from log_service.main import create_app

    # a directory in place of the log file fails every operation but not with "not found"
    app = create_app(LogStore(str(tmp_path)))
    with TestClient(app) as c:
        r = c.get("/")
        assert r.status_code == 500
        assert r.text == "Failed to read log file"

        r = c.post("/", json=PC1)
        assert r.status_code == 500
        assert r.text == "Failed to open log file"

        r = c.delete("/")
        assert r.status_code == 500
        assert r.text == "Failed to clear log file"


def test_write_failure_returns_500(client, monkeypatch):
    class BrokenFile:
        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def write(self, data):
            raise OSError(28, "No space left on device")

        def flush(self):
            pass

    monkeypatch.setattr("log_service.store.open", lambda *a, **kw: BrokenFile(), raising=False)
    r = client.post("/", json=PC1)
    assert r.status_code == 500
    assert r.text == "Failed to write to log file"


def test_correlation_id_is_echoed(client):
    r = client.get("/", headers={"x-correlation-id": "abc-123"})
    assert r.headers["x-correlation-id"] == "abc-123"
    assert client.get("/").headers["x-correlation-id"]


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True}


# ----------------- Store -----------------

def test_store_concurrent_appends_do_not_interleave(store, log_path):
    def post(i):
        store.append(DeviceRecord(DeviceName=f"Dev{i}", DeviceType="PC", IPAddress="10.0.0.1", RoutingType="Static"))

    threads = [threading.Thread(target=post, args=(i,)) for i in range(50)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lines = log_path.read_text().splitlines()
    assert len(lines) == 50
    assert all(LINE_RE.match(line) for line in lines)
    assert sorted(LINE_RE.match(line).group("name") for line in lines) == sorted(f"Dev{i}" for i in range(50))


def test_store_append_returns_written_line(store):
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    line = store.append(DeviceRecord(**PC1), now=now)
    assert line == "[2024-01-02T03:04:05Z] Name=PC1_1, Type=PC, IP=192.168.1.10, Routing=Static\n"
    assert store.read() == line.encode()


def test_store_write_error_type(store, monkeypatch):
    class BrokenFile:
        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def write(self, data):
            raise OSError("disk gone")

    monkeypatch.setattr("log_service.store.open", lambda *a, **kw: BrokenFile(), raising=False)
    try:
        store.append(DeviceRecord(**PC1))
    except LogWriteError as e:
        assert e.message == "Failed to write to log file"
    else:
        raise AssertionError("LogWriteError not raised")


def test_rfc3339_formats():
    assert rfc3339(datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)) == "2024-05-06T07:08:09Z"
    plus_two = timezone(timedelta(hours=2))
    assert rfc3339(datetime(2024, 5, 6, 7, 8, 9, tzinfo=plus_two)) == "2024-05-06T07:08:09+02:00"
    assert LINE_RE.match(f"[{rfc3339()}] Name=a, Type=b, IP=c, Routing=d")


def test_from_json_edge_cases():
    assert DeviceRecord.from_json(b"null") == DeviceRecord()
    assert DeviceRecord.from_json('{"DeviceName": "a", "devicename": "b"}').DeviceName == "b"
    assert DeviceRecord.from_json('{"IPAddress": "1.2.3.4"}{"IPAddress": "x"}').IPAddress == "1.2.3.4"
    for bad in ("", "   ", "[]", "42", '"text"', '{"DeviceType": true}', '{"RoutingType": ["Static"]}'):
        try:
            DeviceRecord.from_json(bad)
        except InvalidPayloadError:
            continue
        raise AssertionError(f"{bad!r} accepted")
