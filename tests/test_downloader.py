import asyncio
import threading

import pytest
import requests

from image_search.downloader import CandidatePool, download_n, download_until
from image_search.errors import PoolExhausted

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 32
GIF_BYTES = b"GIF89a" + b"\x00" * 32
ZIP_BYTES = b"PK\x03\x04" + b"\x00" * 64


def test_pool_pops_front_first_and_exhausts():
    pool = CandidatePool(["a", "b"])
    assert pool.pop() == "a"
    assert len(pool) == 1
    assert pool.pop() == "b"
    with pytest.raises(PoolExhausted):
        pool.pop()


def test_pool_hands_each_url_out_once_across_threads():
    urls = [f"https://img/{i}" for i in range(2000)]
    pool = CandidatePool(urls)
    seen = []
    seen_lock = threading.Lock()

    def drain():
        while True:
            try:
                url = pool.pop()
            except PoolExhausted:
                return
            with seen_lock:
                seen.append(url)

    workers = [threading.Thread(target=drain) for _ in range(8)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert sorted(seen) == sorted(urls)
    assert len(seen) == len(set(seen))


def test_download_n_fills_every_slot_from_larger_pool(tmp_path, fake_session):
    urls = [f"https://img/{i}" for i in range(5)]
    session = fake_session({url: PNG_BYTES for url in urls})
    stems = [tmp_path / f"cat{i}" for i in range(3)]

    paths = asyncio.run(download_n(urls, stems, timeout=1, session=session))

    assert sorted(paths) == sorted(stem.with_name(stem.name + ".png") for stem in stems)
    assert len(session.calls) == 3
    assert len(set(session.calls)) == 3
    assert not session.closed


def test_download_n_retries_with_next_candidate(tmp_path, fake_session):
    responses = {
        "https://img/down": requests.ConnectionError("refused"),
        "https://img/zip": ZIP_BYTES,
        "https://img/slow": requests.Timeout("timed out"),
        "https://img/gif": GIF_BYTES,
        "https://img/png": PNG_BYTES,
    }
    session = fake_session(responses)
    stems = [tmp_path / "dog0", tmp_path / "dog1"]

    paths = asyncio.run(download_n(list(responses), stems, session=session))

    assert len(paths) == 2
    assert {path.suffix for path in paths} == {".gif", ".png"}
    assert sorted(session.calls) == sorted(responses)
    assert sorted(p.name for p in tmp_path.iterdir()) == sorted(p.name for p in paths)


def test_download_n_leaves_excess_slots_empty(tmp_path, fake_session):
    responses = {
        "https://img/ok": PNG_BYTES,
        "https://img/bad": ZIP_BYTES,
    }
    session = fake_session(responses)
    stems = [tmp_path / f"cat{i}" for i in range(4)]

    paths = asyncio.run(download_n(list(responses), stems, session=session))

    assert len(paths) == 1
    assert paths[0].read_bytes() == PNG_BYTES
    assert len(list(tmp_path.iterdir())) == 1


def test_download_n_with_no_slots_fetches_nothing(fake_session):
    session = fake_session({"https://img/1": PNG_BYTES})
    assert asyncio.run(download_n(["https://img/1"], [], session=session)) == []
    assert session.calls == []


def test_download_until_reports_exhaustion(tmp_path, fake_session):
    session = fake_session({"https://img/bad": ZIP_BYTES})
    pool = CandidatePool(["https://img/bad"])

    with pytest.raises(PoolExhausted):
        asyncio.run(download_until(pool, tmp_path / "cat0", session))
    assert session.calls == ["https://img/bad"]


def test_download_n_closes_session_it_creates(tmp_path, fake_session, monkeypatch):
    session = fake_session({"https://img/1": GIF_BYTES})
    monkeypatch.setattr("image_search.downloader.create_session", lambda: session)

    paths = asyncio.run(download_n(["https://img/1"], [tmp_path / "cat0"]))

    assert paths == [tmp_path / "cat0.gif"]
    assert session.closed


def test_download_n_fetches_every_slot_at_once(tmp_path, fake_session):
    urls = [f"https://img/{i}" for i in range(12)]
    session = fake_session({url: PNG_BYTES for url in urls}, delay=0.3)
    stems = [tmp_path / f"cat{i}" for i in range(12)]

    paths = asyncio.run(download_n(urls, stems, session=session))

    assert len(paths) == 12
    assert session.peak == 12


def test_unexpected_slot_error_keeps_other_downloads(tmp_path, fake_session):
    # The session has no response for the second URL and raises KeyError.
    session = fake_session({"https://img/ok": PNG_BYTES})
    stems = [tmp_path / "cat0", tmp_path / "cat1"]

    paths = asyncio.run(
        download_n(["https://img/ok", "https://img/missing"], stems, session=session)
    )

    assert len(paths) == 1
    assert paths[0].read_bytes() == PNG_BYTES
