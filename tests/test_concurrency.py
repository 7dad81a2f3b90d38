import threading

from installcmx.ini_store import IniStore, LoadState, open_store


def _run_threads(count, target):
    barrier = threading.Barrier(count)
    errors = []

    def worker(i):
        try:
            barrier.wait()
            target(i)
        except Exception as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []


def test_concurrent_setters_lose_nothing(tmp_path):
    path = str(tmp_path / "many.ini")
    store = open_store(path)

    def setter(i):
        for j in range(50):
            store.set_int(f"S{i % 4}", f"k{i}_{j}", j)

    _run_threads(8, setter)
    store.flush()

    sections = open_store(path).snapshot()
    assert sum(len(entries) for entries in sections.values()) == 8 * 50
    assert sections["S1"]["k5_49"] == "49"


def test_concurrent_first_access_loads_once(tmp_path, monkeypatch):
    p = tmp_path / "lazy.ini"
    p.write_text("[S]\nk=v\n", encoding="utf-8")
    store = IniStore(str(p), lazy=True)

    loads = []
    real_load = store._load_locked

    def counting_load():
        loads.append(1)
        real_load()

    monkeypatch.setattr(store, "_load_locked", counting_load)

    results = []
    _run_threads(8, lambda i: results.append(store.get_string("S", "k", "default")))

    assert loads == [1]
    assert results == ["v"] * 8
    assert store.state is LoadState.LOADED
    assert not store.dirty


def test_concurrent_get_misses_agree_on_default(tmp_path):
    store = open_store(str(tmp_path / "miss.ini"))
    results = []
    _run_threads(6, lambda i: results.append(store.get_int("S", "shared", 10)))
    assert results == [10] * 6
    assert store.snapshot() == {"S": {"shared": "10"}}
