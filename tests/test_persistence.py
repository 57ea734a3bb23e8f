"""Tests for the snapshot store: export, import, clear."""
from __future__ import annotations

from terrastream.world.chunk import Chunk, ChunkSnapshot
from terrastream.world.grid import ChunkCoord
from terrastream.world.persistence import PersistenceStore
from terrastream.world.placement import ObjectPlacement


def _chunk(x: int, z: int, height: float = 4.0) -> Chunk:
    placements = (
        ObjectPlacement(1.5, 78.897, -2.25),
        ObjectPlacement(-20.0, 78.897, 30.5),
    )
    return Chunk(coord=ChunkCoord(x, z), height=height, placements=placements, handle=object())


def test_snapshot_drops_handle_and_overwrites() -> None:
    store = PersistenceStore()
    first = store.snapshot(_chunk(0, 128, height=4.0))
    assert first == ChunkSnapshot(ChunkCoord(0, 128), 4.0, _chunk(0, 128).placements)
    store.snapshot(_chunk(0, 128, height=-8.0))
    assert len(store) == 1
    assert store.get((0, 128)).height == -8.0


def test_export_clear_import_restores_state() -> None:
    store = PersistenceStore()
    for x in (-128, 0, 128):
        store.snapshot(_chunk(x, 256, height=float(x) / 32.0))
    before = store.export_all()

    exported = store.export_all()
    store.clear()
    assert len(store) == 0
    store.import_all(exported)

    assert store.export_all() == before


def test_export_is_a_copy() -> None:
    store = PersistenceStore()
    store.snapshot(_chunk(0, 0))
    exported = store.export_all()
    exported.clear()
    assert (0, 0) in store


def test_import_plain_dicts() -> None:
    store = PersistenceStore(default_height=12.0)
    snap = _chunk(384, -128).snapshot()
    store.import_all({"384,-128": snap.to_dict()})
    assert store.get((384, -128)) == snap


def test_import_invalid_input_yields_empty_store() -> None:
    store = PersistenceStore()
    store.snapshot(_chunk(0, 0))
    store.import_all(None)
    assert len(store) == 0
    store.snapshot(_chunk(0, 0))
    store.import_all(["not", "a", "mapping"])  # type: ignore[arg-type]
    assert len(store) == 0


def test_import_missing_height_uses_origin() -> None:
    store = PersistenceStore(default_height=16.0)
    store.import_all(
        {
            "a": {"x": 0, "z": 128, "objects": [{"offset_x": 1, "offset_y": 2, "offset_z": 3}]},
            "b": {"x": 128, "z": 0, "height": "bogus"},
            "c": {"z": 0, "height": 4},  # no x: unusable
            "d": 17,
        }
    )
    assert len(store) == 2
    assert store.get((0, 128)).height == 16.0
    assert store.get((0, 128)).placements == (ObjectPlacement(1.0, 2.0, 3.0),)
    assert store.get((128, 0)).height == 16.0


def test_import_rekeys_by_coordinates() -> None:
    store = PersistenceStore()
    snap = _chunk(256, 256).snapshot()
    store.import_all({"wrong-key": snap})
    assert store.lookup(ChunkCoord(256, 256)) == snap


def test_import_skips_chunks_off_the_grid() -> None:
    store = PersistenceStore(grid_scale=128)
    store.import_all(
        {
            "a": {"x": 130, "z": 0, "height": 8.0},
            "b": {"x": 128, "z": 0, "height": 8.0},
            "c": ChunkSnapshot(ChunkCoord(64, 256), 4.0),
            "d": {"x": 128.5, "z": 0, "height": 8.0},
        }
    )
    assert list(store.export_all()) == [(128, 0)]
    assert (130, 0) not in store


def test_import_non_finite_height_uses_origin() -> None:
    store = PersistenceStore(default_height=16.0)
    store.import_all(
        {
            "a": {"x": 0, "z": 0, "height": float("nan")},
            "b": {"x": 128, "z": 0, "height": float("inf")},
            "c": {"x": 256, "z": 0, "height": "-inf"},
        }
    )
    assert [store.get(k).height for k in ((0, 0), (128, 0), (256, 0))] == [16.0, 16.0, 16.0]


def test_import_drops_objects_with_non_finite_offsets() -> None:
    store = PersistenceStore()
    store.import_all(
        {
            "a": {
                "x": 0,
                "z": 0,
                "height": 4.0,
                "objects": [
                    {"offset_x": float("nan"), "offset_y": 1.0, "offset_z": 2.0},
                    {"offset_x": 1.0, "offset_y": float("inf"), "offset_z": 2.0},
                    {"offset_x": 3.0, "offset_y": 78.897, "offset_z": -3.0},
                ],
            },
            "b": {"x": float("nan"), "z": 0, "height": 4.0},
        }
    )
    assert len(store) == 1
    assert store.get((0, 0)).placements == (ObjectPlacement(3.0, 78.897, -3.0),)
