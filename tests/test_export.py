"""Tests for the output payload."""

import json

import numpy as np

from mapgen.export import (
    SCHEMA_VERSION,
    build_world_payload,
    decode_float32,
    decode_uint32,
    encode_float32,
    encode_uint32,
)


class TestEncoding:
    """Test base64 typed arrays."""

    def test_float32_little_endian(self):
        encoded = encode_float32(np.array([1.0], dtype=np.float64))
        assert encoded == "AACAPw=="

    def test_uint32_little_endian(self):
        assert encode_uint32(np.array([1, 256])) == "AQAAAAABAAA="
        assert decode_uint32("AQAAAAABAAA=").tolist() == [1, 256]


class TestWorldPayload:
    """Test the versioned world payload."""

    def test_json_payload(self, example_world):
        payload = build_world_payload(example_world)
        assert payload["schemaVersion"] == SCHEMA_VERSION
        assert payload["width"] == 64 and payload["height"] == 64
        assert payload["seed"] == "42"
        assert payload["worldType"] == "EarthLike"
        assert payload["encoding"] == "json"
        for key in ("heightmap", "biomes", "provinceIds", "regionIds"):
            assert len(payload[key]) == 64 * 64
        assert len(payload["provinces"]) == 20
        assert set(payload["provinces"][0]) == {"id", "isLand", "coastal", "area", "center"}
        assert {"id", "name", "provinceIds"} <= set(payload["regions"][0])
        json.dumps(payload)

    def test_row_major_order(self, example_world):
        payload = build_world_payload(example_world)
        assert payload["provinceIds"][65] == int(example_world.pixel_to_id[1, 1])
        assert payload["heightmap"][64 * 3 + 5] == float(example_world.heightmap.values[3, 5])

    def test_rivers_follow_option(self, example_world):
        assert "rivers" in build_world_payload(example_world)
        assert "rivers" not in build_world_payload(example_world, include_rivers=False)

    def test_binary_payload(self, example_world):
        payload = build_world_payload(example_world, binary=True)
        assert payload["encoding"] == "base64"
        heights = decode_float32(payload["heightmap"])
        assert np.array_equal(heights, example_world.heightmap.data.astype(np.float32))
        regions = decode_uint32(payload["regionIds"])
        assert np.array_equal(regions, example_world.region_ids.ravel())
        json.dumps(payload)
