"""
Versioned output payload for map viewers.

``build_world_payload`` turns a ``WorldResult`` into a JSON-ready dict
with camelCase keys. Per-cell arrays are flat and row-major, with length
width * height. Clients that prefer typed arrays can use the base64
encoders, which write little-endian float32 and uint32 values.
"""

import base64
from typing import Any, Dict, List, Optional

import numpy as np

from .core.hydrology import River
from .core.pipeline import WorldResult

SCHEMA_VERSION = 1


def encode_float32(values: np.ndarray) -> str:
    """Base64 of little-endian float32 values."""
    return base64.b64encode(np.ascontiguousarray(values, dtype="<f4").tobytes()).decode("ascii")


def encode_uint32(values: np.ndarray) -> str:
    """Base64 of little-endian uint32 values."""
    return base64.b64encode(np.ascontiguousarray(values, dtype="<u4").tobytes()).decode("ascii")


def decode_float32(data: str) -> np.ndarray:
    return np.frombuffer(base64.b64decode(data), dtype="<f4")


def decode_uint32(data: str) -> np.ndarray:
    return np.frombuffer(base64.b64decode(data), dtype="<u4")


def _river_payload(river: River) -> Dict[str, Any]:
    return {
        "id": river.id,
        "cells": list(river.cells),
        "flow": round(river.flow, 4),
        "length": round(river.length, 4),
        "sourceCell": river.source_cell,
        "mouthCell": river.mouth_cell,
        "outlet": river.outlet,
        "parentId": river.parent_id,
    }


def build_world_payload(
    result: WorldResult, include_rivers: Optional[bool] = None, binary: bool = False
) -> Dict[str, Any]:
    """
    Build the schema version 1 payload of a world.

    Args:
        result: Generated world
        include_rivers: Add the river layer; defaults to the pipeline option
        binary: Encode per-cell arrays as base64 typed arrays instead of lists

    Returns:
        JSON-serialisable dict
    """
    if include_rivers is None:
        include_rivers = result.options.include_rivers

    heightmap = result.heightmap.data.astype(np.float32)
    biomes = result.biomes.ravel().astype(np.uint32)
    province_ids = result.pixel_to_id.ravel().astype(np.uint32)
    region_ids = result.region_ids.ravel().astype(np.uint32)

    if binary:
        layers: Dict[str, Any] = {
            "heightmap": encode_float32(heightmap),
            "biomes": encode_uint32(biomes),
            "provinceIds": encode_uint32(province_ids),
            "regionIds": encode_uint32(region_ids),
        }
    else:
        layers = {
            "heightmap": heightmap.tolist(),
            "biomes": biomes.tolist(),
            "provinceIds": province_ids.tolist(),
            "regionIds": region_ids.tolist(),
        }

    provinces: List[Dict[str, Any]] = [
        {
            "id": province.id,
            "isLand": province.is_land,
            "coastal": province.coastal,
            "area": province.area,
            "center": [round(province.center[0], 4), round(province.center[1], 4)],
        }
        for province in result.provinces
    ]
    regions = [
        {"id": region.id, "name": region.name, "provinceIds": list(region.province_ids)}
        for region in result.regions
    ]

    payload: Dict[str, Any] = {
        "schemaVersion": SCHEMA_VERSION,
        "width": result.width,
        "height": result.height,
        "worldType": result.params.world_type.value,
        "seed": str(result.params.seed),
        "landRatio": round(result.land_ratio, 6),
        "encoding": "base64" if binary else "json",
        **layers,
        "provinces": provinces,
        "regions": regions,
    }

    if include_rivers:
        payload["rivers"] = [_river_payload(river) for river in result.rivers.rivers]

    return payload
