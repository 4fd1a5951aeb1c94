"""Synthetic topology generators."""

from fibgen.topology.generators import (
    GeneratedTopology,
    full_mesh,
    generate_from_config,
    mesh_2d,
    write_generated,
)

__all__ = [
    "GeneratedTopology",
    "full_mesh",
    "generate_from_config",
    "mesh_2d",
    "write_generated",
]
