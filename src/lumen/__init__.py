"""Taichi-based CPU ray tracer with deterministic and Monte Carlo modes.

This package renders programmatically built scenes on the CPU, with support for:
- Whitted-style ray tracing with point and directional lights, hard shadows,
  mirror reflection and Fresnel-weighted refraction
- Monte Carlo path tracing driven by emissive surfaces
- Spheres, planes, triangles, quads and axis-aligned boxes
- Progressive accumulation that is reproducible for a fixed seed

Subpackages:
    core: Vector kernel, random streams, integrators, and the frame loop
    geometry: Shape primitives and intersection algorithms
    materials: Diffuse, metal, dielectric and emissive surface models
    scene: Scene description, device tables, lights and background
    camera: Thin-lens camera with per-pixel ray generation
    output: Tone mapping and image encoding for finished frames

Taichi must be initialised (see lumen.backend.init_backend) before importing
any subpackage, because they declare Taichi fields at import time.
"""

__version__ = "0.1.0"
