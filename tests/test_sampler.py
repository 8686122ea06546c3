"""Unit tests for the counter-based random streams and sampling routines.

Tests cover:
- Reproducibility of streams derived from (seed, pixel, sample)
- Range and distribution of next_float
- Unit sphere, unit vector, unit disk and cosine hemisphere samples
"""

import numpy as np
import taichi as ti

N = 4096


class TestStreams:
    """Tests for stream derivation and uniform floats."""

    def test_same_counters_give_same_values(self):
        """Identical (seed, pixel, sample) triples give identical draws."""
        from lumen.core.sampler import next_float, seed_sample_stream

        values = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            for k in range(2):
                state = seed_sample_stream(ti.u32(7), ti.u32(123), ti.u32(5))
                value, _ = next_float(state)
                values[k] = value

        test_kernel()
        assert values[0] == values[1]

    def test_neighbouring_counters_differ(self):
        """Adjacent pixels and sample indices start unrelated streams."""
        from lumen.core.sampler import next_float, seed_sample_stream

        values = ti.field(dtype=ti.f32, shape=N)

        @ti.kernel
        def test_kernel():
            for k in range(N):
                state = seed_sample_stream(ti.u32(1), ti.cast(k, ti.u32), ti.u32(0))
                value, _ = next_float(state)
                values[k] = value

        test_kernel()
        v = values.to_numpy()
        assert len(np.unique(v)) > N * 0.99

    def test_next_float_range_and_mean(self):
        """Draws lie in [0, 1) with mean about 0.5."""
        from lumen.core.sampler import next_float, seed_sample_stream

        values = ti.field(dtype=ti.f32, shape=N)

        @ti.kernel
        def test_kernel():
            for k in range(N):
                rng = seed_sample_stream(ti.u32(42), ti.cast(k, ti.u32), ti.u32(3))
                value, rng = next_float(rng)
                values[k] = value

        test_kernel()
        v = values.to_numpy()
        assert v.min() >= 0.0
        assert v.max() < 1.0
        assert abs(v.mean() - 0.5) < 0.02

    def test_successive_draws_advance(self):
        """Threading the state through next_float yields new values."""
        from lumen.core.sampler import next_float, seed_sample_stream

        first = ti.field(dtype=ti.f32, shape=())
        second = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            rng = seed_sample_stream(ti.u32(9), ti.u32(0), ti.u32(0))
            a, rng = next_float(rng)
            b, rng = next_float(rng)
            first[None] = a
            second[None] = b

        test_kernel()
        assert first[None] != second[None]


class TestSampling:
    """Tests for geometric sampling routines."""

    def test_random_in_unit_sphere(self):
        """Points lie strictly inside the unit sphere."""
        from lumen.core.sampler import random_in_unit_sphere, seed_sample_stream

        points = ti.Vector.field(3, dtype=ti.f32, shape=N)

        @ti.kernel
        def test_kernel():
            for k in range(N):
                rng = seed_sample_stream(ti.u32(3), ti.cast(k, ti.u32), ti.u32(0))
                p, rng = random_in_unit_sphere(rng)
                points[k] = p

        test_kernel()
        p = points.to_numpy()
        assert np.all(np.linalg.norm(p, axis=1) < 1.0)
        assert np.all(np.abs(p.mean(axis=0)) < 0.05)

    def test_random_unit_vector(self):
        """Directions have unit length and no preferred axis."""
        from lumen.core.sampler import random_unit_vector, seed_sample_stream

        dirs = ti.Vector.field(3, dtype=ti.f32, shape=N)

        @ti.kernel
        def test_kernel():
            for k in range(N):
                rng = seed_sample_stream(ti.u32(4), ti.cast(k, ti.u32), ti.u32(0))
                d, rng = random_unit_vector(rng)
                dirs[k] = d

        test_kernel()
        d = dirs.to_numpy()
        assert np.allclose(np.linalg.norm(d, axis=1), 1.0, atol=1e-5)
        assert np.all(np.abs(d.mean(axis=0)) < 0.05)

    def test_random_in_unit_disk(self):
        """Points lie inside the unit disk in the xy-plane."""
        from lumen.core.sampler import random_in_unit_disk, seed_sample_stream

        points = ti.Vector.field(3, dtype=ti.f32, shape=N)

        @ti.kernel
        def test_kernel():
            for k in range(N):
                rng = seed_sample_stream(ti.u32(5), ti.cast(k, ti.u32), ti.u32(0))
                p, rng = random_in_unit_disk(rng)
                points[k] = p

        test_kernel()
        p = points.to_numpy()
        assert np.all(p[:, 2] == 0.0)
        assert np.all(p[:, 0] ** 2 + p[:, 1] ** 2 < 1.0)

    def test_cosine_hemisphere(self):
        """Samples stay above the surface with pdf cos(theta) / pi."""
        from lumen.core.sampler import sample_cosine_hemisphere, seed_sample_stream

        cosines = ti.field(dtype=ti.f32, shape=N)
        pdfs = ti.field(dtype=ti.f32, shape=N)

        @ti.kernel
        def test_kernel():
            normal = ti.math.normalize(ti.math.vec3(0.3, 1.0, -0.2))
            for k in range(N):
                rng = seed_sample_stream(ti.u32(6), ti.cast(k, ti.u32), ti.u32(0))
                d, pdf, rng = sample_cosine_hemisphere(normal, rng)
                cosines[k] = ti.math.dot(d, normal)
                pdfs[k] = pdf

        test_kernel()
        c = cosines.to_numpy()
        assert np.all(c >= -1e-6)
        assert np.allclose(pdfs.to_numpy(), c / np.pi, atol=1e-5)
        # E[cos] = 2/3 for a cosine-weighted hemisphere
        assert abs(c.mean() - 2.0 / 3.0) < 0.02
